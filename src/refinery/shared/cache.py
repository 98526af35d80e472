"""In-memory TTL cache for analysis and optimization results.

Expiry is lazy: ``get`` drops an expired entry when it sees one, and
``purge_expired`` sweeps the rest. Nothing is persisted.
"""

from __future__ import annotations

import hashlib
import json
import logging
import time
from typing import Any, Callable, Generic, TypeVar

from pydantic import BaseModel

logger = logging.getLogger(__name__)

V = TypeVar("V")


def cache_key(kind: str, **parts: Any) -> str:
    """SHA-256 over ``kind`` and the keyword parts (order-independent).

    Pydantic models are dumped to plain dicts first.
    """
    normalized = {
        name: value.model_dump(mode="json") if isinstance(value, BaseModel) else value
        for name, value in parts.items()
    }
    payload = json.dumps({"kind": kind, **normalized}, sort_keys=True, default=str)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


class TTLCache(Generic[V]):
    """Key/value map whose entries expire ``ttl`` seconds after ``put``."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[float, V]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def put(self, key: str, value: V, ttl: float) -> None:
        if ttl <= 0:
            raise ValueError(f"ttl must be positive, got {ttl}")
        self._entries[key] = (self._clock() + ttl, value)

    def get(self, key: str) -> V | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def clear(self) -> None:
        self._entries.clear()

    def purge_expired(self) -> int:
        """Drop every expired entry; returns how many were removed."""
        now = self._clock()
        expired = [key for key, (expires_at, _) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("Purged %d expired cache entries", len(expired))
        return len(expired)
