"""Async client for the optional LLM-backed "enhanced" analysis.

Targets any OpenAI-compatible chat completions endpoint. The SDK's own
retries are disabled; this module retries only on 429 and turns every
other API failure into ``ProviderUnavailableError`` so the pipeline can
fall back to the heuristic analysis.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import re
import time
from collections import deque
from typing import Any, Callable

from openai import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AsyncOpenAI,
    RateLimitError,
)
from pydantic import ValidationError

from refinery.errors import ProviderRateLimitError, ProviderUnavailableError
from refinery.schemas.analysis import EnhancedAnalysis
from refinery.schemas.config import ProviderSettings

logger = logging.getLogger(__name__)

# Requests per rolling minute, per provider
RATE_LIMITS: dict[str, int] = {
    "openai": 60,
    "cohere": 40,
    "anthropic": 50,
    "google": 30,
    "mistral": 40,
    "perplexity": 35,
}
DEFAULT_RATE_LIMIT = 20
_WINDOW_SECONDS = 60.0

# Retries after the first attempt; delay is 2**attempt seconds (1, 2, 4)
_MAX_RETRIES = 3

ANALYSIS_SYSTEM_PROMPT = (
    "You are a prompt analysis system. Analyze the provided text for clarity, specificity, "
    "effectiveness, and suggest improvements. Provide a structured JSON response."
)
OPTIMIZATION_SYSTEM_PROMPT = (
    "You are an advanced prompt optimization system. Apply the following techniques to "
    "optimize the prompt: {techniques}. Focus on the {domain} domain. Return a JSON object "
    "with the optimized prompt and analysis."
)


def extract_json(text: str) -> dict[str, Any]:
    """Extract a JSON object from text that may contain markdown fences."""
    text = text.strip()

    # 1. Clean JSON response
    if text.startswith("{"):
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            try:
                obj, _ = json.JSONDecoder().raw_decode(text)
                return obj
            except json.JSONDecodeError:
                pass

    # 2. ```json ... ``` or ``` ... ``` fenced block
    match = re.search(r"```(?:json)?\s*\n?(.*?)\n?```", text, re.DOTALL)
    if match:
        return json.loads(match.group(1).strip())

    # 3. First { onwards
    try:
        start = text.index("{")
        obj, _ = json.JSONDecoder().raw_decode(text, idx=start)
        return obj
    except (ValueError, json.JSONDecodeError):
        pass

    raise ValueError(
        f"Could not extract JSON from model response (length={len(text)}). "
        f"First 300 chars: {text[:300]!r}"
    )


class ProviderClient:
    """Thin async wrapper around the OpenAI SDK for prompt analysis calls.

    Provides two methods:
    - ``analyze_prompt``: scores a prompt, returned as ``EnhancedAnalysis``.
    - ``optimize_prompt``: asks the model to rewrite a prompt.
    """

    def __init__(
        self,
        settings: ProviderSettings | None = None,
        *,
        api_key: str | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.settings = settings or ProviderSettings()
        self.provider = self.settings.name.lower()
        self.requests_per_minute = RATE_LIMITS.get(self.provider, DEFAULT_RATE_LIMIT)
        self._clock = clock
        self._recent: deque[float] = deque()

        key = api_key or os.environ.get(self.settings.api_key_env)
        if not key:
            raise ProviderUnavailableError(
                f"No API key found in ${self.settings.api_key_env}", provider=self.provider
            )
        self._client = AsyncOpenAI(
            api_key=key,
            base_url=self.settings.base_url or None,
            timeout=self.settings.timeout,
            max_retries=0,
        )

    # ------------------------------------------------------------------
    # Rate window and retries
    # ------------------------------------------------------------------

    def _reserve_slot(self) -> None:
        """Record a request, or raise if the rolling minute is already full."""
        now = self._clock()
        while self._recent and now - self._recent[0] >= _WINDOW_SECONDS:
            self._recent.popleft()
        if len(self._recent) >= self.requests_per_minute:
            raise ProviderRateLimitError(
                f"Local rate limit reached for {self.provider} "
                f"({self.requests_per_minute} requests/minute)",
                provider=self.provider,
            )
        self._recent.append(now)

    async def _call_with_retry(self, **kwargs: Any) -> Any:
        """Call chat.completions.create, backing off only on 429 errors."""
        for attempt in range(_MAX_RETRIES + 1):
            try:
                return await self._client.chat.completions.create(**kwargs)
            except RateLimitError as exc:
                if attempt == _MAX_RETRIES:
                    raise ProviderRateLimitError(
                        f"{self.provider} still rate limited after {_MAX_RETRIES} retries",
                        provider=self.provider,
                        status=429,
                    ) from exc
                delay = 2**attempt
                logger.warning(
                    "Rate limited (429), retrying in %ds (attempt %d/%d)",
                    delay, attempt + 1, _MAX_RETRIES,
                )
                await asyncio.sleep(delay)
            except APIStatusError as exc:
                raise ProviderUnavailableError(
                    f"{self.provider} returned HTTP {exc.status_code}",
                    provider=self.provider,
                    status=exc.status_code,
                ) from exc
            except (APIConnectionError, APITimeoutError) as exc:
                raise ProviderUnavailableError(
                    f"Could not reach {self.provider}: {exc}", provider=self.provider
                ) from exc

    async def _complete_json(self, system: str, user_message: str) -> dict[str, Any]:
        self._reserve_slot()
        response = await self._call_with_retry(
            model=self.settings.model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": user_message},
            ],
            response_format={"type": "json_object"},
        )
        if not response.choices:
            raise ProviderUnavailableError(
                f"Empty response from {self.provider}", provider=self.provider
            )
        content = response.choices[0].message.content or ""
        try:
            return extract_json(content)
        except ValueError as exc:
            raise ProviderUnavailableError(
                f"Unparseable response from {self.provider}: {exc}", provider=self.provider
            ) from exc

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def analyze_prompt(self, text: str) -> EnhancedAnalysis:
        data = await self._complete_json(ANALYSIS_SYSTEM_PROMPT, f'Analyze this prompt: "{text}"')
        return _to_enhanced(data, self.provider)

    async def optimize_prompt(self, text: str, techniques: list[str], domain: str) -> str:
        system = OPTIMIZATION_SYSTEM_PROMPT.format(
            techniques=", ".join(techniques) or "none", domain=domain
        )
        data = await self._complete_json(system, text)
        return _optimized_text(data, self.provider)


def _to_enhanced(data: dict[str, Any], provider: str) -> EnhancedAnalysis:
    try:
        return EnhancedAnalysis.model_validate(data)
    except ValidationError as exc:
        raise ProviderUnavailableError(
            f"Malformed analysis from {provider}: {exc}", provider=provider
        ) from exc


def _optimized_text(data: dict[str, Any], provider: str) -> str:
    for key in ("optimized_prompt", "optimizedPrompt"):
        value = data.get(key)
        if isinstance(value, str) and value.strip():
            return value
    raise ProviderUnavailableError(
        f"{provider} response has no optimized prompt", provider=provider
    )


# ======================================================================
# Dry-run mock client (zero API calls)
# ======================================================================

_DRY_RUN_ANALYSIS = json.dumps({
    "clarity": 7,
    "specificity": 6,
    "effectiveness": 7,
    "isVague": False,
    "isOverlyBroad": False,
    "lacksContext": True,
    "suggestions": ["State the intended audience and the expected output format."],
})


class DryRunClient:
    """Drop-in replacement for ProviderClient that makes zero API calls."""

    provider = "dry-run"

    async def analyze_prompt(self, text: str) -> EnhancedAnalysis:
        logger.info("[dry-run] analyze_prompt(%d chars)", len(text))
        return _to_enhanced(extract_json(_DRY_RUN_ANALYSIS), self.provider)

    async def optimize_prompt(self, text: str, techniques: list[str], domain: str) -> str:
        logger.info("[dry-run] optimize_prompt(%s, %s)", domain, ", ".join(techniques))
        data = {"optimized_prompt": f"{text}\n\n(Focus: {domain}; techniques: {', '.join(techniques) or 'none'})"}
        return _optimized_text(data, self.provider)
