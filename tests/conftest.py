"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from refinery.pipeline import PromptRefinery
from refinery.shared.cache import TTLCache
from refinery.shared.provider_client import ProviderClient


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def sort_prompt() -> str:
    return (
        "Write a Python function to sort a list of 10000 integers efficiently, handling "
        "duplicates and ensuring O(n log n) complexity, with unit tests."
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def refinery(clock: FakeClock) -> PromptRefinery:
    """A pipeline with its own cache, isolated from the module default."""
    return PromptRefinery(cache=TTLCache(clock=clock))


@pytest.fixture
def tmp_config(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    cfg = tmp_path / "refinery.yml"
    cfg.write_text(
        """\
default_domain: technology
mode: normal
platform: gpt-4o
options:
  use_chain_of_thought: true
output_directory: "{out}"
""".format(out=str(tmp_path / "output"))
    )
    return cfg


@pytest.fixture
def mock_provider_client(clock: FakeClock) -> ProviderClient:
    """Return a ProviderClient with a mocked OpenAI SDK underneath."""
    client = ProviderClient(api_key="test-key", clock=clock)
    client._client = AsyncMock()
    return client
