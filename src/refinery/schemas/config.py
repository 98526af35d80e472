"""Configuration schema: validates refinery.yml."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator, model_validator

from refinery.schemas.analysis import KNOWN_DOMAINS, EmotionalTone
from refinery.schemas.optimization import Mode, OptimizationOptions


class CacheSettings(BaseModel):
    """TTLs (seconds) for the in-memory result cache."""

    enabled: bool = True
    analysis_ttl: float = 300.0
    optimization_ttl: float = 600.0

    @model_validator(mode="after")
    def check_positive_ttls(self) -> "CacheSettings":
        if self.analysis_ttl <= 0 or self.optimization_ttl <= 0:
            raise ValueError("Cache TTLs must be positive")
        return self


class ProviderSettings(BaseModel):
    """Optional external LLM used for the enhanced analysis path."""

    name: str = "openai"  # rate window key: openai, cohere, anthropic, google, mistral, ...
    model: str = "gpt-4o"
    base_url: str = ""  # empty = SDK default; any OpenAI-compatible endpoint works
    api_key_env: str = "OPENAI_API_KEY"
    timeout: float = Field(default=30.0, gt=0)


class RefineryConfig(BaseModel):
    """Top-level configuration loaded from refinery.yml.

    Every field has a default, so an empty mapping is a valid config.
    """

    default_domain: str = ""  # empty = detect from the prompt
    mode: Mode = "normal"
    platform: str = "generic"
    tone: EmotionalTone = "neutral"

    options: OptimizationOptions = OptimizationOptions()
    cache: CacheSettings = CacheSettings()
    provider: ProviderSettings = ProviderSettings()

    # Output
    output_directory: str = "./output"

    @field_validator("default_domain")
    @classmethod
    def check_known_domain(cls, v: str) -> str:
        v = v.strip().lower()
        if v and v not in KNOWN_DOMAINS:
            raise ValueError(
                f"Unknown default_domain {v!r}; expected one of {', '.join(KNOWN_DOMAINS)}"
            )
        return v
