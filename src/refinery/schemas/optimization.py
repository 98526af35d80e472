"""Optimization options and result models."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field, computed_field

from refinery.schemas.analysis import (
    ContextDepth,
    EmotionalIntensity,
    EmotionalTone,
    PromptAnalysis,
)

Mode = Literal["system", "normal"]
OutputFormat = Literal["json", "markdown", "list", "steps"]


class OptimizationOptions(BaseModel):
    """Boolean switches that drive the composer and the layered techniques."""

    use_chain_of_thought: bool = False
    use_few_shot: bool = False
    use_react: bool = False
    use_persona: bool = False
    use_constraints: bool = False
    optimize_for_tokens: bool = False
    use_tree_of_thoughts: bool = False
    use_self_consistency: bool = False
    use_role_play: bool = False

    # Layers beyond the core option set
    use_advanced_techniques: bool = False
    use_domain_optimization: bool = False
    use_context_prompting: bool = False
    use_emotional_prompting: bool = False

    emotional_tone: EmotionalTone = "neutral"
    emotional_intensity: EmotionalIntensity = "moderate"
    context_depth: ContextDepth = "detailed"
    output_format: OutputFormat | None = None


class TokenCount(BaseModel):
    original: int
    optimized: int

    @computed_field
    @property
    def saved(self) -> int:
        return self.original - self.optimized

    @computed_field
    @property
    def efficiency(self) -> float:
        """Percentage change relative to the original (negative = grew)."""
        if self.original == 0:
            return 0.0
        return round(self.saved / self.original * 100, 1)


class OptimizationResult(BaseModel):
    """The rewritten prompt plus the bookkeeping needed to explain it."""

    original_prompt: str
    optimized_prompt: str
    applied_techniques: list[str] = []
    analysis: PromptAnalysis
    token_count: TokenCount
    estimated_improvement: int = Field(ge=0, le=95)
    mode: Mode = "normal"
    domain: str = "general"
    platform: str = "generic"
    generated_at: str = Field(default_factory=lambda: datetime.now().isoformat())

    def comparable(self) -> dict[str, Any]:
        """Dump without the timestamp, for equality checks."""
        return self.model_dump(exclude={"generated_at"})
