"""Pydantic models for the technique catalog and the domain pattern library."""

from __future__ import annotations

from typing import Callable

from pydantic import BaseModel, ConfigDict, Field


class TechniqueContext(BaseModel):
    """Extra inputs a technique implementation may read."""

    domain: str = "general"


TechniqueFn = Callable[[str, TechniqueContext | None], str]
"""Signature: (prompt, context) -> rewritten prompt. Must be pure."""


class Applicability(BaseModel):
    """Which analyses a technique is allowed to run on."""

    model_config = ConfigDict(frozen=True)

    complexity: tuple[str, ...]
    intents: tuple[str, ...]
    domains: tuple[str, ...] = ()  # empty = any domain

    def accepts_domain(self, domain: str) -> bool:
        return not self.domains or domain in self.domains or "general" in self.domains


class OptimizationTechnique(BaseModel):
    """An immutable catalog entry."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    category: str  # "meta", "structure", "emotional", "reasoning", "domain"
    description: str
    applicability: Applicability
    effectiveness: int = Field(ge=1, le=100)
    marker: str  # substring that proves the technique already ran
    implementation: TechniqueFn

    def apply(self, prompt: str, context: TechniqueContext | None = None) -> str:
        if self.marker in prompt:
            return prompt
        return self.implementation(prompt, context)


class DomainPattern(BaseModel):
    """A fill-in-the-blanks template with ``{{variable}}`` slots."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    template: str
    variables: tuple[str, ...]
    domain: str
    effectiveness: int = Field(ge=1, le=100)
    intents: tuple[str, ...] = ()  # set for domain frameworks used by optimize_for_domain
    examples: tuple[str, ...] = ()
