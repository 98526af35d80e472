"""Exception taxonomy for the refinery pipeline.

Everything below ``RefineryError`` is recoverable: the pipeline either
falls back to the original prompt or to the heuristic analysis.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from refinery.schemas.analysis import PromptAnalysis


class RefineryError(Exception):
    """Base class for all refinery errors."""


class EmptyInputError(RefineryError):
    """The prompt was empty or whitespace-only.

    ``placeholder`` holds the floor-score analysis so callers can render
    something without running the analyzers.
    """

    def __init__(self, placeholder: PromptAnalysis | None = None) -> None:
        super().__init__("Prompt is empty; enter some text to analyze.")
        self.placeholder = placeholder


class UnknownPatternError(RefineryError):
    """A domain pattern id is not in the library."""

    def __init__(self, pattern_id: str) -> None:
        super().__init__(f"Unknown domain pattern: {pattern_id!r}")
        self.pattern_id = pattern_id


class TemplateIncompleteError(RefineryError):
    """Placeholders were left unfilled after substitution."""

    def __init__(self, pattern_id: str, remaining: list[str]) -> None:
        super().__init__(
            f"Pattern {pattern_id!r} has unfilled placeholders: {', '.join(remaining)}"
        )
        self.pattern_id = pattern_id
        self.remaining = remaining


class ProviderUnavailableError(RefineryError):
    """The external LLM provider could not produce an enhanced analysis."""

    def __init__(self, message: str, *, provider: str = "", status: int | None = None) -> None:
        super().__init__(message)
        self.provider = provider
        self.status = status


class ProviderRateLimitError(ProviderUnavailableError):
    """Local request window exhausted, or 429 retries ran out."""
