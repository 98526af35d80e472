"""Result builder: token counts and the estimated improvement score."""

from __future__ import annotations

from refinery.analysis.lexicon import estimate_tokens
from refinery.schemas.analysis import PromptAnalysis
from refinery.schemas.optimization import (
    Mode,
    OptimizationOptions,
    OptimizationResult,
    TokenCount,
)

IMPROVEMENT_BASE = 60
IMPROVEMENT_CAP = 95
PER_TECHNIQUE = 4

_OPTION_BONUSES: tuple[tuple[str, int], ...] = (
    ("use_chain_of_thought", 8),
    ("use_persona", 6),
    ("use_react", 10),
    ("use_tree_of_thoughts", 12),
    ("use_self_consistency", 9),
    ("use_role_play", 7),
)


def estimate_improvement(
    analysis: PromptAnalysis, technique_count: int, options: OptimizationOptions, domain: str
) -> int:
    """Weighted bonus sum, capped at 95.

    Option bonuses count whenever the option is set, whether or not its
    precondition let the technique run.
    """
    score = IMPROVEMENT_BASE
    if analysis.complexity in ("complex", "expert"):
        score += 15
    score += PER_TECHNIQUE * technique_count
    for flag, bonus in _OPTION_BONUSES:
        if getattr(options, flag):
            score += bonus
    if domain != "general":
        score += 5
    return max(0, min(score, IMPROVEMENT_CAP))


def build_result(
    original: str,
    optimized: str,
    applied: list[str],
    analysis: PromptAnalysis,
    options: OptimizationOptions,
    mode: Mode,
    domain: str,
    platform: str = "generic",
) -> OptimizationResult:
    return OptimizationResult(
        original_prompt=original,
        optimized_prompt=optimized,
        applied_techniques=list(applied),
        analysis=analysis,
        token_count=TokenCount(
            original=estimate_tokens(original),
            optimized=estimate_tokens(optimized),
        ),
        estimated_improvement=estimate_improvement(analysis, len(applied), options, domain),
        mode=mode,
        domain=domain,
        platform=platform,
    )
