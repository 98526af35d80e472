"""Technique selector: filters the catalog against an analysis and ranks it."""

from __future__ import annotations

from refinery.schemas.analysis import PromptAnalysis
from refinery.schemas.techniques import OptimizationTechnique
from refinery.techniques.catalog import TECHNIQUES

# Prompts whose improvement potential is at or below this get no techniques.
IMPROVEMENT_GATE = 30


def is_applicable(technique: OptimizationTechnique, analysis: PromptAnalysis) -> bool:
    rules = technique.applicability
    return (
        analysis.complexity in rules.complexity
        and analysis.task_intent in rules.intents
        and rules.accepts_domain(analysis.domain)
    )


def select_techniques(
    analysis: PromptAnalysis, limit: int = 3
) -> list[OptimizationTechnique]:
    """Top ``limit`` applicable techniques by effectiveness.

    ``sorted`` is stable, so equal effectiveness keeps catalog order.
    """
    if analysis.quality_prediction.improvement_potential <= IMPROVEMENT_GATE:
        return []
    candidates = [t for t in TECHNIQUES if is_applicable(t, analysis)]
    return sorted(candidates, key=lambda t: t.effectiveness, reverse=True)[:limit]
