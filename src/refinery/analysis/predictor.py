"""Outcome forecaster: predicts how well a prompt will perform.

Effectiveness blends weighted semantic metrics (70%) with a context score
(30%), then applies complexity and intent bonuses and per-issue penalties.
Confidence is scaled by an accuracy factor that recorded feedback can
move; the history lives on the predictor instance and is never persisted.
"""

from __future__ import annotations

import logging

from refinery.analysis.lexicon import clamp, round_half_up
from refinery.schemas.analysis import (
    ContextFactors,
    Issue,
    OutcomeFeedback,
    OutcomeForecast,
    SemanticStructure,
)

logger = logging.getLogger(__name__)

INITIAL_ACCURACY = 0.75
_MIN_FEEDBACK = 5
_ACCURACY_WINDOW = 20
_HISTORY_LIMIT = 100

_COMPLEXITY_BONUS = {"simple": 5, "moderate": 10, "complex": 5, "expert": 0}
_SEVERITY_PENALTY = {"high": 15, "medium": 8, "low": 3}


def _semantic_score(structure: SemanticStructure) -> float:
    return (
        structure.coherence * 0.25
        + structure.clarity * 0.3
        + structure.completeness * 0.25
        + structure.specificity * 0.2
    )


def _context_score(factors: ContextFactors) -> int:
    return (
        (20 if factors.has_background else 0)
        + (25 if factors.has_constraints else 0)
        + (15 if factors.has_examples else 0)
        + (25 if factors.has_goals else 0)
        + (15 if factors.emotional_tone == "professional" else 10)
    )


def _intent_bonus(intent: str, factors: ContextFactors) -> int:
    match intent:
        case "problem_solving":
            return 15 if factors.has_constraints else 5
        case "creative":
            # Examples tend to narrow creative output.
            return 10 if factors.has_examples else 15
        case "analytical":
            return 15 if factors.has_background else 5
        case "instructional":
            return 20 if factors.has_goals and factors.has_constraints else 8
        case _:
            return 5


def _risk_factors(
    structure: SemanticStructure, factors: ContextFactors, complexity: str, issues: list[Issue]
) -> list[str]:
    risks: list[str] = []
    if structure.clarity < 60:
        risks.append("Low clarity may lead to misunderstanding")
    if structure.specificity < 50:
        risks.append("Vague requirements may produce generic responses")
    if not factors.has_goals:
        risks.append("Lack of clear objectives may result in unfocused output")
    if complexity == "expert" and structure.coherence < 70:
        risks.append("Complex prompt with poor structure increases confusion risk")
    if sum(1 for issue in issues if issue.severity == "high") > 2:
        risks.append("Multiple high-severity issues detected")
    return risks


def _success_factors(
    structure: SemanticStructure, factors: ContextFactors, complexity: str
) -> list[str]:
    found: list[str] = []
    if structure.coherence > 80:
        found.append("Well-structured and coherent prompt")
    if structure.specificity > 75:
        found.append("Specific requirements and constraints provided")
    if factors.has_background and factors.has_goals:
        found.append("Clear context and objectives established")
    if factors.has_examples:
        found.append("Examples provided for better understanding")
    if factors.emotional_tone == "professional":
        found.append("Professional tone encourages quality responses")
    if complexity in ("moderate", "complex"):
        found.append("Appropriate complexity level for detailed responses")
    return found


class OutcomePredictor:
    """Forecasts prompt outcomes and calibrates itself from feedback."""

    def __init__(self) -> None:
        self.accuracy = INITIAL_ACCURACY
        self.history: list[OutcomeFeedback] = []

    def forecast(
        self,
        structure: SemanticStructure,
        factors: ContextFactors,
        complexity: str,
        intent: str,
        issues: list[Issue],
    ) -> OutcomeForecast:
        effectiveness = _semantic_score(structure) * 0.7 + _context_score(factors) * 0.3
        effectiveness += _COMPLEXITY_BONUS.get(complexity, 0)
        effectiveness += _intent_bonus(intent, factors)
        effectiveness -= sum(_SEVERITY_PENALTY[issue.severity] for issue in issues)

        flags = (factors.has_background, factors.has_constraints, factors.has_examples, factors.has_goals)
        confidence = 70 + (structure.average - 50) * 0.3
        # The tone always counts as one present factor.
        confidence += (sum(flags) + 1) * 3
        confidence -= len(issues) * 5
        confidence *= self.accuracy

        return OutcomeForecast(
            predicted_effectiveness=int(clamp(round_half_up(effectiveness), 0, 100)),
            confidence=int(clamp(round_half_up(confidence), 20, 95)),
            improvement_potential=int(clamp(round_half_up(100 - effectiveness), 0, 100)),
            risk_factors=_risk_factors(structure, factors, complexity, issues),
            success_factors=_success_factors(structure, factors, complexity),
        )

    def record_feedback(self, feedback: OutcomeFeedback) -> None:
        self.history.append(feedback)
        del self.history[:-_HISTORY_LIMIT]
        self._update_accuracy()

    def _update_accuracy(self) -> None:
        if len(self.history) < _MIN_FEEDBACK:
            return
        recent = self.history[-_ACCURACY_WINDOW:]
        total = sum(
            max(0.0, 1 - abs(f.predicted_effectiveness - f.actual_effectiveness) / 100)
            for f in recent
        )
        self.accuracy = total / len(recent)
        logger.debug("Prediction accuracy now %.3f over %d samples", self.accuracy, len(recent))

    def common_issues(self) -> list[str]:
        """Top three issue kinds behind low-satisfaction feedback (< 6/10)."""
        counts: dict[str, int] = {}
        for feedback in self.history:
            if feedback.satisfaction >= 6:
                continue
            for risk in feedback.risk_factors:
                if "clarity" in risk:
                    counts["clarity"] = counts.get("clarity", 0) + 1
                if "specific" in risk:
                    counts["specificity"] = counts.get("specificity", 0) + 1
                if "objectives" in risk:
                    counts["goals"] = counts.get("goals", 0) + 1
        ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
        return [name for name, _ in ranked[:3]]

    def recommendations(self) -> list[str]:
        issues = self.common_issues()
        recs: list[str] = []
        if "clarity" in issues:
            recs.append("Focus on using simpler, clearer language based on your feedback history")
        if "specificity" in issues:
            recs.append("Add more specific details - you've indicated this helps in previous prompts")
        if "goals" in issues:
            recs.append("State the objective explicitly; unfocused output has come up before")
        return recs
