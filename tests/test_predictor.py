"""Tests for the outcome forecaster and its feedback calibration."""

from __future__ import annotations

import pytest

from refinery.analysis.predictor import INITIAL_ACCURACY, OutcomePredictor
from refinery.schemas.analysis import ContextFactors, Issue, OutcomeFeedback, SemanticStructure

STRUCTURE = SemanticStructure(coherence=80, clarity=100, completeness=70, specificity=50)
FACTORS = ContextFactors(has_constraints=True, has_goals=True)


def _feedback(predicted: int, actual: int, satisfaction: int = 8, risks: list[str] | None = None):
    return OutcomeFeedback(
        predicted_effectiveness=predicted,
        actual_effectiveness=actual,
        satisfaction=satisfaction,
        risk_factors=risks or [],
    )


class TestForecast:
    def test_weighted_score(self) -> None:
        forecast = OutcomePredictor().forecast(STRUCTURE, FACTORS, "moderate", "problem_solving", [])
        assert forecast.predicted_effectiveness == 97
        assert forecast.improvement_potential == 3
        assert forecast.confidence == 65
        assert forecast.risk_factors == []
        assert forecast.success_factors == ["Appropriate complexity level for detailed responses"]

    def test_issue_penalties(self) -> None:
        issues = [Issue(type="specificity", severity="high", description="vague")]
        forecast = OutcomePredictor().forecast(STRUCTURE, FACTORS, "moderate", "problem_solving", issues)
        assert forecast.predicted_effectiveness == 82
        assert forecast.confidence == 61

    def test_risk_factors(self) -> None:
        weak = SemanticStructure(coherence=40, clarity=50, completeness=0, specificity=20)
        forecast = OutcomePredictor().forecast(weak, ContextFactors(), "expert", "informational", [])
        assert forecast.risk_factors == [
            "Low clarity may lead to misunderstanding",
            "Vague requirements may produce generic responses",
            "Lack of clear objectives may result in unfocused output",
            "Complex prompt with poor structure increases confusion risk",
        ]

    def test_bounds(self) -> None:
        empty = SemanticStructure(coherence=0, clarity=0, completeness=0, specificity=0)
        issues = [Issue(type="t", severity="high", description="d")] * 10
        forecast = OutcomePredictor().forecast(empty, ContextFactors(), "expert", "creative", issues)
        assert forecast.predicted_effectiveness == 0
        assert forecast.improvement_potential == 100
        assert 20 <= forecast.confidence <= 95


class TestFeedback:
    def test_needs_five_samples(self) -> None:
        predictor = OutcomePredictor()
        for _ in range(4):
            predictor.record_feedback(_feedback(80, 60))
        assert predictor.accuracy == INITIAL_ACCURACY
        predictor.record_feedback(_feedback(80, 60))
        assert predictor.accuracy == pytest.approx(0.8)

    def test_history_is_bounded(self) -> None:
        predictor = OutcomePredictor()
        for _ in range(105):
            predictor.record_feedback(_feedback(50, 50))
        assert len(predictor.history) == 100
        assert predictor.accuracy == 1.0

    def test_accuracy_scales_confidence(self) -> None:
        predictor = OutcomePredictor()
        before = predictor.forecast(STRUCTURE, FACTORS, "moderate", "problem_solving", []).confidence
        for _ in range(5):
            predictor.record_feedback(_feedback(50, 50))
        after = predictor.forecast(STRUCTURE, FACTORS, "moderate", "problem_solving", []).confidence
        assert after > before

    def test_common_issues_and_recommendations(self) -> None:
        predictor = OutcomePredictor()
        predictor.record_feedback(_feedback(70, 40, 3, ["Low clarity may lead to misunderstanding"]))
        predictor.record_feedback(_feedback(70, 40, 2, ["Low clarity may lead to misunderstanding"]))
        predictor.record_feedback(
            _feedback(70, 40, 4, ["Lack of clear objectives may result in unfocused output"])
        )
        # satisfied feedback is ignored
        predictor.record_feedback(_feedback(70, 70, 9, ["Too few specifics"]))
        assert predictor.common_issues() == ["clarity", "goals"]
        assert predictor.recommendations()[0].startswith("Focus on using simpler")
