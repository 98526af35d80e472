"""Tests for the improvement estimate and result assembly."""

from __future__ import annotations

from refinery.compose.result import build_result, estimate_improvement
from refinery.schemas.analysis import PromptAnalysis, QualityPrediction, QualityScore, SemanticStructure
from refinery.schemas.optimization import OptimizationOptions


def _analysis(complexity: str = "simple") -> PromptAnalysis:
    return PromptAnalysis(
        prompt="x",
        complexity=complexity,
        quality=QualityScore(clarity=50, specificity=50, effectiveness=50),
        semantic_structure=SemanticStructure(coherence=50, clarity=50, completeness=50, specificity=50),
        quality_prediction=QualityPrediction(
            estimated_effectiveness=50, improvement_potential=50, confidence_score=50
        ),
    )


class TestEstimateImprovement:
    def test_base(self) -> None:
        assert estimate_improvement(_analysis(), 0, OptimizationOptions(), "general") == 60

    def test_weighted_sum(self) -> None:
        options = OptimizationOptions(use_persona=True)
        assert estimate_improvement(_analysis("moderate"), 1, options, "technology") == 75

    def test_capped(self) -> None:
        options = OptimizationOptions(use_chain_of_thought=True)
        # 60 + 15 + 8 + 8 + 5 = 96
        assert estimate_improvement(_analysis("complex"), 2, options, "technology") == 95

    def test_option_bonus_counts_even_when_gated_off(self) -> None:
        options = OptimizationOptions(use_tree_of_thoughts=True)
        assert estimate_improvement(_analysis(), 0, options, "general") == 72


class TestBuildResult:
    def test_fields(self) -> None:
        result = build_result(
            "one two three",
            "one two three four five",
            ["Chain of Thought"],
            _analysis(),
            OptimizationOptions(use_chain_of_thought=True),
            "normal",
            "general",
        )
        assert result.token_count.original == 4
        assert result.token_count.optimized == 7
        assert result.token_count.saved == -3
        assert result.token_count.efficiency == -75.0
        assert result.model_dump()["token_count"] == {
            "original": 4, "optimized": 7, "saved": -3, "efficiency": -75.0
        }
        assert result.estimated_improvement == 72
        assert result.platform == "generic"
        assert "generated_at" not in result.comparable()
