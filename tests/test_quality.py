"""Tests for the basic quality scorer and the semantic analyzer."""

from __future__ import annotations

import pytest

from refinery.analysis.quality import EMPTY_PROMPT_SUGGESTION, floor_score, score_quality
from refinery.analysis.semantic import (
    analyze_context_factors,
    analyze_semantic_structure,
    detect_prompt_tone,
    identify_issues,
    optimization_priority,
    predict_quality,
    readability_score,
)


class TestScoreQuality:
    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_empty_input_gets_floor(self, text: str) -> None:
        score = score_quality(text)
        assert (score.clarity, score.specificity, score.effectiveness) == (10, 10, 10)
        assert score.issues.is_vague
        assert score.issues.is_overly_broad
        assert score.issues.lacks_context
        assert score.issues.suggestions == [EMPTY_PROMPT_SUGGESTION]

    def test_floor_score_matches_empty(self) -> None:
        assert score_quality("") == floor_score()

    def test_bare_greeting(self) -> None:
        score = score_quality("Hello")
        assert (score.clarity, score.specificity, score.effectiveness) == (50, 50, 50)
        assert score.issues.is_vague
        assert score.issues.is_overly_broad
        assert score.issues.lacks_context
        assert len(score.issues.suggestions) == 5
        assert score.issues.suggestions[0].startswith("Your prompt is too short")

    def test_question_mark_bonus(self) -> None:
        assert score_quality("Hello?").effectiveness == 60

    def test_sort_prompt_scores(self, sort_prompt: str) -> None:
        score = score_quality(sort_prompt)
        assert score.clarity == 70
        assert score.specificity == 90
        assert score.effectiveness == 70
        assert not score.issues.is_vague
        assert not score.issues.is_overly_broad
        assert score.issues.lacks_context  # no background marker

    def test_long_sentence_suggestion(self) -> None:
        text = "Describe " + " ".join(["thing"] * 25)
        assert any("long sentences" in s for s in score_quality(text).issues.suggestions)

    @pytest.mark.parametrize(
        "text",
        [
            "x",
            "Given that we use Python 3, write a FastAPI endpoint, for example /users, "
            "that must return at most 50 rows. First validate input, then query.",
            "? ? ? ?",
        ],
    )
    def test_scores_stay_on_canonical_scale(self, text: str) -> None:
        score = score_quality(text)
        for value in (score.clarity, score.specificity, score.effectiveness):
            assert 10 <= value <= 100
            assert value % 10 == 0


class TestSemanticStructure:
    def test_single_word(self) -> None:
        s = analyze_semantic_structure("Hello")
        assert s.coherence == 45
        assert s.clarity == 100
        assert s.completeness == 0
        assert s.specificity == 30

    def test_completeness_markers(self) -> None:
        s = analyze_semantic_structure("Given the context, my goal is a report that must be short")
        assert s.completeness == 100

    def test_missing_logical_flow(self) -> None:
        s = analyze_semantic_structure("Cats sleep. Dogs bark.")
        assert s.coherence == 10

    def test_bounds(self, sort_prompt: str) -> None:
        s = analyze_semantic_structure(sort_prompt * 20)
        for value in (s.coherence, s.clarity, s.completeness, s.specificity):
            assert 0 <= value <= 100


class TestContextFactors:
    def test_sort_prompt_flags(self, sort_prompt: str) -> None:
        factors = analyze_context_factors(sort_prompt)
        assert factors.has_constraints
        assert factors.has_specific_terms
        assert not factors.has_background

    def test_tone_first_match_wins(self) -> None:
        assert detect_prompt_tone("Please fix this urgent problem") == "urgent"
        assert detect_prompt_tone("Thank you for the help") == "professional"
        assert detect_prompt_tone("sort these numbers") == "neutral"


class TestPrediction:
    def test_greeting_prediction(self) -> None:
        structure = analyze_semantic_structure("Hello")
        factors = analyze_context_factors("Hello")
        prediction = predict_quality("Hello", structure, factors)
        assert prediction.estimated_effectiveness == 34
        assert prediction.improvement_potential == 66
        assert prediction.confidence_score == 60

    def test_issues_for_vague_prompt(self) -> None:
        structure = analyze_semantic_structure("Hello")
        factors = analyze_context_factors("Hello")
        issues = identify_issues(structure, factors)
        assert [i.type for i in issues] == ["specificity", "goals"]
        assert issues[0].severity == "high"

    @pytest.mark.parametrize(
        ("potential", "priority"),
        [(61, "high"), (60, "medium"), (31, "medium"), (30, "low"), (0, "low")],
    )
    def test_priority_thresholds(self, potential: int, priority: str) -> None:
        assert optimization_priority(potential) == priority

    def test_readability_penalizes_long_sentences(self) -> None:
        assert readability_score("Short and sweet.") == 100
        assert readability_score(" ".join(["word"] * 21) + ".") == 70
