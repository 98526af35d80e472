"""Tests for the reasoning scaffolds and the token optimization pass."""

from __future__ import annotations

import re

import pytest

from refinery.techniques.scaffolds import (
    COT_MARKER,
    FEW_SHOT_MARKER,
    REACT_MARKER,
    SELF_CONSISTENCY_MARKER,
    TOT_MARKER,
    add_chain_of_thought,
    add_few_shot,
    add_react,
    add_self_consistency,
    add_structured_output,
    add_tree_of_thoughts,
    examples_for_domain,
    optimize_for_tokens,
)

FILLER = re.compile(r"\b(please|kindly|if you could|would you mind|very|really|quite|extremely)\b", re.IGNORECASE)


class TestScaffolds:
    @pytest.mark.parametrize(
        ("scaffold", "marker"),
        [
            (add_chain_of_thought, COT_MARKER),
            (add_tree_of_thoughts, TOT_MARKER),
            (add_self_consistency, SELF_CONSISTENCY_MARKER),
            (add_react, REACT_MARKER),
        ],
    )
    def test_marker_present_and_idempotent(self, scaffold, marker: str) -> None:
        once = scaffold("Why is the build slow")
        assert marker in once
        assert "Why is the build slow" in once
        assert scaffold(once) == once

    def test_chain_of_thought_leads(self) -> None:
        assert add_chain_of_thought("Q").startswith(COT_MARKER + "\n\nQ\n\n")

    def test_react_wraps_task(self) -> None:
        assert "Task: Fix the deploy" in add_react("Fix the deploy")


class TestFewShot:
    def test_no_examples_is_identity(self) -> None:
        assert add_few_shot("Do X", []) == "Do X"
        assert examples_for_domain("legal") == []

    def test_block_layout(self) -> None:
        result = add_few_shot("Write a merge function", examples_for_domain("technology"))
        assert result.startswith(FEW_SHOT_MARKER)
        assert "Example 1:\nInput: Write a function to sort an array\nOutput: ```javascript" in result
        assert result.endswith("Now, please follow the same pattern for:\nWrite a merge function")


class TestStructuredOutput:
    def test_json(self) -> None:
        assert add_structured_output("Do X", "json") == (
            "Do X\n\nOutput Format: Please provide your response in valid JSON format "
            "with appropriate key-value pairs."
        )

    def test_idempotent(self) -> None:
        once = add_structured_output("Do X", "steps")
        assert add_structured_output(once, "list") == once


class TestTokenOptimization:
    def test_filler_removed(self) -> None:
        original = "Please could you very kindly explain this extremely carefully?"
        result = optimize_for_tokens(original)
        assert result == "could you explain this carefully?"
        assert len(result) < len(original)
        assert not FILLER.search(result)
        assert "  " not in result

    def test_flattens_whitespace(self) -> None:
        assert optimize_for_tokens("a\n\n  b\tc") == "a b c"

    def test_no_space_before_punctuation(self) -> None:
        assert optimize_for_tokens("Sort it really , fast .") == "Sort it, fast."

    def test_keeps_words_containing_filler(self) -> None:
        assert optimize_for_tokens("Everything is pleasant") == "Everything is pleasant"
