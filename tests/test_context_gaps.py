"""Tests for the context gap detector and context enhancement."""

from __future__ import annotations

from refinery.analysis.context_gaps import analyze_context, apply_context_enhancement
from refinery.schemas.analysis import ContextInfo


def _infos() -> list[ContextInfo]:
    return [
        ContextInfo(type="audience", content="junior developers", priority="high"),
        ContextInfo(type="temporal", content="due Friday", priority="low"),
        ContextInfo(type="situational", content="we are migrating to Postgres"),
    ]


class TestAnalyzeContext:
    def test_bare_request_misses_four_types(self) -> None:
        report = analyze_context("Explain recursion")
        assert report.missing_context == ["situational", "background", "audience", "temporal"]
        assert report.completeness_score == 40
        # temporal gaps carry no gap message
        assert len(report.context_gaps) == 3

    def test_substring_matching_counts_short_keywords(self) -> None:
        report = analyze_context("Write a summary for the board")
        assert "audience" not in report.missing_context

    def test_domain_context_missing(self) -> None:
        report = analyze_context("Explain recursion", domain="technology")
        assert report.missing_context[-1] == "domain"
        assert report.suggestions[-1].content.startswith("Add technology-specific context")
        assert report.completeness_score == 25

    def test_domain_keyword_present(self) -> None:
        report = analyze_context("Explain this api", domain="technology")
        assert "domain" not in report.missing_context

    def test_suggestion_metadata(self) -> None:
        report = analyze_context("Explain recursion")
        audience = next(s for s in report.suggestions if s.type == "audience")
        assert audience.priority == "high"
        assert audience.relevance == 0.9


class TestApplyContextEnhancement:
    def test_no_context_is_identity(self) -> None:
        assert apply_context_enhancement("Explain X", []) == "Explain X"

    def test_basic_skips_low_priority(self) -> None:
        result = apply_context_enhancement("Explain X", _infos(), "basic")
        assert result == "Given that we are migrating to Postgres, junior developers, Explain X"

    def test_detailed_groups_in_render_order(self) -> None:
        result = apply_context_enhancement("Explain X", _infos(), "detailed")
        assert result == (
            "Context: situational: we are migrating to Postgres; temporal: due Friday; "
            "audience: junior developers\n\nExplain X"
        )

    def test_comprehensive_sections(self) -> None:
        result = apply_context_enhancement("Explain X", _infos(), "comprehensive")
        assert result.startswith("## Context & Background\n")
        assert "### Audience Context:\n- junior developers" in result
        assert "### Background Context:" not in result
        assert result.endswith("## Request\n\nExplain X")
        assert result.index("### Situational") < result.index("### Temporal") < result.index("### Audience")
