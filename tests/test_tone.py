"""Tests for the emotional tone analyzer and emotional framing."""

from __future__ import annotations

import pytest

from refinery.analysis.tone import (
    analyze_tone,
    appropriateness,
    apply_emotional_enhancement,
    detect_tone,
    suggested_tones,
    tone_guidance,
    tone_warnings,
)


class TestDetectTone:
    def test_first_listed_tone_wins(self) -> None:
        assert detect_tone("Please handle this ASAP") == "urgent"

    def test_encouraging(self) -> None:
        assert detect_tone("Can you help me outline a talk") == "encouraging"

    def test_neutral_fallback(self) -> None:
        assert detect_tone("List three rivers") == "neutral"


class TestAppropriateness:
    def test_matrix_lookup(self) -> None:
        assert appropriateness("empathetic", "technology") == 40
        assert appropriateness("enthusiastic", "creative") == 95

    def test_unknown_domain_defaults(self) -> None:
        assert appropriateness("urgent", "medical") == 70

    def test_academic_warnings(self) -> None:
        warnings = tone_warnings("enthusiastic", "academic")
        assert len(warnings) == 2
        assert warnings[1] == "Academic contexts typically require neutral or professional tones"

    def test_suggestions_fallback(self) -> None:
        assert suggested_tones("legal") == ["neutral", "professional"]
        assert tone_guidance("urgent", "legal") == ["Use appropriate tone for context"]


class TestAnalyzeTone:
    def test_declared_tone_drives_score(self) -> None:
        report = analyze_tone("Refactor this module", "technology", "professional")
        assert report.appropriateness == 95
        assert report.effectiveness == 95
        assert report.current_tone == "neutral"
        assert report.warnings == []
        assert report.guidance[0] == "Use professional language"

    def test_long_text_bonus(self) -> None:
        report = analyze_tone("x" * 201, "general", "neutral")
        assert report.effectiveness == 90

    def test_low_fit_warns(self) -> None:
        report = analyze_tone("Refactor this", "technology", "empathetic")
        assert report.warnings[0] == "empathetic tone may not be appropriate for technology domain"


class TestEmotionalEnhancement:
    @pytest.mark.parametrize(
        ("intensity", "expected"),
        [
            ("subtle", "when convenient, Fix the login bug"),
            ("moderate", "as soon as possible: Fix the login bug"),
            ("strong", "urgently needed:\n\nFix the login bug"),
        ],
    )
    def test_intensity_shapes(self, intensity: str, expected: str) -> None:
        assert apply_emotional_enhancement("Fix the login bug", "urgent", intensity, "technology") == expected

    def test_neutral_is_identity(self) -> None:
        assert apply_emotional_enhancement("Fix it", "neutral") == "Fix it"

    def test_inappropriate_tone_skipped(self) -> None:
        assert apply_emotional_enhancement("Fix it", "empathetic", "strong", "technology") == "Fix it"

    def test_idempotent(self) -> None:
        once = apply_emotional_enhancement("Write a poem", "enthusiastic", "moderate", "creative")
        assert apply_emotional_enhancement(once, "enthusiastic", "moderate", "creative") == once
