"""Tests for the domain optimizer."""

from __future__ import annotations

from refinery.patterns.domain_rules import domain_prompt_suggestions, optimize_for_domain

API_PROMPT = "Design an api for payments to handle refunds."


class TestOptimizeForDomain:
    def test_no_trigger_is_identity(self) -> None:
        assert optimize_for_domain("Tell me a joke", "technology", "informational") == "Tell me a joke"

    def test_domain_without_rules_is_identity(self) -> None:
        assert optimize_for_domain("Explain the api", "medical", "analytical") == "Explain the api"

    def test_framework_fill(self) -> None:
        result = optimize_for_domain(API_PROMPT, "technology", "problem_solving")
        assert result.startswith(
            "As a senior software architect, design a [system_type] system that payments to handle refunds."
        )
        assert "- [requirements]" in result
        assert f"Original request: {API_PROMPT}" in result
        assert result.endswith("Additional considerations:\n- Consider relevant constraints and limitations")

    def test_highest_effectiveness_framework_wins(self) -> None:
        # both technology frameworks accept "analytical"; architecture scores higher
        result = optimize_for_domain(API_PROMPT, "technology", "analytical")
        assert result.startswith("As a senior software architect")

    def test_generic_fallback_without_framework(self) -> None:
        result = optimize_for_domain(API_PROMPT, "technology", "creative")
        assert result == (
            f"{API_PROMPT}\n\nPlease consider the following technology context:\n"
            "- technology_stack\n- scalability_requirements\n\n"
            "Structure your response to include:\n"
            "- technical_specification\n- implementation_steps\n- testing_approach"
        )

    def test_braces_in_prompt_fall_back_to_generic(self) -> None:
        prompt = "Design an api for {{tenant}} billing."
        result = optimize_for_domain(prompt, "technology", "problem_solving")
        assert result.startswith(prompt)
        assert "Please consider the following technology context:" in result

    def test_idempotent(self) -> None:
        once = optimize_for_domain(API_PROMPT, "technology", "problem_solving")
        assert optimize_for_domain(once, "technology", "problem_solving") == once


class TestDomainPromptSuggestions:
    def test_technology(self) -> None:
        assert domain_prompt_suggestions("Build an app", "technology") == [
            "Add structured approach with clear steps for technology context",
            "Include technical specifications and implementation details",
            "Provide relevant technology context and background information",
        ]

    def test_mentions_suppress_suggestions(self) -> None:
        prompt = "Given this background, list the process steps to raise revenue"
        assert domain_prompt_suggestions(prompt, "business") == []

    def test_unknown_domain(self) -> None:
        assert domain_prompt_suggestions("anything", "general") == []
