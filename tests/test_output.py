"""Tests for markdown, JSON, and HTML export rendering."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from refinery.output.export import export_filename, render, write_export
from refinery.output.html import render_html_report
from refinery.output.markdown import render_analysis_report, render_export_markdown, usage_steps
from refinery.pipeline import PromptRefinery
from refinery.schemas.optimization import OptimizationOptions, OptimizationResult


@pytest.fixture
def result(refinery: PromptRefinery, sort_prompt: str) -> OptimizationResult:
    options = OptimizationOptions(use_chain_of_thought=True)
    return refinery.optimize(sort_prompt, "technology", options, "normal", platform="gpt-4o")


class TestUsage:
    def test_system_steps_per_platform(self) -> None:
        assert usage_steps("system", "gpt-4o")[1] == "Go to ChatGPT Settings > Custom Instructions"
        assert usage_steps("system", "claude-3.5-sonnet")[1] == "Create a new Claude Project"
        assert usage_steps("system", "generic")[1] == "Access your AI platform's system settings"

    def test_chat_steps(self) -> None:
        assert usage_steps("normal", "gpt-4o")[0] == "Copy the entire optimized prompt"


class TestExportMarkdown:
    def test_layout(self, result: OptimizationResult) -> None:
        md = render_export_markdown(result)
        assert md.startswith("# Optimized Prompt - gpt-4o\n")
        assert "**Domain:** technology" in md
        assert "**Mode:** Chat Prompt" in md
        assert f"**Generated:** {result.generated_at[:10]}" in md
        assert f"```\n{result.optimized_prompt}\n```" in md
        assert "### Tips for best results:" in md

    def test_system_title(self, refinery: PromptRefinery, sort_prompt: str) -> None:
        md = render_export_markdown(refinery.optimize(sort_prompt, mode="system"))
        assert md.startswith("# System Prompt - generic\n")
        assert "**Mode:** System Instructions" in md


class TestAnalysisReport:
    def test_sections(self, refinery: PromptRefinery, sort_prompt: str) -> None:
        report = render_analysis_report(refinery.analyze(sort_prompt))
        assert report.startswith("# Prompt Analysis\n")
        assert "| Specificity | 90/100 |" in report
        assert "## Tone" in report
        assert "## Forecast" in report
        assert "## Domain Suggestions" in report

    def test_issues_listed(self, refinery: PromptRefinery) -> None:
        report = render_analysis_report(refinery.analyze("Hello"))
        assert "## Issues" in report
        assert "## Missing Context" in report


class TestRender:
    def test_plain(self, result: OptimizationResult) -> None:
        assert render(result, "txt") == result.optimized_prompt

    def test_json_metadata(self, result: OptimizationResult) -> None:
        payload = json.loads(render(result, "json"))
        assert payload["prompt"] == result.optimized_prompt
        assert payload["metadata"] == {
            "platform": "gpt-4o",
            "mode": "normal",
            "domain": "technology",
            "generated_at": result.generated_at,
            "usage_type": "chat_prompt",
        }

    def test_unknown_format(self, result: OptimizationResult) -> None:
        with pytest.raises(ValueError, match="Unknown export format"):
            render(result, "pdf")  # type: ignore[arg-type]


class TestHtmlReport:
    def test_contents(self, result: OptimizationResult) -> None:
        html = render_html_report(result)
        assert "<title>Optimized Prompt - GPT-4o</title>" in html
        assert '<span class="tag">Chain of Thought</span>' in html
        assert "<td>Specificity</td><td>90/100</td>" in html
        assert "<li>Copy the entire optimized prompt</li>" in html

    def test_prompt_is_escaped(self, refinery: PromptRefinery) -> None:
        html = render_html_report(refinery.optimize("Explain the <script> tag"))
        assert "&lt;script&gt;" in html
        assert "<script>" not in html


class TestWriteExport:
    def test_writes_file(self, result: OptimizationResult, tmp_path: Path) -> None:
        out_dir = tmp_path / "exports"
        path = write_export(result, "md", out_dir)
        assert path == out_dir / "prompt-technology-normal.md"
        assert path.read_text(encoding="utf-8") == render_export_markdown(result)

    def test_filename(self, result: OptimizationResult) -> None:
        assert export_filename(result, "json") == "prompt-technology-normal.json"
