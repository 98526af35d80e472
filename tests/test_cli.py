"""Tests for the Typer CLI commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from refinery.analysis.lexicon import estimate_tokens
from refinery.cli import _run_enhanced_optimization, app
from refinery.compose.result import estimate_improvement
from refinery.pipeline import PromptRefinery
from refinery.schemas.config import RefineryConfig
from refinery.schemas.optimization import OptimizationOptions

runner = CliRunner()


class TestValidate:
    def test_valid_config(self, tmp_config: Path) -> None:
        result = runner.invoke(app, ["validate", "--config", str(tmp_config)])
        assert result.exit_code == 0
        assert "Config is valid!" in result.output
        assert "technology" in result.output

    def test_invalid_config(self, tmp_path: Path) -> None:
        cfg = tmp_path / "bad.yml"
        cfg.write_text("default_domain: astrology\n")
        result = runner.invoke(app, ["validate", "--config", str(cfg)])
        assert result.exit_code == 1
        assert "Config validation failed" in result.output

    def test_missing_config(self) -> None:
        result = runner.invoke(app, ["validate", "--config", "/nonexistent/refinery.yml"])
        assert result.exit_code == 1


class TestAnalyze:
    def test_tables(self) -> None:
        result = runner.invoke(app, ["analyze", "Write a Python function to parse CSV files"])
        assert result.exit_code == 0
        assert "Intent:" in result.output
        assert "Clarity" in result.output

    def test_markdown_from_stdin(self) -> None:
        result = runner.invoke(app, ["analyze", "--markdown"], input="Explain recursion")
        assert result.exit_code == 0
        assert "# Prompt Analysis" in result.output

    def test_empty_prompt(self) -> None:
        result = runner.invoke(app, ["analyze", "   "])
        assert result.exit_code == 1
        assert "Prompt is empty" in result.output

    def test_missing_file(self) -> None:
        result = runner.invoke(app, ["analyze", "--file", "/nonexistent/prompt.txt"])
        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_dry_run_is_enhanced(self) -> None:
        result = runner.invoke(app, ["analyze", "Explain recursion", "--dry-run"])
        assert result.exit_code == 0
        assert "(enhanced)" in result.output

    def test_enhanced_without_key_falls_back(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        result = runner.invoke(app, ["analyze", "Explain recursion", "--enhanced"])
        assert result.exit_code == 0
        assert "unavailable" in result.output
        assert "(heuristic)" in result.output


class TestOptimize:
    def test_basic(self) -> None:
        result = runner.invoke(app, ["optimize", "Explain recursion", "--use", "persona"])
        assert result.exit_code == 0
        assert "Tokens:" in result.output

    def test_unknown_option(self) -> None:
        result = runner.invoke(app, ["optimize", "Explain recursion", "--use", "magic"])
        assert result.exit_code == 1
        assert "Unknown option" in result.output

    def test_unknown_mode(self) -> None:
        result = runner.invoke(app, ["optimize", "Explain recursion", "--mode", "batch"])
        assert result.exit_code == 1

    def test_empty_prompt(self) -> None:
        result = runner.invoke(app, ["optimize", ""])
        assert result.exit_code == 1
        assert "Prompt is empty" in result.output

    def test_dry_run_export(self, tmp_config: Path) -> None:
        result = runner.invoke(
            app,
            [
                "optimize", "Design an api for payments",
                "--dry-run", "--export", "json", "--config", str(tmp_config),
            ],
        )
        assert result.exit_code == 0
        written = tmp_config.parent / "output" / "prompt-technology-normal.json"
        payload = json.loads(written.read_text(encoding="utf-8"))
        assert "(Focus: technology;" in payload["prompt"]
        assert payload["metadata"]["platform"] == "gpt-4o"


class TestPatterns:
    def test_list(self) -> None:
        result = runner.invoke(app, ["patterns"])
        assert result.exit_code == 0
        assert "Domain patterns" in result.output

    def test_unknown_domain(self) -> None:
        result = runner.invoke(app, ["patterns", "--domain", "astrology"])
        assert result.exit_code == 0
        assert "No patterns" in result.output


class TestApplyPattern:
    def test_with_vars(self) -> None:
        args = ["apply-pattern", "technical_explainer", "explain docker"]
        for item in (
            "concept=Docker", "audience=juniors", "complexity=simple",
            "aspectsToHighlight=images", "analogyType=shipping", "exampleType=CLI",
        ):
            args += ["--var", item]
        result = runner.invoke(app, args)
        assert result.exit_code == 0
        assert "Explain Docker" in result.output
        assert "unfilled" not in result.output

    def test_unfilled_warns(self) -> None:
        result = runner.invoke(app, ["apply-pattern", "technical_explainer", "explain docker"])
        assert result.exit_code == 0
        assert "unfilled" in result.output

    def test_unknown_pattern(self) -> None:
        result = runner.invoke(app, ["apply-pattern", "nope", "text"])
        assert result.exit_code == 1
        assert "Unknown domain pattern" in result.output

    def test_bad_var(self) -> None:
        result = runner.invoke(app, ["apply-pattern", "technical_explainer", "x", "--var", "concept"])
        assert result.exit_code == 1


class TestExport:
    def test_writes_markdown(self, tmp_path: Path) -> None:
        result = runner.invoke(
            app,
            ["export", "Explain caching", "--domain", "technology", "--output", str(tmp_path)],
        )
        assert result.exit_code == 0
        written = tmp_path / "prompt-technology-normal.md"
        assert written.read_text(encoding="utf-8").startswith("# Optimized Prompt - generic")

    def test_unknown_format(self, tmp_path: Path) -> None:
        result = runner.invoke(
            app, ["export", "Explain caching", "--format", "pdf", "--output", str(tmp_path)]
        )
        assert result.exit_code == 1


class TestEnhancedOptimization:
    @pytest.mark.asyncio
    async def test_provider_rewrite_rescores(self) -> None:
        cfg = RefineryConfig()
        options = OptimizationOptions(use_chain_of_thought=True)
        result = await _run_enhanced_optimization(
            PromptRefinery(cfg), cfg, "Explain recursion", "technology", options, None, None, True
        )
        assert result.applied_techniques[-1] == "Provider Rewrite"
        assert result.estimated_improvement == estimate_improvement(
            result.analysis, len(result.applied_techniques), options, "technology"
        )
        assert result.token_count.optimized == estimate_tokens(result.optimized_prompt)
