"""Typer CLI: ``refinery analyze``, ``optimize``, ``patterns``, ``apply-pattern``, ``validate`` and ``export``."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from refinery.analysis.lexicon import estimate_tokens
from refinery.compose.result import estimate_improvement
from refinery.config import load_config
from refinery.errors import EmptyInputError, ProviderUnavailableError, UnknownPatternError
from refinery.output.export import EXPORT_FORMATS, write_export
from refinery.output.markdown import render_analysis_report
from refinery.patterns.extraction import extract_variables
from refinery.patterns.library import all_patterns, apply_pattern, get_pattern, patterns_for_domain
from refinery.pipeline import PromptRefinery
from refinery.schemas.analysis import PromptAnalysis
from refinery.schemas.config import RefineryConfig
from refinery.schemas.optimization import OptimizationOptions, OptimizationResult, TokenCount
from refinery.techniques.catalog import get_technique

# Load .env file from project root (if it exists)
load_dotenv()

app = typer.Typer(
    name="refinery",
    help="Prompt Refinery. Analyze prompts and rewrite them with composable techniques.",
    no_args_is_help=True,
)
console = Console()

# --use NAME -> OptimizationOptions field
OPTION_FLAGS: dict[str, str] = {
    "cot": "use_chain_of_thought",
    "few-shot": "use_few_shot",
    "react": "use_react",
    "persona": "use_persona",
    "constraints": "use_constraints",
    "tokens": "optimize_for_tokens",
    "tot": "use_tree_of_thoughts",
    "self-consistency": "use_self_consistency",
    "role-play": "use_role_play",
    "advanced": "use_advanced_techniques",
    "domain": "use_domain_optimization",
    "context": "use_context_prompting",
    "emotional": "use_emotional_prompting",
}


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
    )
    # httpx logs every HTTP request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _load(config: Path | None) -> RefineryConfig:
    if config is None:
        return RefineryConfig()
    try:
        return load_config(config)
    except Exception as exc:
        console.print(f"[red]Config validation failed:[/] {exc}")
        raise typer.Exit(code=1)


def _read_prompt(text: str | None, file: Path | None) -> str:
    """Prompt text from the argument, ``--file``, or piped stdin (in that order)."""
    if text is not None:
        return text
    if file is not None:
        if not file.exists():
            console.print(f"[red]File not found:[/] {file}")
            raise typer.Exit(code=1)
        return file.read_text(encoding="utf-8")
    if sys.stdin.isatty():
        console.print("[red]No prompt given.[/] Pass it as an argument, with --file, or on stdin.")
        raise typer.Exit(code=1)
    return sys.stdin.read()


def _empty_input(exc: EmptyInputError) -> typer.Exit:
    console.print(f"[red]{exc}[/]")
    return typer.Exit(code=1)


def _make_client(cfg: RefineryConfig, dry_run: bool):
    """Provider client for the enhanced path, or None when no key is configured."""
    if dry_run:
        from refinery.shared.provider_client import DryRunClient

        return DryRunClient()

    from refinery.shared.provider_client import ProviderClient

    try:
        return ProviderClient(cfg.provider)
    except ProviderUnavailableError as exc:
        console.print(f"[yellow]Enhanced analysis unavailable:[/] {exc}; using heuristics.")
        return None


def _options_from(
    cfg: RefineryConfig, use: list[str], output_format: str | None, tone: str | None
) -> OptimizationOptions:
    update: dict[str, object] = {}
    for name in use:
        field = OPTION_FLAGS.get(name)
        if field is None:
            console.print(
                f"[red]Unknown option {name!r}.[/] Choose from: {', '.join(OPTION_FLAGS)}"
            )
            raise typer.Exit(code=1)
        update[field] = True
    if output_format:
        update["output_format"] = output_format
    if tone:
        update["emotional_tone"] = tone
    try:
        return cfg.options.model_validate({**cfg.options.model_dump(), **update})
    except ValueError as exc:
        console.print(f"[red]Invalid options:[/] {exc}")
        raise typer.Exit(code=1)


# ------------------------------------------------------------------
# Rendering
# ------------------------------------------------------------------


def _print_analysis(analysis: PromptAnalysis) -> None:
    console.print(
        f"[bold]Intent:[/] {analysis.intent}  [bold]Complexity:[/] {analysis.complexity}  "
        f"[bold]Domain:[/] {analysis.domain}  [dim]({analysis.source})[/]"
    )

    table = Table(title="Scores (0-100)")
    table.add_column("Metric")
    table.add_column("Score", justify="right")
    q = analysis.quality
    for label, value in (
        ("Clarity", q.clarity),
        ("Specificity", q.specificity),
        ("Effectiveness", q.effectiveness),
        ("Coherence", analysis.semantic_structure.coherence),
        ("Completeness", analysis.semantic_structure.completeness),
        ("Readability", analysis.readability_score),
        ("Improvement potential", analysis.quality_prediction.improvement_potential),
    ):
        table.add_row(label, str(value))
    console.print(table)

    if analysis.identified_issues:
        console.print("\n[bold]Issues[/]")
        colors = {"high": "red", "medium": "yellow", "low": "green"}
        for issue in analysis.identified_issues:
            color = colors.get(issue.severity, "white")
            console.print(f"  [{color}]{issue.severity}[/] {issue.description}")
    if q.issues.suggestions:
        console.print("\n[bold]Suggestions[/]")
        for suggestion in q.issues.suggestions:
            console.print(f"  - {suggestion}")
    if analysis.recommended_techniques:
        names = []
        for technique_id in analysis.recommended_techniques:
            technique = get_technique(technique_id)
            names.append(technique.name if technique else technique_id)
        console.print(f"\n[bold]Recommended techniques:[/] {', '.join(names)}")


def _print_result(result: OptimizationResult) -> None:
    console.print(Panel(result.optimized_prompt, title=f"Optimized ({result.mode}, {result.domain})"))
    if result.applied_techniques:
        console.print(f"[bold]Applied:[/] {', '.join(result.applied_techniques)}")
    tc = result.token_count
    console.print(
        f"[bold]Tokens:[/] {tc.original} -> {tc.optimized}  "
        f"[bold]Estimated improvement:[/] {result.estimated_improvement}%"
    )


# ------------------------------------------------------------------
# Commands
# ------------------------------------------------------------------


@app.command()
def validate(
    config: Path = typer.Option(..., "--config", "-c", help="Path to refinery.yml"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Validate a configuration file."""
    _setup_logging(verbose)
    cfg = _load(config)

    console.print("[green]Config is valid![/]\n")
    console.print(f"  Default domain: {cfg.default_domain or '(detect)'}")
    console.print(f"  Mode:           {cfg.mode}")
    console.print(f"  Platform:       {cfg.platform}")
    enabled = [name for name, field in OPTION_FLAGS.items() if getattr(cfg.options, field)]
    console.print(f"  Options:        {', '.join(enabled) or '(none)'}")
    console.print(
        f"  Cache:          {'on' if cfg.cache.enabled else 'off'} "
        f"(analysis {cfg.cache.analysis_ttl:g}s, optimization {cfg.cache.optimization_ttl:g}s)"
    )
    console.print(f"  Provider:       {cfg.provider.name} / {cfg.provider.model}")
    console.print(f"  Output dir:     {cfg.output_directory}")


@app.command()
def analyze(
    text: str = typer.Argument(None, help="Prompt text (or use --file / stdin)."),
    file: Path = typer.Option(None, "--file", "-f", help="Read the prompt from a file."),
    domain: str = typer.Option(None, "--domain", "-d", help="Override domain detection."),
    enhanced: bool = typer.Option(False, "--enhanced", help="Merge scores from the LLM provider."),
    markdown: bool = typer.Option(False, "--markdown", help="Print a markdown report instead of tables."),
    config: Path = typer.Option(None, "--config", "-c", help="Path to refinery.yml"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Use canned provider data (no API calls)."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Analyze a prompt: intent, complexity, quality scores, and issues."""
    _setup_logging(verbose)
    cfg = _load(config)
    prompt = _read_prompt(text, file)
    refinery = PromptRefinery(cfg)

    try:
        analysis = _run_analysis(refinery, cfg, prompt, domain, enhanced or dry_run, dry_run)
    except EmptyInputError as exc:
        raise _empty_input(exc)

    if markdown:
        console.print(render_analysis_report(analysis), markup=False, highlight=False)
    else:
        _print_analysis(analysis)


def _run_analysis(
    refinery: PromptRefinery,
    cfg: RefineryConfig,
    prompt: str,
    domain: str | None,
    enhanced: bool,
    dry_run: bool,
) -> PromptAnalysis:
    if enhanced:
        client = _make_client(cfg, dry_run)
        if client is not None:
            return asyncio.run(refinery.analyze_enhanced(prompt, client, domain))
    return refinery.analyze(prompt, domain)


@app.command()
def optimize(
    text: str = typer.Argument(None, help="Prompt text (or use --file / stdin)."),
    file: Path = typer.Option(None, "--file", "-f", help="Read the prompt from a file."),
    domain: str = typer.Option(None, "--domain", "-d", help="Override domain detection."),
    mode: str = typer.Option(None, "--mode", "-m", help="normal or system."),
    platform: str = typer.Option(None, "--platform", "-p", help="Target platform id, e.g. gpt-4o."),
    use: list[str] = typer.Option([], "--use", "-u", help="Enable an option (repeatable): " + ", ".join(OPTION_FLAGS)),
    output_format: str = typer.Option(None, "--format", help="Structured output: json, markdown, list, steps."),
    tone: str = typer.Option(None, "--tone", help="Emotional tone for --use emotional."),
    enhanced: bool = typer.Option(False, "--enhanced", help="Use the LLM provider for analysis and a final rewrite."),
    export: str = typer.Option(None, "--export", "-e", help="Also write the result: " + ", ".join(EXPORT_FORMATS)),
    config: Path = typer.Option(None, "--config", "-c", help="Path to refinery.yml"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Use canned provider data (no API calls)."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Optimize a prompt for the chosen mode and platform."""
    _setup_logging(verbose)
    cfg = _load(config)
    if mode is not None and mode not in ("normal", "system"):
        console.print(f"[red]Unknown mode {mode!r}.[/] Use normal or system.")
        raise typer.Exit(code=1)
    if export is not None and export not in EXPORT_FORMATS:
        console.print(f"[red]Unknown export format {export!r}.[/] Use one of: {', '.join(EXPORT_FORMATS)}")
        raise typer.Exit(code=1)
    options = _options_from(cfg, use, output_format, tone)
    prompt = _read_prompt(text, file)
    refinery = PromptRefinery(cfg)

    try:
        if enhanced or dry_run:
            result = asyncio.run(
                _run_enhanced_optimization(refinery, cfg, prompt, domain, options, mode, platform, dry_run)
            )
        else:
            result = refinery.optimize(prompt, domain, options, mode, platform)
    except EmptyInputError as exc:
        raise _empty_input(exc)

    _print_result(result)
    if export:
        path = write_export(result, export, cfg.output_directory)
        console.print(f"[green]Written to:[/] {path}")


async def _run_enhanced_optimization(
    refinery: PromptRefinery,
    cfg: RefineryConfig,
    prompt: str,
    domain: str | None,
    options: OptimizationOptions,
    mode: str | None,
    platform: str | None,
    dry_run: bool,
) -> OptimizationResult:
    """Provider analysis, local composition, then a provider rewrite if reachable."""
    client = _make_client(cfg, dry_run)
    if client is None:
        return refinery.optimize(prompt, domain, options, mode, platform)

    analysis = await refinery.analyze_enhanced(prompt, client, domain)
    result = refinery.optimize(prompt, domain, options, mode, platform, analysis=analysis)
    try:
        rewritten = await client.optimize_prompt(
            result.optimized_prompt, result.applied_techniques, result.domain
        )
    except ProviderUnavailableError as exc:
        console.print(f"[yellow]Provider rewrite skipped:[/] {exc}")
        return result

    applied = [*result.applied_techniques, "Provider Rewrite"]
    return result.model_copy(
        update={
            "optimized_prompt": rewritten,
            "applied_techniques": applied,
            "estimated_improvement": estimate_improvement(
                result.analysis, len(applied), options, result.domain
            ),
            "token_count": TokenCount(
                original=result.token_count.original, optimized=estimate_tokens(rewritten)
            ),
        }
    )


@app.command()
def patterns(
    domain: str = typer.Option(None, "--domain", "-d", help="Only show patterns for this domain."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """List the domain pattern library."""
    _setup_logging(verbose)
    entries = patterns_for_domain(domain) if domain else all_patterns()
    if not entries:
        console.print(f"[yellow]No patterns for domain {domain!r}.[/]")
        return

    table = Table(title="Domain patterns")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Domain")
    table.add_column("Eff.", justify="right")
    table.add_column("Variables")
    for p in entries:
        table.add_row(p.id, p.name, p.domain, str(p.effectiveness), ", ".join(p.variables))
    console.print(table)


@app.command("apply-pattern")
def apply_pattern_command(
    pattern_id: str = typer.Argument(..., help="Pattern id (see `refinery patterns`)."),
    text: str = typer.Argument(None, help="Prompt text (or use --file / stdin)."),
    file: Path = typer.Option(None, "--file", "-f", help="Read the prompt from a file."),
    var: list[str] = typer.Option([], "--var", help="Template variable as name=value (repeatable)."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Fill a domain pattern; variables not given with --var are extracted from the prompt.

    Example:

        refinery apply-pattern technical_explainer "Explain caching for backend developers"
    """
    _setup_logging(verbose)
    try:
        pattern = get_pattern(pattern_id)
    except UnknownPatternError as exc:
        console.print(f"[red]{exc}[/]")
        raise typer.Exit(code=1)

    prompt = _read_prompt(text, file)
    variables = extract_variables(prompt, pattern.variables)
    for item in var:
        name, sep, value = item.partition("=")
        if not sep:
            console.print(f"[red]Expected name=value, got {item!r}[/]")
            raise typer.Exit(code=1)
        variables[name.strip()] = value.strip()

    filled = apply_pattern(prompt, pattern_id, variables)
    if filled == prompt:
        missing = [v for v in pattern.variables if not variables.get(v)]
        console.print(
            f"[yellow]Pattern left unfilled (missing: {', '.join(missing) or 'none'}); "
            "showing the original prompt.[/]"
        )
    console.print(Panel(filled, title=pattern.name))


@app.command()
def export(
    text: str = typer.Argument(None, help="Prompt text (or use --file / stdin)."),
    file: Path = typer.Option(None, "--file", "-f", help="Read the prompt from a file."),
    output_format: str = typer.Option("md", "--format", help="One of: " + ", ".join(EXPORT_FORMATS)),
    output: Path = typer.Option(None, "--output", "-o", help="Output directory (defaults to config)."),
    domain: str = typer.Option(None, "--domain", "-d"),
    mode: str = typer.Option(None, "--mode", "-m", help="normal or system."),
    platform: str = typer.Option(None, "--platform", "-p"),
    use: list[str] = typer.Option([], "--use", "-u", help="Enable an option (repeatable)."),
    config: Path = typer.Option(None, "--config", "-c", help="Path to refinery.yml"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Optimize a prompt and write it to a file in the chosen format."""
    _setup_logging(verbose)
    cfg = _load(config)
    if output_format not in EXPORT_FORMATS:
        console.print(f"[red]Unknown format {output_format!r}.[/] Use one of: {', '.join(EXPORT_FORMATS)}")
        raise typer.Exit(code=1)
    if mode is not None and mode not in ("normal", "system"):
        console.print(f"[red]Unknown mode {mode!r}.[/] Use normal or system.")
        raise typer.Exit(code=1)
    options = _options_from(cfg, use, None, None)
    prompt = _read_prompt(text, file)

    try:
        result = PromptRefinery(cfg).optimize(prompt, domain, options, mode, platform)
    except EmptyInputError as exc:
        raise _empty_input(exc)

    path = write_export(result, output_format, output or cfg.output_directory)
    console.print(f"[green]Written to:[/] {path}")
