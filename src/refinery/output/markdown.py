"""Markdown renderers for an optimized prompt and for a prompt analysis."""

from __future__ import annotations

from refinery.schemas.analysis import PromptAnalysis
from refinery.schemas.optimization import Mode, OptimizationResult

_SEVERITY_ICONS = {"high": "🔴", "medium": "🟡", "low": "🟢"}


def usage_type(mode: Mode) -> str:
    return "system_instructions" if mode == "system" else "chat_prompt"


def usage_steps(mode: Mode, platform: str) -> list[str]:
    """Ordered steps for putting the prompt to use on ``platform``."""
    if mode == "system":
        if "gpt" in platform:
            where = "Go to ChatGPT Settings > Custom Instructions"
        elif "claude" in platform:
            where = "Create a new Claude Project"
        else:
            where = "Access your AI platform's system settings"
        return [
            "Copy the optimized system prompt above",
            where,
            "Paste the prompt in the system/instruction field",
            "Save your settings for consistent behavior",
        ]
    return [
        "Copy the entire optimized prompt",
        "Open your AI chat interface",
        "Paste as your first message",
        "Send and start your enhanced conversation",
    ]


def _usage_instructions(mode: Mode, platform: str) -> list[str]:
    if mode == "system":
        return [
            f"This is a system prompt designed for {platform}. Copy the content above and "
            "paste it into your AI platform's system/instruction field.\n",
            "### Platform-specific instructions:",
            "- **ChatGPT:** Settings > Personalization > Custom Instructions",
            "- **Claude:** Create a Project and use this as Project Instructions",
            "- **API:** Use as the 'system' message in your API calls",
        ]
    return [
        "This is an optimized chat prompt ready for direct use. Simply copy and paste "
        f"into your {platform} chat interface.\n",
        "### Tips for best results:",
        "- Paste the entire prompt as your first message",
        "- Feel free to follow up with clarifying questions",
        "- The prompt includes context that will guide the AI's responses",
    ]


def render_export_markdown(result: OptimizationResult) -> str:
    """Render the optimized prompt as a shareable markdown document."""
    title = "System Prompt" if result.mode == "system" else "Optimized Prompt"
    mode_label = "System Instructions" if result.mode == "system" else "Chat Prompt"

    lines = [
        f"# {title} - {result.platform}\n",
        f"**Domain:** {result.domain}",
        f"**Mode:** {mode_label}",
        f"**Generated:** {result.generated_at[:10]}\n",
        "## Prompt Content\n",
        f"```\n{result.optimized_prompt}\n```\n",
        "## Usage Instructions\n",
    ]
    lines.extend(_usage_instructions(result.mode, result.platform))
    return "\n".join(lines) + "\n"


def render_analysis_report(analysis: PromptAnalysis) -> str:
    """Render an analysis as a markdown report."""
    q = analysis.quality
    s = analysis.semantic_structure
    sections: list[str] = ["# Prompt Analysis\n"]

    sections.append(f"> {analysis.prompt}\n")
    sections.append(
        f"**Intent:** {analysis.intent} | **Task intent:** {analysis.task_intent} | "
        f"**Complexity:** {analysis.complexity} | **Domain:** {analysis.domain}\n"
    )
    sections.append(
        f"*{analysis.word_count} words, {analysis.sentence_count} sentences, "
        f"~{analysis.token_estimate} tokens; source: {analysis.source}*\n"
    )

    sections.append("## Scores\n")
    sections.append("| Metric | Score |")
    sections.append("|--------|-------|")
    for label, value in (
        ("Clarity", q.clarity),
        ("Specificity", q.specificity),
        ("Effectiveness", q.effectiveness),
        ("Overall quality", q.overall),
        ("Coherence", s.coherence),
        ("Completeness", s.completeness),
        ("Readability", analysis.readability_score),
        ("Estimated effectiveness", analysis.quality_prediction.estimated_effectiveness),
        ("Improvement potential", analysis.quality_prediction.improvement_potential),
    ):
        sections.append(f"| {label} | {value}/100 |")
    sections.append("")
    sections.append(f"**Optimization priority:** {analysis.optimization_priority}\n")

    if analysis.identified_issues:
        sections.append("## Issues\n")
        for issue in analysis.identified_issues:
            icon = _SEVERITY_ICONS.get(issue.severity, "⚪")
            sections.append(f"- {icon} **{issue.description}** ({issue.type})")
            if issue.solution:
                sections.append(f"  - Fix: {issue.solution}")
        sections.append("")

    if q.issues.suggestions:
        sections.append("## Suggestions\n")
        for suggestion in q.issues.suggestions:
            sections.append(f"- {suggestion}")
        sections.append("")

    if analysis.context.missing_context:
        sections.append("## Missing Context\n")
        sections.append(f"Completeness: {analysis.context.completeness_score}/100\n")
        for info in analysis.context.suggestions:
            sections.append(f"- **{info.type}** ({info.priority}): {info.content}")
        sections.append("")

    tone = analysis.tone
    sections.append("## Tone\n")
    sections.append(
        f"Detected **{tone.current_tone}**, appropriateness {tone.appropriateness}/100"
    )
    for warning in tone.warnings:
        sections.append(f"- ⚠ {warning}")
    for tip in tone.guidance:
        sections.append(f"- {tip}")
    sections.append("")

    if analysis.forecast:
        f = analysis.forecast
        sections.append("## Forecast\n")
        sections.append(
            f"Predicted effectiveness {f.predicted_effectiveness}/100 "
            f"(confidence {f.confidence}/100)\n"
        )
        for risk in f.risk_factors:
            sections.append(f"- Risk: {risk}")
        for factor in f.success_factors:
            sections.append(f"- Strength: {factor}")
        sections.append("")

    if analysis.recommended_techniques:
        sections.append("## Recommended Techniques\n")
        for technique_id in analysis.recommended_techniques:
            sections.append(f"- `{technique_id}`")
        sections.append("")

    if analysis.domain_suggestions:
        sections.append("## Domain Suggestions\n")
        for suggestion in analysis.domain_suggestions:
            sections.append(f"- {suggestion}")
        sections.append("")

    return "\n".join(sections)
