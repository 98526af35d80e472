"""Prompt composer: system-mode instruction blocks and normal-mode rewrites.

``compose`` builds the mode shape first, then (normal mode only) layers the
optional techniques in a fixed order:

 1. advanced catalog techniques
 2. domain framework optimization
 3. caller-supplied context
 4. emotional framing
 5. tree of thoughts (expert) or chain of thought (not simple)
 6. self-consistency (problem solving)
 7. ReAct (problem solving)
 8. few-shot examples (complex, domain has examples)
 9. structured output format
10. token optimization, always last

A layer that leaves the text unchanged is not reported as applied.
"""

from __future__ import annotations

import logging

from refinery.analysis.context_gaps import apply_context_enhancement
from refinery.analysis.tone import apply_emotional_enhancement
from refinery.compose.personas import role_definition, role_intro
from refinery.compose.platforms import Platform, get_platform
from refinery.patterns.domain_rules import optimize_for_domain
from refinery.schemas.analysis import ContextInfo, PromptAnalysis
from refinery.schemas.optimization import Mode, OptimizationOptions
from refinery.schemas.techniques import TechniqueContext
from refinery.techniques import scaffolds
from refinery.techniques.catalog import apply_techniques

logger = logging.getLogger(__name__)

# ------------------------------------------------------------------
# System mode
# ------------------------------------------------------------------

_CORE_INSTRUCTIONS = [
    "Provide accurate, well-researched, and comprehensive responses",
    "Use clear, professional language appropriate for the context",
    "Structure responses logically with proper formatting",
    "Include relevant examples and practical applications when helpful",
]

_SYSTEM_DOMAIN_INSTRUCTIONS: dict[str, list[str]] = {
    "technology": [
        "Include code examples with proper syntax highlighting when relevant",
        "Explain technical concepts clearly for different skill levels",
        "Mention best practices, potential pitfalls, and optimization strategies",
    ],
    "business": [
        "Provide actionable business insights and strategic recommendations",
        "Include relevant market considerations and implementation guidance",
        "Use business frameworks and methodologies where appropriate",
    ],
    "creative": [
        "Encourage creativity while maintaining quality and coherence",
        "Provide constructive feedback and improvement suggestions",
        "Offer multiple creative approaches when possible",
    ],
}

_THINKING_BLOCK = (
    "Thinking Process:\n"
    "Before responding, reason through the problem inside <thinking> tags, "
    "then give your final answer."
)

_RESPONSE_GUIDELINES = """Response Guidelines:
- Maintain professional standards and accuracy
- Provide comprehensive yet concise information
- Include relevant disclaimers when appropriate
- Structure responses for clarity and readability"""


def compose_system_prompt(
    prompt: str, domain: str, options: OptimizationOptions, platform: Platform
) -> str:
    sections = [f"# System Instructions for {platform.name}", role_definition(domain)]
    if platform.supports_thinking:
        sections.append(_THINKING_BLOCK)

    instructions = list(_CORE_INSTRUCTIONS)
    if options.use_chain_of_thought:
        instructions.append("Think through problems step-by-step with clear reasoning")
    if options.use_persona:
        instructions.append("Draw upon professional experience and industry best practices")
    instructions.extend(_SYSTEM_DOMAIN_INSTRUCTIONS.get(domain, []))
    sections.append("Core Instructions:\n" + "\n".join(f"- {item}" for item in instructions))

    sections.append(f"Current Task Context: {prompt}")
    if options.use_constraints:
        sections.append(_RESPONSE_GUIDELINES)
    return "\n\n".join(sections)


# ------------------------------------------------------------------
# Normal mode
# ------------------------------------------------------------------

_FRAMING: dict[str, str] = {
    "conversational": "Let's work through this together.",
    "formal": "Please address the following request with precision and rigor.",
    "technical": "Treat the following as a technical specification and respond precisely.",
}

_NORMAL_DOMAIN_INSTRUCTIONS: dict[str, str] = {
    "technology": "Include relevant code examples and technical best practices",
    "business": "Include strategic recommendations and implementation considerations",
    "creative": "Provide creative approaches with specific examples and techniques",
    "academic": "Support claims with evidence and cite relevant research",
}

_COMPLEXITY_CLOSING = (
    "I'm looking for a detailed, professional response that covers key aspects "
    "comprehensively and provides actionable insights."
)
_PERSONA_CLOSING = (
    "Draw on your professional experience and cite industry best practices where they apply."
)


def compose_normal_prompt(
    prompt: str,
    domain: str,
    analysis: PromptAnalysis,
    options: OptimizationOptions,
    platform: Platform,
) -> tuple[str, list[str]]:
    """Conversational rewrite. Returns the text and the features it used."""
    applied: list[str] = []
    text = ""
    if options.use_persona or options.use_role_play:
        text = f"{role_intro(domain)}, please help me with the following:\n\n"
        applied.append("Role Framing")
    framing = _FRAMING.get(platform.style)
    if framing:
        text += f"{framing}\n\n"
    text += prompt

    instructions: list[str] = []
    if options.use_chain_of_thought:
        instructions.append("Please think through this step-by-step with clear reasoning")
    if options.use_self_consistency:
        instructions.append("Consider multiple approaches and provide the most reliable solution")
    if options.use_constraints:
        instructions.append("Provide comprehensive, actionable guidance with practical examples")
        instructions.append(
            "Structure your response clearly with headings and bullet points where helpful"
        )
    if domain in _NORMAL_DOMAIN_INSTRUCTIONS:
        instructions.append(_NORMAL_DOMAIN_INSTRUCTIONS[domain])
    if instructions:
        text += "\n\nPlease:\n" + "\n".join(f"• {item}" for item in instructions)
        applied.append("Instruction Bullets")

    if analysis.complexity in ("complex", "expert"):
        text += f"\n\n{_COMPLEXITY_CLOSING}"
    if options.use_persona:
        text += f"\n\n{_PERSONA_CLOSING}"
    return text, applied


# ------------------------------------------------------------------
# Layering
# ------------------------------------------------------------------


class _Layers:
    """Accumulates a prompt and the names of layers that changed it."""

    def __init__(self, text: str, applied: list[str]) -> None:
        self.text = text
        self.applied = applied

    def add(self, name: str, rewritten: str) -> None:
        if rewritten != self.text:
            self.text = rewritten
            self.applied.append(name)


def compose(
    prompt: str,
    domain: str,
    analysis: PromptAnalysis,
    options: OptimizationOptions,
    mode: Mode = "normal",
    platform: str | None = None,
    techniques: list[str] | None = None,
    context: list[ContextInfo] | None = None,
) -> tuple[str, list[str]]:
    """Compose ``prompt`` for ``mode`` and return (text, applied technique names).

    ``techniques`` overrides the analysis' recommended technique ids; they
    are applied in the order given. ``context`` entries are only used when
    ``options.use_context_prompting`` is set.
    """
    target = get_platform(platform)
    if mode == "system":
        return compose_system_prompt(prompt, domain, options, target), ["System Instructions"]

    text, applied = compose_normal_prompt(prompt, domain, analysis, options, target)
    layers = _Layers(text, applied)

    if options.use_advanced_techniques:
        ids = techniques if techniques is not None else analysis.recommended_techniques
        rewritten, names = apply_techniques(layers.text, ids, TechniqueContext(domain=domain))
        layers.text = rewritten
        layers.applied.extend(names)

    if options.use_domain_optimization:
        layers.add("Domain Optimization", optimize_for_domain(layers.text, domain, analysis.task_intent))

    if options.use_context_prompting and context:
        layers.add(
            "Context Enhancement",
            apply_context_enhancement(layers.text, context, options.context_depth),
        )

    if options.use_emotional_prompting:
        layers.add(
            "Emotional Framing",
            apply_emotional_enhancement(
                layers.text, options.emotional_tone, options.emotional_intensity, domain
            ),
        )

    if options.use_tree_of_thoughts and analysis.complexity == "expert":
        layers.add("Tree of Thoughts", scaffolds.add_tree_of_thoughts(layers.text))
    elif options.use_chain_of_thought and analysis.complexity != "simple":
        layers.add("Chain of Thought", scaffolds.add_chain_of_thought(layers.text))

    if options.use_self_consistency and analysis.intent == "problem_solving":
        layers.add("Self-Consistency", scaffolds.add_self_consistency(layers.text))

    if options.use_react and analysis.intent == "problem_solving":
        layers.add("ReAct Pattern", scaffolds.add_react(layers.text))

    if options.use_few_shot and analysis.complexity == "complex":
        examples = scaffolds.examples_for_domain(domain)
        layers.add("Few-Shot Learning", scaffolds.add_few_shot(layers.text, examples))

    if options.output_format:
        layers.add(
            "Structured Output",
            scaffolds.add_structured_output(layers.text, options.output_format),
        )

    if options.optimize_for_tokens:
        layers.add("Token Optimization", scaffolds.optimize_for_tokens(layers.text))

    logger.debug("Composed %s prompt with %d layer(s)", mode, len(layers.applied))
    return layers.text, layers.applied
