"""Domain optimizer: trigger rules that route a prompt into a domain framework."""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict

from refinery.errors import TemplateIncompleteError
from refinery.patterns.extraction import extract_variables
from refinery.patterns.library import FRAMEWORKS, render
from refinery.schemas.techniques import DomainPattern

logger = logging.getLogger(__name__)

_CONTEXT_HEADING = "Please consider the following"
_STRUCTURE_HEADING = "Structure your response to include:"
_CONSIDERATIONS_HEADING = "Additional considerations:"
_ORIGINAL_HEADING = "Original request:"


class DomainRule(BaseModel):
    """Triggers and optimization hints for one analysis domain."""

    model_config = ConfigDict(frozen=True)

    domain: str
    triggers: tuple[str, ...]
    structure: tuple[str, ...]
    terminology: tuple[str, ...]
    context_additions: tuple[str, ...]
    constraints: tuple[str, ...]


RULES: dict[str, DomainRule] = {
    rule.domain: rule
    for rule in (
        DomainRule(
            domain="technology",
            triggers=("code", "software", "architecture", "programming", "algorithm", "database", "api"),
            structure=("technical_specification", "implementation_steps", "testing_approach"),
            terminology=("technical_precision", "industry_standards", "best_practices"),
            context_additions=("technology_stack", "scalability_requirements", "security_considerations"),
            constraints=("performance_requirements", "compatibility_constraints", "resource_limitations"),
        ),
        DomainRule(
            domain="business",
            triggers=("strategy", "market", "revenue", "customer", "growth", "competitive", "roi"),
            structure=("executive_summary", "market_analysis", "financial_projections", "implementation_plan"),
            terminology=("business_metrics", "strategic_frameworks", "market_terminology"),
            context_additions=("market_context", "competitive_landscape", "stakeholder_impact"),
            constraints=("budget_limitations", "timeline_constraints", "regulatory_requirements"),
        ),
        DomainRule(
            domain="creative",
            triggers=("story", "creative", "design", "artistic", "narrative", "visual", "content"),
            structure=("creative_brief", "concept_development", "execution_details", "iteration_process"),
            terminology=("creative_concepts", "artistic_techniques", "design_principles"),
            context_additions=("target_audience", "brand_guidelines", "creative_objectives"),
            constraints=("style_requirements", "content_guidelines", "format_specifications"),
        ),
        DomainRule(
            domain="academic",
            triggers=("research", "analysis", "study", "academic", "scholarly", "peer-review", "methodology"),
            structure=("literature_review", "methodology", "analysis", "conclusions", "references"),
            terminology=("academic_rigor", "scholarly_language", "research_terminology"),
            context_additions=("theoretical_framework", "research_context", "academic_standards"),
            constraints=("peer_review_standards", "citation_requirements", "academic_integrity"),
        ),
    )
}

_CODE_TERMS = ("function", "class", "method", "variable", "algorithm", "data structure", "api", "framework")
_BUSINESS_TERMS = ("roi", "kpi", "metric", "revenue", "profit", "cost", "budget", "target")
_ACADEMIC_TERMS = ("research", "methodology", "literature", "analysis", "conclusion", "reference")


def _contains_any(lower: str, terms: tuple[str, ...]) -> bool:
    return any(term in lower for term in terms)


def _already_optimized(prompt: str) -> bool:
    return any(
        heading in prompt
        for heading in (_CONTEXT_HEADING, _STRUCTURE_HEADING, _CONSIDERATIONS_HEADING, _ORIGINAL_HEADING)
    )


def _best_framework(domain: str, intent: str) -> DomainPattern | None:
    best: DomainPattern | None = None
    for framework in FRAMEWORKS:
        if framework.domain != domain or intent not in framework.intents:
            continue
        if best is None or framework.effectiveness > best.effectiveness:
            best = framework
    return best


def _generic_optimization(prompt: str, rule: DomainRule) -> str:
    context = "\n- ".join(rule.context_additions[:2])
    structure = "\n- ".join(rule.structure[:3])
    return (
        f"{prompt}\n\n{_CONTEXT_HEADING} {rule.domain} context:\n- {context}"
        f"\n\n{_STRUCTURE_HEADING}\n- {structure}"
    )


def _missing_optimizations(text: str, rule: DomainRule) -> list[str]:
    lower = text.lower()
    missing: list[str] = []
    if "implementation" not in lower and "implementation_steps" in rule.structure:
        missing.append("Include implementation steps and timeline")
    if "constraint" not in lower and "limitation" not in lower:
        missing.append("Consider relevant constraints and limitations")
    return missing


def _framework_optimization(prompt: str, framework: DomainPattern, rule: DomainRule) -> str:
    variables = extract_variables(prompt, framework.variables)
    # Unextracted slots become visible "[name]" markers for the user to fill in.
    filled = {name: variables.get(name, f"[{name}]") for name in framework.variables}
    optimized = render(framework, filled)
    if prompt not in optimized:
        optimized = f"{optimized}\n\n{_ORIGINAL_HEADING} {prompt}"

    missing = _missing_optimizations(optimized, rule)
    if missing:
        optimized += f"\n\n{_CONSIDERATIONS_HEADING}\n- " + "\n- ".join(missing)
    return optimized


def optimize_for_domain(prompt: str, domain: str, intent: str) -> str:
    """Rewrite ``prompt`` with the best framework for ``domain`` and ``intent``.

    Returns ``prompt`` unchanged when the domain has no rule, none of its
    triggers appear, or the prompt already carries domain optimization.
    Falls back to generic context and structure hints when no framework
    accepts the intent.
    """
    rule = RULES.get(domain)
    if rule is None or _already_optimized(prompt):
        return prompt
    if not _contains_any(prompt.lower(), rule.triggers):
        return prompt

    framework = _best_framework(domain, intent)
    if framework is None:
        return _generic_optimization(prompt, rule)
    logger.debug("Applying %s framework for %s", framework.id, domain)
    try:
        return _framework_optimization(prompt, framework, rule)
    except TemplateIncompleteError as exc:
        # Extracted text can itself contain "{{".
        logger.info("Framework fill failed, using generic hints: %s", exc)
        return _generic_optimization(prompt, rule)


def domain_prompt_suggestions(prompt: str, domain: str) -> list[str]:
    """Suggestions that depend on what the prompt already mentions."""
    if domain not in RULES:
        return []
    lower = prompt.lower()
    suggestions: list[str] = []
    if "step" not in lower and "process" not in lower:
        suggestions.append(f"Add structured approach with clear steps for {domain} context")
    if domain == "technology" and not _contains_any(lower, _CODE_TERMS):
        suggestions.append("Include technical specifications and implementation details")
    if domain == "business" and not _contains_any(lower, _BUSINESS_TERMS):
        suggestions.append("Add business metrics, KPIs, and success criteria")
    if domain == "academic" and not _contains_any(lower, _ACADEMIC_TERMS):
        suggestions.append("Structure with academic rigor including methodology and citations")
    if "context" not in lower and "background" not in lower:
        suggestions.append(f"Provide relevant {domain} context and background information")
    return suggestions
