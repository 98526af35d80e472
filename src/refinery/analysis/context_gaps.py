"""Context gap detector: which kinds of context a prompt leaves out.

Keyword checks are plain lowercase substring tests, so short keywords
such as "for" or "by" also match inside longer words.
"""

from __future__ import annotations

from refinery.schemas.analysis import ContextDepth, ContextInfo, ContextReport

_SITUATIONAL = (
    "currently", "situation", "environment", "context", "scenario",
    "circumstances", "setting", "conditions", "state",
)
_BACKGROUND = (
    "background", "history", "previously", "before", "past",
    "experience", "prior", "already", "existing",
)
_AUDIENCE = (
    "audience", "for", "users", "customers", "team", "client",
    "beginner", "expert", "students", "professionals",
)
_TEMPORAL = (
    "deadline", "urgent", "quickly", "asap", "timeline",
    "schedule", "time", "date", "when", "by",
)
_DOMAIN_KEYWORDS: dict[str, tuple[str, ...]] = {
    "technology": ("code", "programming", "software", "technical", "api"),
    "business": ("revenue", "strategy", "market", "customers", "roi"),
    "creative": ("design", "creative", "artistic", "visual", "brand"),
    "academic": ("research", "study", "analysis", "methodology", "theory"),
}

# Rendering order for enhancement blocks (differs from detection order).
_RENDER_ORDER = ("situational", "background", "domain", "temporal", "audience")

# Completeness points lost per missing context type.
_PENALTY_PER_GAP = 15


def _mentions(text: str, words: tuple[str, ...]) -> bool:
    return any(word in text for word in words)


def _has_domain_context(text: str, domain: str) -> bool:
    if domain == "general":
        return True
    return _mentions(text, _DOMAIN_KEYWORDS.get(domain, ()))


def analyze_context(text: str, domain: str = "general") -> ContextReport:
    """Flag missing context in detection order: situational, background,
    audience, temporal, domain.
    """
    lower = text.lower()
    report = ContextReport()

    def _missing(info: ContextInfo, gap: str | None) -> None:
        report.missing_context.append(info.type)
        report.suggestions.append(info)
        if gap:
            report.context_gaps.append(gap)

    if not _mentions(lower, _SITUATIONAL):
        _missing(
            ContextInfo(
                type="situational",
                content="Add information about the current situation, environment, or circumstances",
                relevance=0.8,
                priority="medium",
            ),
            "Missing situational context - what's the current scenario?",
        )
    if not _mentions(lower, _BACKGROUND):
        _missing(
            ContextInfo(
                type="background",
                content="Include relevant background information, history, or previous context",
                relevance=0.7,
                priority="medium",
            ),
            "Missing background - what led to this need?",
        )
    if not _mentions(lower, _AUDIENCE):
        _missing(
            ContextInfo(
                type="audience",
                content="Specify who the response is for and their expertise level",
                relevance=0.9,
                priority="high",
            ),
            "Missing audience context - who is this for?",
        )
    if not _mentions(lower, _TEMPORAL):
        _missing(
            ContextInfo(
                type="temporal",
                content="Add time-related context like deadlines, timeframes, or urgency",
                relevance=0.6,
                priority="low",
            ),
            None,
        )
    if not _has_domain_context(lower, domain):
        _missing(
            ContextInfo(
                type="domain",
                content=f"Add {domain}-specific context, constraints, or requirements",
                relevance=0.8,
                priority="high",
            ),
            f"Missing {domain} context - what are the specific requirements?",
        )

    report.completeness_score = max(0, 100 - _PENALTY_PER_GAP * len(report.missing_context))
    return report


# ------------------------------------------------------------------
# Enhancement
# ------------------------------------------------------------------


def _group_by_type(infos: list[ContextInfo]) -> dict[str, list[ContextInfo]]:
    grouped: dict[str, list[ContextInfo]] = {t: [] for t in _RENDER_ORDER}
    for info in infos:
        grouped[info.type].append(info)
    return grouped


def apply_context_enhancement(
    prompt: str, infos: list[ContextInfo], depth: ContextDepth = "detailed"
) -> str:
    """Prepend caller-supplied context to ``prompt`` at the requested depth."""
    if not infos:
        return prompt
    grouped = _group_by_type(infos)

    match depth:
        case "comprehensive":
            sections = ["## Context & Background\n"]
            for ctx_type, entries in grouped.items():
                if not entries:
                    continue
                sections.append(f"### {ctx_type.capitalize()} Context:")
                sections.extend(f"- {info.content}" for info in entries)
                sections.append("")
            sections.append(f"## Request\n\n{prompt}")
            return "\n".join(sections)
        case "detailed":
            parts = [
                f"{ctx_type}: {', '.join(info.content for info in entries)}"
                for ctx_type, entries in grouped.items()
                if entries
            ]
            return f"Context: {'; '.join(parts)}\n\n{prompt}"
        case _:
            content = ", ".join(
                info.content
                for entries in grouped.values()
                for info in entries
                if info.priority != "low"
            )
            return f"Given that {content}, {prompt}" if content else prompt
