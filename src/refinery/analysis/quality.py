"""Basic quality scorer: clarity, specificity, effectiveness from lexical cues.

Scores are computed on a 1-10 scale starting at 5, summed from boolean
detectors, rounded and clamped, then multiplied by
``QUALITY_SCALE_FACTOR`` so callers only ever see 0-100.
"""

from __future__ import annotations

import re

from refinery.analysis.lexicon import (
    avg_words_per_sentence,
    clamp,
    keywords,
    round_half_up,
    word_count,
)
from refinery.schemas.analysis import QUALITY_SCALE_FACTOR, QualityIssues, QualityScore

_BASE = 5
_FLOOR = 1
_CEILING = 10

EMPTY_PROMPT_SUGGESTION = "Please enter a prompt to analyze."

# Detectors intentionally match substrings ("limit" also hits "limited").
ACTION_VERBS = re.compile(
    r"(create|write|generate|analy[sz]e|compare|explain|list|summari[sz]e|evaluate|describe"
    r"|outline|develop|design|implement|solve)",
    re.IGNORECASE,
)
CONTEXT_MARKERS = re.compile(
    r"(context|background|given that|assuming|based on|considering)", re.IGNORECASE
)
CONSTRAINT_MARKERS = re.compile(
    r"(must|should|require|need|constrain|limit|only|within|at least|at most|no more than"
    r"|less than|greater than|between|range|maximum|minimum|ensur(?:e|es|ing)|handl(?:e|es|ing))",
    re.IGNORECASE,
)
EXAMPLE_MARKERS = re.compile(r"(for example|e\.g\.|such as|like|including)", re.IGNORECASE)
SPECIFIC_TERMS = re.compile(
    r"\d+|[A-Z][a-z]+[A-Z]|\b[A-Z]{2,}\b|\b\w+\d+\w*\b|\b[A-Z][a-z]+\s+[A-Z][a-z]+\b"
)
CONNECTORS = keywords(
    "therefore", "however", "furthermore", "moreover", "consequently", "additionally",
    "first", "then", "next", "finally",
)

_SUGGESTIONS = {
    "too_short": "Your prompt is too short. Try to be more specific and provide more details.",
    "no_action": (
        "Start your prompt with an action verb (e.g., 'Create', 'Write', 'Analyze') "
        "to make it more directive."
    ),
    "not_specific": (
        "Include specific terms, numbers, or proper nouns to make your prompt more precise."
    ),
    "no_constraints": (
        "Add constraints or requirements to guide the response "
        "(e.g., 'in 3 bullet points', 'in 100 words')."
    ),
    "no_context": (
        "Provide more context or background information to get a more relevant response."
    ),
    "no_examples": "Consider adding examples to clarify your request.",
    "long_sentences": (
        "Your prompt contains long sentences. Try breaking them into shorter, clearer sentences."
    ),
}


def floor_score() -> QualityScore:
    """Minimum score with every issue flagged, used for empty input."""
    floor = _FLOOR * QUALITY_SCALE_FACTOR
    return QualityScore(
        clarity=floor,
        specificity=floor,
        effectiveness=floor,
        issues=QualityIssues(
            is_vague=True,
            is_overly_broad=True,
            lacks_context=True,
            suggestions=[EMPTY_PROMPT_SUGGESTION],
        ),
    )


def _scaled(raw: float) -> int:
    return int(clamp(round_half_up(raw), _FLOOR, _CEILING)) * QUALITY_SCALE_FACTOR


def score_quality(text: str) -> QualityScore:
    """Score ``text``; total over all strings (empty input gets the floor)."""
    if not text.strip():
        return floor_score()

    words = word_count(text)
    has_action = bool(ACTION_VERBS.search(text))
    has_context = bool(CONTEXT_MARKERS.search(text))
    has_constraints = bool(CONSTRAINT_MARKERS.search(text))
    has_examples = bool(EXAMPLE_MARKERS.search(text))
    has_specifics = bool(SPECIFIC_TERMS.search(text))
    has_connectors = bool(CONNECTORS.search(text))

    clarity = _BASE + min(3, words / 10) + (1 if has_connectors else 0)
    specificity = _BASE + (2 if has_specifics else 0) + (2 if has_constraints else 0)
    specificity += 1 if has_examples else 0
    effectiveness = _BASE + (2 if has_action else 0) + (1 if has_context else 0)

    effectiveness_score = _scaled(effectiveness)
    if "?" in text:
        effectiveness_score = min(_CEILING * QUALITY_SCALE_FACTOR, effectiveness_score + QUALITY_SCALE_FACTOR)

    suggestions: list[str] = []
    if words < 10:
        suggestions.append(_SUGGESTIONS["too_short"])
    if not has_action:
        suggestions.append(_SUGGESTIONS["no_action"])
    if not has_specifics:
        suggestions.append(_SUGGESTIONS["not_specific"])
    if not has_constraints:
        suggestions.append(_SUGGESTIONS["no_constraints"])
    if not has_context:
        suggestions.append(_SUGGESTIONS["no_context"])
    if not has_examples and words > 15:
        suggestions.append(_SUGGESTIONS["no_examples"])
    if avg_words_per_sentence(text) > 20:
        suggestions.append(_SUGGESTIONS["long_sentences"])

    return QualityScore(
        clarity=_scaled(clarity),
        specificity=_scaled(specificity),
        effectiveness=effectiveness_score,
        issues=QualityIssues(
            is_vague=words < 10 or not has_specifics,
            is_overly_broad=not has_action or not has_constraints,
            lacks_context=not has_context or words < 15,
            suggestions=suggestions,
        ),
    )
