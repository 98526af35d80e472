"""Enhanced analyzer: semantic structure, context factors, and quality prediction (0-100)."""

from __future__ import annotations

import re

from refinery.analysis.lexicon import (
    clamp,
    keywords,
    round_half_up,
    sentences,
)
from refinery.analysis.quality import SPECIFIC_TERMS
from refinery.schemas.analysis import (
    ContextFactors,
    Issue,
    QualityPrediction,
    SemanticStructure,
)

_CONNECTORS = keywords(
    "therefore", "however", "furthermore", "moreover", "consequently", "additionally", "meanwhile",
)
_SEQUENCE = keywords("first", "second", "then", "next", "finally", "lastly")
_CAUSALITY = keywords("because", "since", "therefore", "thus", "consequently")
_COMPARISON = keywords("however", "but", "although", "while", "whereas")

_COMPLETENESS_CONTEXT = keywords("context", "background", "given", "assuming", "considering")
_COMPLETENESS_GOALS = keywords("goal", "objective", "aim", "purpose", "want", "need")
_COMPLETENESS_CONSTRAINTS = keywords("must", "should", "require", "within", "limit", "constraint")

_PROPER_NOUN = re.compile(r"\b[A-Z][a-z]+\b")  # case-sensitive
_PRECISION_WORDS = keywords("specific", "exactly", "precisely", "detailed")

_BACKGROUND = keywords("background", "context", "given", "assuming", "based on", "considering")
_CONSTRAINTS = keywords(
    "must", "should", "requires?", "required", "requirements?", "within", "limits?", "limited",
    "constraints?", "no more than", "at least", "at most", "ensur(?:e|es|ing)",
    "handl(?:e|es|ing)", "without",
)
_EXAMPLES = keywords("examples?", "for instance", "such as", "like", "including", r"e\.g\.")
_GOALS = keywords(
    "goals?", "objectives?", "aim", "purpose", "want", "need", "achieve", "accomplish",
)

# Checked in order; first hit wins.
_PROMPT_TONES: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("urgent", keywords("urgent", "asap", "immediately", "quickly", "rush", "emergency")),
    ("professional", keywords("please", "thank you", "appreciate", "kindly", "would you mind")),
    ("casual", keywords("hey", "hi", "lol", "btw", "awesome", "cool")),
    ("negative", keywords("problem", "issue", "wrong", "error", "failed", "disappointed")),
    ("positive", keywords("great", "excellent", "amazing", "wonderful", "fantastic")),
)


def _bounded(value: float) -> int:
    return int(clamp(round_half_up(value), 0, 100))


def _has_logical_flow(text: str) -> bool:
    if len(sentences(text)) < 2:
        return True
    return bool(_SEQUENCE.search(text) or _CAUSALITY.search(text) or _COMPARISON.search(text))


def analyze_semantic_structure(text: str) -> SemanticStructure:
    words = text.split()
    sentence_total = len(sentences(text))
    word_total = len(words)

    coherence = (40 if _has_logical_flow(text) else 0) + (30 if _CONNECTORS.search(text) else 0)
    coherence += min(30, sentence_total * 5)

    avg = word_total / max(1, sentence_total)
    complex_ratio = sum(1 for w in words if len(w) > 8) / max(1, word_total)
    clarity = 100 - (30 if avg > 20 else 0) - (25 if complex_ratio > 0.3 else 0)

    completeness = (
        (30 if _COMPLETENESS_CONTEXT.search(text) else 0)
        + (35 if _COMPLETENESS_GOALS.search(text) else 0)
        + (35 if _COMPLETENESS_CONSTRAINTS.search(text) else 0)
    )

    specificity = (
        (25 if any(ch.isdigit() for ch in text) else 0)
        + (30 if _PROPER_NOUN.search(text) else 0)
        + (25 if _PRECISION_WORDS.search(text) else 0)
        + min(20, word_total / 10)
    )

    return SemanticStructure(
        coherence=_bounded(coherence),
        clarity=_bounded(clarity),
        completeness=_bounded(completeness),
        specificity=_bounded(specificity),
    )


def detect_prompt_tone(text: str) -> str:
    for tone, pattern in _PROMPT_TONES:
        if pattern.search(text):
            return tone
    return "neutral"


def analyze_context_factors(text: str) -> ContextFactors:
    return ContextFactors(
        has_background=bool(_BACKGROUND.search(text)),
        has_constraints=bool(_CONSTRAINTS.search(text)),
        has_examples=bool(_EXAMPLES.search(text)),
        has_goals=bool(_GOALS.search(text)),
        has_specific_terms=bool(SPECIFIC_TERMS.search(text)),
        emotional_tone=detect_prompt_tone(text),
    )


def predict_quality(
    text: str, structure: SemanticStructure, factors: ContextFactors
) -> QualityPrediction:
    """Blend semantic metrics (60%) with context coverage (40%).

    Context coverage counts the four background/constraint/example/goal
    flags plus one point for the tone, which is always present.
    """
    flags = (factors.has_background, factors.has_constraints, factors.has_examples, factors.has_goals)
    context_score = (sum(flags) + 1) * 20

    effectiveness = min(100.0, structure.average * 0.6 + context_score * 0.4)
    potential = max(0.0, 100 - effectiveness)
    confidence = min(
        100,
        60 + (20 if len(text.split()) > 20 else 0) + (20 if structure.average > 70 else 0),
    )
    return QualityPrediction(
        estimated_effectiveness=_bounded(effectiveness),
        improvement_potential=_bounded(potential),
        confidence_score=confidence,
    )


def identify_issues(structure: SemanticStructure, factors: ContextFactors) -> list[Issue]:
    issues: list[Issue] = []
    if structure.clarity < 60:
        issues.append(Issue(
            type="clarity",
            severity="medium",
            description="Prompt lacks clarity and may be difficult to understand",
            solution="Simplify sentence structure and use clearer language",
        ))
    if structure.specificity < 50:
        issues.append(Issue(
            type="specificity",
            severity="high",
            description="Prompt is too vague and lacks specific details",
            solution="Add specific examples, constraints, and detailed requirements",
        ))
    if not factors.has_goals:
        issues.append(Issue(
            type="goals",
            severity="medium",
            description="No clear goals or objectives specified",
            solution="Clearly state what you want to achieve or accomplish",
        ))
    return issues


def readability_score(text: str) -> int:
    avg = len(text.split()) / max(1, len(sentences(text)))
    return 100 - (30 if avg > 20 else 0)


def optimization_priority(improvement_potential: int) -> str:
    if improvement_potential > 60:
        return "high"
    if improvement_potential > 30:
        return "medium"
    return "low"
