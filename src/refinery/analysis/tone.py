"""Emotional tone analyzer and the emotional framing enhancement.

The appropriateness matrix is fixture data: five domain rows (``general``
is the fallback row) by eight tones. Domains without a row score 70.
"""

from __future__ import annotations

from refinery.schemas.analysis import EmotionalIntensity, EmotionalTone, ToneReport

# Checked in order; first tone whose keyword appears as a substring wins.
_TONE_KEYWORDS: tuple[tuple[EmotionalTone, tuple[str, ...]], ...] = (
    ("urgent", ("urgent", "asap", "immediately", "quickly", "deadline", "rush")),
    ("encouraging", ("please", "help", "support", "guide", "assist")),
    ("empathetic", ("understand", "feel", "appreciate", "consider")),
    ("confident", ("will", "must", "should", "expect", "require")),
    ("enthusiastic", ("excited", "amazing", "fantastic", "great", "awesome")),
    ("professional", ("accordingly", "therefore", "consequently", "furthermore")),
)

APPROPRIATENESS: dict[str, dict[str, int]] = {
    "technology": {
        "neutral": 90, "professional": 95, "confident": 85, "encouraging": 70,
        "urgent": 60, "empathetic": 40, "enthusiastic": 30, "supportive": 75,
    },
    "business": {
        "neutral": 85, "professional": 95, "confident": 90, "encouraging": 80,
        "urgent": 85, "empathetic": 70, "enthusiastic": 60, "supportive": 75,
    },
    "creative": {
        "neutral": 70, "professional": 80, "confident": 75, "encouraging": 90,
        "urgent": 50, "empathetic": 85, "enthusiastic": 95, "supportive": 90,
    },
    "academic": {
        "neutral": 95, "professional": 90, "confident": 80, "encouraging": 60,
        "urgent": 40, "empathetic": 70, "enthusiastic": 30, "supportive": 65,
    },
    "general": {
        "neutral": 80, "professional": 85, "confident": 80, "encouraging": 85,
        "urgent": 70, "empathetic": 80, "enthusiastic": 75, "supportive": 85,
    },
}
DEFAULT_APPROPRIATENESS = 70

# Enhancement is skipped below this appropriateness.
MIN_APPROPRIATENESS = 60

_SUGGESTED_TONES: dict[str, list[EmotionalTone]] = {
    "technology": ["professional", "neutral", "confident"],
    "business": ["professional", "confident", "urgent"],
    "creative": ["enthusiastic", "encouraging", "supportive"],
    "academic": ["neutral", "professional", "confident"],
    "general": ["encouraging", "professional", "supportive"],
}

_GUIDANCE: dict[str, list[str]] = {
    "technology": [
        "Use professional language",
        "Focus on technical accuracy",
        "Provide clear, actionable steps",
    ],
    "business": [
        "Emphasize business value",
        "Include ROI considerations",
        "Use confident, decisive language",
    ],
    "creative": [
        "Encourage exploration",
        "Use inspiring language",
        "Foster creativity and innovation",
    ],
    "academic": [
        "Maintain objectivity",
        "Use precise terminology",
        "Include evidence-based reasoning",
    ],
}

# Only the first phrase of each pair is woven in; the second is an alternate.
_ELEMENTS: dict[str, dict[str, tuple[str, str]]] = {
    "encouraging": {
        "subtle": ("please help", "I would appreciate"),
        "moderate": ("please provide guidance", "I would be grateful for your help"),
        "strong": ("I really need your expertise", "Your guidance would be incredibly valuable"),
    },
    "urgent": {
        "subtle": ("when convenient", "at your earliest opportunity"),
        "moderate": ("as soon as possible", "this is time-sensitive"),
        "strong": ("urgently needed", "immediate attention required"),
    },
    "empathetic": {
        "subtle": ("understanding that", "considering the situation"),
        "moderate": ("I understand this may be complex", "recognizing the challenges"),
        "strong": ("I deeply appreciate the complexity", "fully understanding the difficulties"),
    },
    "confident": {
        "subtle": ("I expect", "should provide"),
        "moderate": ("I need a comprehensive solution", "must deliver results"),
        "strong": ("I require definitive answers", "must provide expert-level guidance"),
    },
    "professional": {
        "subtle": ("accordingly", "as requested"),
        "moderate": ("in accordance with best practices", "following professional standards"),
        "strong": ("adhering to industry standards", "meeting professional excellence criteria"),
    },
    "enthusiastic": {
        "subtle": ("this is interesting", "I look forward to"),
        "moderate": ("this is exciting", "I am eager to explore"),
        "strong": ("this is incredibly exciting", "I am thrilled to dive into"),
    },
    "supportive": {
        "subtle": ("to help with", "in support of"),
        "moderate": ("to provide comprehensive support", "to fully assist with"),
        "strong": ("to provide exceptional support", "to go above and beyond in helping"),
    },
}


def detect_tone(text: str) -> EmotionalTone:
    lower = text.lower()
    for tone, words in _TONE_KEYWORDS:
        if any(word in lower for word in words):
            return tone
    return "neutral"


def appropriateness(tone: str, domain: str) -> int:
    return APPROPRIATENESS.get(domain, {}).get(tone, DEFAULT_APPROPRIATENESS)


def suggested_tones(domain: str) -> list[EmotionalTone]:
    return list(_SUGGESTED_TONES.get(domain, ["neutral", "professional"]))


def tone_warnings(tone: str, domain: str) -> list[str]:
    warnings: list[str] = []
    if appropriateness(tone, domain) < 50:
        warnings.append(f"{tone} tone may not be appropriate for {domain} domain")
    if domain == "academic" and tone in ("enthusiastic", "urgent"):
        warnings.append("Academic contexts typically require neutral or professional tones")
    if domain == "technology" and tone == "empathetic":
        warnings.append(
            "Technical contexts may benefit from more direct, solution-focused language"
        )
    return warnings


def analyze_tone(
    text: str, domain: str = "general", declared_tone: EmotionalTone = "neutral"
) -> ToneReport:
    """Score how well ``declared_tone`` fits ``domain``.

    Appropriateness and warnings depend only on the declared tone; the
    text contributes the detected ``current_tone`` and a length bonus to
    effectiveness.
    """
    score = appropriateness(declared_tone, domain)
    return ToneReport(
        current_tone=detect_tone(text),
        declared_tone=declared_tone,
        appropriateness=score,
        suggestions=suggested_tones(domain),
        warnings=tone_warnings(declared_tone, domain),
        guidance=tone_guidance(declared_tone, domain),
        effectiveness=min(95, score + (10 if len(text) > 200 else 0)),
    )


def tone_guidance(tone: str, domain: str) -> list[str]:
    """Short writing advice for the domain; ``tone`` does not change it."""
    return list(_GUIDANCE.get(domain, ["Use appropriate tone for context"]))


def apply_emotional_enhancement(
    prompt: str,
    tone: EmotionalTone,
    intensity: EmotionalIntensity = "moderate",
    domain: str = "general",
) -> str:
    """Weave a tone phrase in front of ``prompt``.

    Returns ``prompt`` unchanged for ``neutral``, for tones that score below
    ``MIN_APPROPRIATENESS`` in ``domain``, or when the phrase is already there.
    """
    if appropriateness(tone, domain) < MIN_APPROPRIATENESS:
        return prompt
    phrases = _ELEMENTS.get(tone)
    if not phrases:
        return prompt
    element = phrases[intensity][0]
    if prompt.startswith(element):
        return prompt

    match intensity:
        case "subtle":
            return f"{element}, {prompt}"
        case "moderate":
            return f"{element}: {prompt}"
        case _:
            return f"{element}:\n\n{prompt}"
