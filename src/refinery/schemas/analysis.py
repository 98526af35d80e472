"""Pydantic models for prompt analysis: classifier, scorers, and detectors."""

from __future__ import annotations

from typing import Literal, get_args

from pydantic import AliasChoices, BaseModel, Field, field_validator

# ------------------------------------------------------------------
# Closed vocabularies (tuple order is declaration order)
# ------------------------------------------------------------------

Intent = Literal[
    "creative",
    "analytical",
    "informational",
    "problem_solving",
    "code",
    "conversation",
    "educational",
    "research",
]
TaskIntent = Literal[
    "informational",
    "creative",
    "problem_solving",
    "persuasive",
    "analytical",
    "instructional",
]
Complexity = Literal["simple", "moderate", "complex", "expert"]
Severity = Literal["low", "medium", "high"]
Priority = Literal["low", "medium", "high"]
PromptTone = Literal["urgent", "professional", "casual", "negative", "positive", "neutral"]
EmotionalTone = Literal[
    "neutral",
    "professional",
    "confident",
    "encouraging",
    "urgent",
    "empathetic",
    "enthusiastic",
    "supportive",
]
EmotionalIntensity = Literal["subtle", "moderate", "strong"]
ContextType = Literal["situational", "background", "domain", "temporal", "audience"]
ContextDepth = Literal["basic", "detailed", "comprehensive"]

INTENTS: tuple[str, ...] = get_args(Intent)
TASK_INTENTS: tuple[str, ...] = get_args(TaskIntent)
COMPLEXITY_LEVELS: tuple[str, ...] = get_args(Complexity)
EMOTIONAL_TONES: tuple[str, ...] = get_args(EmotionalTone)
CONTEXT_TYPES: tuple[str, ...] = get_args(ContextType)

KNOWN_DOMAINS: tuple[str, ...] = (
    "technology",
    "business",
    "creative",
    "academic",
    "medical",
    "legal",
    "finance",
    "education",
    "scientific",
    "general",
)

# Basic scorer works on 1-10; everything exposed on PromptAnalysis is 0-100.
QUALITY_SCALE_FACTOR = 10


# ------------------------------------------------------------------
# Classifier
# ------------------------------------------------------------------


class Classification(BaseModel):
    """Output of the keyword classifier."""

    intent: Intent = "informational"
    task_intent: TaskIntent = "informational"
    complexity: Complexity = "simple"
    domain: str = "general"
    confidence: int = Field(default=0, ge=0, le=90)
    word_count: int = 0
    sentence_count: int = 0


# ------------------------------------------------------------------
# Quality scores
# ------------------------------------------------------------------


class QualityIssues(BaseModel):
    """Issue flags raised by the basic quality scorer."""

    is_vague: bool = False
    is_overly_broad: bool = False
    lacks_context: bool = False
    suggestions: list[str] = []


class QualityScore(BaseModel):
    """Clarity / specificity / effectiveness on the canonical 0-100 scale."""

    clarity: int = Field(ge=0, le=100)
    specificity: int = Field(ge=0, le=100)
    effectiveness: int = Field(ge=0, le=100)
    issues: QualityIssues = QualityIssues()

    @property
    def overall(self) -> int:
        return round((self.clarity + self.specificity + self.effectiveness) / 3)


class SemanticStructure(BaseModel):
    """Structural metrics from the enhanced analyzer (0-100 each)."""

    coherence: int = Field(ge=0, le=100)
    clarity: int = Field(ge=0, le=100)
    completeness: int = Field(ge=0, le=100)
    specificity: int = Field(ge=0, le=100)

    @property
    def average(self) -> float:
        return (self.coherence + self.clarity + self.completeness + self.specificity) / 4


class ContextFactors(BaseModel):
    """Boolean context markers plus the tone detected in the prompt itself."""

    has_background: bool = False
    has_constraints: bool = False
    has_examples: bool = False
    has_goals: bool = False
    has_specific_terms: bool = False
    emotional_tone: PromptTone = "neutral"


class QualityPrediction(BaseModel):
    estimated_effectiveness: int = Field(ge=0, le=100)
    improvement_potential: int = Field(ge=0, le=100)
    confidence_score: int = Field(ge=0, le=100)


class Issue(BaseModel):
    """A single detected problem with a suggested fix."""

    type: str  # "clarity", "specificity", "goals", ...
    severity: Severity
    description: str
    solution: str = ""


# ------------------------------------------------------------------
# Context gaps and tone
# ------------------------------------------------------------------


class ContextInfo(BaseModel):
    """A piece of context, either a detector suggestion or caller-supplied."""

    type: ContextType
    content: str
    relevance: float = Field(default=0.5, ge=0.0, le=1.0)
    priority: Priority = "medium"


class ContextReport(BaseModel):
    missing_context: list[ContextType] = []
    suggestions: list[ContextInfo] = []
    completeness_score: int = Field(default=100, ge=0, le=100)
    context_gaps: list[str] = []


class ToneReport(BaseModel):
    current_tone: EmotionalTone = "neutral"
    declared_tone: EmotionalTone = "neutral"
    appropriateness: int = Field(default=70, ge=0, le=100)
    suggestions: list[EmotionalTone] = []
    warnings: list[str] = []
    guidance: list[str] = []
    effectiveness: int = Field(default=70, ge=0, le=100)


class OutcomeForecast(BaseModel):
    """Weighted prediction of how well the prompt will perform."""

    predicted_effectiveness: int = Field(ge=0, le=100)
    confidence: int = Field(ge=0, le=100)
    improvement_potential: int = Field(ge=0, le=100)
    risk_factors: list[str] = []
    success_factors: list[str] = []


# ------------------------------------------------------------------
# Provider override
# ------------------------------------------------------------------


class EnhancedAnalysis(BaseModel):
    """Scores returned by an external LLM provider, on the provider's 1-10 scale.

    Treated as an opaque override: only fields present are merged.
    """

    clarity: float | None = None
    specificity: float | None = None
    effectiveness: float | None = None
    is_vague: bool | None = Field(default=None, validation_alias=AliasChoices("is_vague", "isVague"))
    is_overly_broad: bool | None = Field(
        default=None, validation_alias=AliasChoices("is_overly_broad", "isOverlyBroad")
    )
    lacks_context: bool | None = Field(
        default=None, validation_alias=AliasChoices("lacks_context", "lacksContext")
    )
    suggestions: list[str] = []

    @field_validator("clarity", "specificity", "effectiveness", mode="before")
    @classmethod
    def clamp_provider_score(cls, v: object) -> float | None:
        if v is None:
            return None
        try:
            value = float(v)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return None
        return min(10.0, max(1.0, value))

    @field_validator("suggestions", mode="before")
    @classmethod
    def coerce_suggestions(cls, v: object) -> list[str]:
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        if not isinstance(v, (list, tuple)):
            raise ValueError(f"suggestions must be a list, got {type(v).__name__}")
        return [str(item) for item in v if item]


# ------------------------------------------------------------------
# Aggregate
# ------------------------------------------------------------------


class PromptAnalysis(BaseModel):
    """Everything the pipeline knows about one prompt."""

    prompt: str
    intent: Intent = "informational"
    task_intent: TaskIntent = "informational"
    complexity: Complexity = "simple"
    domain: str = "general"
    word_count: int = 0
    sentence_count: int = 0
    token_estimate: int = 0
    confidence: int = Field(default=0, ge=0, le=90)

    quality: QualityScore
    semantic_structure: SemanticStructure
    context_factors: ContextFactors = ContextFactors()
    quality_prediction: QualityPrediction
    identified_issues: list[Issue] = []
    readability_score: int = Field(default=100, ge=0, le=100)
    optimization_priority: Priority = "low"
    recommended_techniques: list[str] = []

    context: ContextReport = ContextReport()
    tone: ToneReport = ToneReport()
    forecast: OutcomeForecast | None = None
    domain_suggestions: list[str] = []

    source: Literal["heuristic", "enhanced"] = "heuristic"


class OutcomeFeedback(BaseModel):
    """Observed result of a prompt, used to calibrate forecast confidence."""

    predicted_effectiveness: int = Field(ge=0, le=100)
    actual_effectiveness: int = Field(ge=1, le=100)
    satisfaction: int = Field(ge=1, le=10)
    risk_factors: list[str] = []
    comments: str = ""
