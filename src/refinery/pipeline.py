"""Pipeline facade: analyze and optimize prompts, with a read-through cache.

Flow for ``optimize``:

    raw text -> analyzers (classifier, quality, semantic, context, tone,
    forecast) -> technique selector -> composer -> result builder

The analyzers share no state, so their order does not matter; selection
runs only after all of them have finished.
"""

from __future__ import annotations

import logging
from typing import Any

from refinery.analysis.classifier import classify
from refinery.analysis.context_gaps import analyze_context
from refinery.analysis.lexicon import clamp, estimate_tokens, round_half_up
from refinery.analysis.predictor import OutcomePredictor
from refinery.analysis.quality import floor_score, score_quality
from refinery.analysis.semantic import (
    analyze_context_factors,
    analyze_semantic_structure,
    identify_issues,
    optimization_priority,
    predict_quality,
    readability_score,
)
from refinery.analysis.tone import analyze_tone
from refinery.compose.modes import compose
from refinery.compose.platforms import get_platform
from refinery.compose.result import build_result
from refinery.errors import EmptyInputError, ProviderUnavailableError
from refinery.patterns.domain_rules import domain_prompt_suggestions
from refinery.patterns.library import detect_pattern_domain, suggestions_for_domain
from refinery.schemas.analysis import (
    QUALITY_SCALE_FACTOR,
    ContextInfo,
    EmotionalTone,
    EnhancedAnalysis,
    Issue,
    PromptAnalysis,
    QualityPrediction,
    SemanticStructure,
)
from refinery.schemas.config import RefineryConfig
from refinery.schemas.optimization import Mode, OptimizationOptions, OptimizationResult
from refinery.shared.cache import TTLCache, cache_key
from refinery.techniques.selector import select_techniques

logger = logging.getLogger(__name__)


def placeholder_analysis(prompt: str = "") -> PromptAnalysis:
    """Floor-score analysis for empty input: every metric at its minimum, every flag set."""
    return PromptAnalysis(
        prompt=prompt,
        quality=floor_score(),
        semantic_structure=SemanticStructure(coherence=0, clarity=0, completeness=0, specificity=0),
        quality_prediction=QualityPrediction(
            estimated_effectiveness=0, improvement_potential=100, confidence_score=0
        ),
        identified_issues=[
            Issue(
                type="empty",
                severity="high",
                description="Prompt is empty",
                solution="Enter the request you want to analyze",
            )
        ],
        readability_score=0,
        optimization_priority="high",
    )


def _scale_provider_score(value: float) -> int:
    return int(clamp(round_half_up(value * QUALITY_SCALE_FACTOR), 0, 100))


def merge_enhanced(analysis: PromptAnalysis, enhanced: EnhancedAnalysis) -> PromptAnalysis:
    """Overlay provider scores on the heuristic analysis.

    Only fields the provider actually returned replace heuristic values;
    provider scores (1-10) are converted to the 0-100 scale.
    """
    quality_update: dict[str, Any] = {}
    for name in ("clarity", "specificity", "effectiveness"):
        value = getattr(enhanced, name)
        if value is not None:
            quality_update[name] = _scale_provider_score(value)

    issues_update: dict[str, Any] = {}
    for name in ("is_vague", "is_overly_broad", "lacks_context"):
        value = getattr(enhanced, name)
        if value is not None:
            issues_update[name] = value
    if enhanced.suggestions:
        issues_update["suggestions"] = list(enhanced.suggestions)

    issues = analysis.quality.issues.model_copy(update=issues_update)
    quality = analysis.quality.model_copy(update={**quality_update, "issues": issues})
    return analysis.model_copy(update={"quality": quality, "source": "enhanced"}, deep=True)


def _dedupe(items: list[str]) -> list[str]:
    return list(dict.fromkeys(items))


class PromptRefinery:
    """Analyze and optimize prompts, caching results for the configured TTLs."""

    def __init__(
        self,
        config: RefineryConfig | None = None,
        cache: TTLCache[Any] | None = None,
        predictor: OutcomePredictor | None = None,
    ) -> None:
        self.config = config or RefineryConfig()
        self.cache: TTLCache[Any] = cache if cache is not None else TTLCache()
        self.predictor = predictor or OutcomePredictor()

    # ------------------------------------------------------------------
    # Cache helpers
    # ------------------------------------------------------------------

    def _cached(self, key: str) -> Any | None:
        if not self.config.cache.enabled:
            return None
        hit = self.cache.get(key)
        if hit is not None:
            logger.debug("Cache hit %s", key[:12])
            return hit.model_copy(deep=True)
        return None

    def _store(self, key: str, value: Any, ttl: float) -> None:
        if self.config.cache.enabled:
            self.cache.put(key, value.model_copy(deep=True), ttl)

    def _resolve_domain(self, domain: str | None) -> str:
        return (domain or self.config.default_domain or "").strip().lower()

    # ------------------------------------------------------------------
    # Analysis
    # ------------------------------------------------------------------

    def _run_analyzers(self, prompt: str, domain: str, tone: EmotionalTone) -> PromptAnalysis:
        classification = classify(prompt)
        domain = domain or classification.domain

        structure = analyze_semantic_structure(prompt)
        factors = analyze_context_factors(prompt)
        prediction = predict_quality(prompt, structure, factors)
        issues = identify_issues(structure, factors)

        analysis = PromptAnalysis(
            prompt=prompt,
            intent=classification.intent,
            task_intent=classification.task_intent,
            complexity=classification.complexity,
            domain=domain,
            word_count=classification.word_count,
            sentence_count=classification.sentence_count,
            token_estimate=estimate_tokens(prompt),
            confidence=classification.confidence,
            quality=score_quality(prompt),
            semantic_structure=structure,
            context_factors=factors,
            quality_prediction=prediction,
            identified_issues=issues,
            readability_score=readability_score(prompt),
            optimization_priority=optimization_priority(prediction.improvement_potential),
            context=analyze_context(prompt, domain),
            tone=analyze_tone(prompt, domain, tone),
            forecast=self.predictor.forecast(
                structure, factors, classification.complexity, classification.task_intent, issues
            ),
            domain_suggestions=_dedupe(
                suggestions_for_domain(detect_pattern_domain(prompt))
                + domain_prompt_suggestions(prompt, domain)
            ),
        )
        return analysis

    def analyze(
        self,
        prompt: str,
        domain: str | None = None,
        tone: EmotionalTone | None = None,
        enhanced: EnhancedAnalysis | None = None,
    ) -> PromptAnalysis:
        """Analyze ``prompt``; raises ``EmptyInputError`` for blank input.

        ``domain`` overrides detection. ``enhanced`` is a provider result
        merged over the heuristic quality scores.
        """
        if not prompt.strip():
            raise EmptyInputError(placeholder_analysis(prompt))

        resolved = self._resolve_domain(domain)
        tone = tone or self.config.tone
        key = cache_key(
            "analysis",
            prompt=prompt,
            domain=resolved,
            tone=tone,
            enhanced=enhanced,
            accuracy=self.predictor.accuracy,
        )
        cached = self._cached(key)
        if cached is not None:
            return cached

        analysis = self._run_analyzers(prompt, resolved, tone)
        if enhanced is not None:
            analysis = merge_enhanced(analysis, enhanced)
        analysis.recommended_techniques = [t.id for t in select_techniques(analysis)]

        logger.debug(
            "Analyzed prompt: domain=%s complexity=%s recommended=%s",
            analysis.domain, analysis.complexity, analysis.recommended_techniques,
        )
        self._store(key, analysis, self.config.cache.analysis_ttl)
        return analysis

    async def analyze_enhanced(
        self,
        prompt: str,
        client: Any,
        domain: str | None = None,
        tone: EmotionalTone | None = None,
    ) -> PromptAnalysis:
        """Analyze with a provider override, falling back to heuristics on failure.

        ``client`` is a ``ProviderClient`` or ``DryRunClient``.
        """
        if not prompt.strip():
            raise EmptyInputError(placeholder_analysis(prompt))
        try:
            enhanced = await client.analyze_prompt(prompt)
        except ProviderUnavailableError as exc:
            logger.warning("Enhanced analysis unavailable, using heuristics: %s", exc)
            return self.analyze(prompt, domain, tone)
        return self.analyze(prompt, domain, tone, enhanced=enhanced)

    # ------------------------------------------------------------------
    # Optimization
    # ------------------------------------------------------------------

    def optimize(
        self,
        prompt: str,
        domain: str | None = None,
        options: OptimizationOptions | None = None,
        mode: Mode | None = None,
        platform: str | None = None,
        techniques: list[str] | None = None,
        context: list[ContextInfo] | None = None,
        analysis: PromptAnalysis | None = None,
    ) -> OptimizationResult:
        """Rewrite ``prompt``; raises ``EmptyInputError`` for blank input.

        Missing arguments come from the config. Pass ``analysis`` to reuse
        one already computed (for example an enhanced analysis).
        """
        if not prompt.strip():
            raise EmptyInputError(placeholder_analysis(prompt))

        options = options or self.config.options
        mode = mode or self.config.mode
        target = get_platform(platform or self.config.platform)
        resolved = self._resolve_domain(domain)
        key = cache_key(
            "optimization",
            mode=mode,
            prompt=prompt,
            domain=resolved,
            platform=target.id,
            options=options,
            techniques=techniques,
            context=[c.model_dump() for c in context] if context else None,
            analysis=analysis,
        )
        cached = self._cached(key)
        if cached is not None:
            return cached

        if analysis is None:
            analysis = self.analyze(prompt, resolved or None)
        text, applied = compose(
            prompt,
            analysis.domain,
            analysis,
            options,
            mode,
            target.id,
            techniques=techniques,
            context=context,
        )
        result = build_result(
            prompt, text, applied, analysis, options, mode, analysis.domain, target.id
        )
        logger.info(
            "Optimized %s prompt (%s): %d technique(s), %d -> %d tokens",
            mode, analysis.domain, len(applied),
            result.token_count.original, result.token_count.optimized,
        )
        self._store(key, result, self.config.cache.optimization_ttl)
        return result


# ------------------------------------------------------------------
# Module-level convenience API
# ------------------------------------------------------------------

_default: PromptRefinery | None = None


def default_refinery() -> PromptRefinery:
    global _default
    if _default is None:
        _default = PromptRefinery()
    return _default


def analyze(prompt: str, domain: str | None = None) -> PromptAnalysis:
    return default_refinery().analyze(prompt, domain)


def optimize(
    prompt: str,
    domain: str | None = None,
    options: OptimizationOptions | None = None,
    mode: Mode = "normal",
) -> OptimizationResult:
    return default_refinery().optimize(prompt, domain, options, mode)
