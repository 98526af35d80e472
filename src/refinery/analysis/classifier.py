"""Keyword classifier: intent, complexity, and domain from raw text.

Every decision is a count of regex hits per candidate. The candidate with
the most hits wins; ties go to the candidate declared first; no hits at
all falls back to ``informational`` / ``general``.

Complexity uses the word-count rule set only (total words and average
words per sentence). The additive keyword-score variant is not used.
"""

from __future__ import annotations

import logging
import re

from refinery.analysis.lexicon import (
    avg_words_per_sentence,
    count_matches,
    keywords,
    sentence_count,
    word_count,
)
from refinery.schemas.analysis import Classification

logger = logging.getLogger(__name__)

# ------------------------------------------------------------------
# Pattern tables (declaration order is the tie-break order)
# ------------------------------------------------------------------

_INTENT_PATTERNS: dict[str, re.Pattern[str]] = {
    "creative": keywords(
        "write", "create", "generate", "compose", "imagine", "story", "poem", "invent",
    ),
    "analytical": keywords(
        "analy[sz]e", "analysis", "compare", "evaluate", "explain", "assess", "examine",
        "contrast",
    ),
    "informational": keywords(
        "what", "who", "where", "which", "define", "definition", "tell me", "describe",
        "overview", "summari[sz]e",
    ),
    "problem_solving": keywords(
        "solve", "calculate", "debug", "fix", "troubleshoot", "resolve", "workaround",
        "error", "bug",
    ),
    "code": keywords(
        "code", "coding", "program", "programs", "programming", "function", "functions",
        "algorithm", "algorithms", "python", "javascript", "typescript", "java", "sql",
        "api", "script", "regex", "refactor", "compile", "unit tests?",
    ),
    "conversation": keywords(
        "chat", "discuss", "talk", "conversation", "chit-chat", "let's talk",
    ),
    "educational": keywords(
        "teach", "learn", "lesson", "student", "students", "course", "tutorial",
        "curriculum", "quiz",
    ),
    "research": keywords(
        "research", "study", "studies", "literature", "sources", "citations?",
        "investigate", "hypothesis", "survey",
    ),
}

_TASK_INTENT_PATTERNS: dict[str, re.Pattern[str]] = {
    "informational": keywords(
        "what", "who", "where", "when", "why", "define", "information", "tell me", "describe",
    ),
    "creative": keywords("create", "write", "imagine", "story", "design", "artistic"),
    "problem_solving": keywords("solve", "fix", "resolve", "address", "tackle", "overcome"),
    "persuasive": keywords("convince", "persuade", "argue", "prove", "justify"),
    "analytical": keywords("analy[sz]e", "compare", "evaluate", "assess", "examine", "study"),
    "instructional": keywords("how to", "teach", "explain", "instruct", "guide", "steps"),
}

_DOMAIN_PATTERNS: dict[str, re.Pattern[str]] = {
    "technology": keywords(
        "code", "coding", "programming", "software", "development", "developer",
        "python", "javascript", "typescript", "java", "function", "algorithm", "api",
        "database", "server", "backend", "frontend", "tech", "computer", "ai",
        "unit tests?", "devops", "kubernetes", "docker",
    ),
    "business": keywords(
        "business", "marketing", "strategy", "sales", "revenue", "market", "customers?",
        "roi", "kpis?", "startup", "profit", "stakeholders?", "brand", "competitors?",
    ),
    "creative": keywords(
        "story", "stories", "poem", "poetry", "creative", "literature", "novel",
        "fiction", "character", "screenplay", "lyrics", "artistic",
    ),
    "academic": keywords(
        "academic", "thesis", "dissertation", "paper", "scholarly", "literature review",
        "citations?", "peer[- ]review", "journal", "university",
    ),
    "medical": keywords(
        "medical", "health", "patients?", "disease", "symptoms?", "clinical",
        "treatment", "diagnosis", "medicine", "doctor",
    ),
    "legal": keywords(
        "legal", "law", "contract", "regulations?", "compliance", "court", "attorney",
        "lawsuit", "liability", "gdpr",
    ),
    "finance": keywords(
        "finance", "financial", "investment", "portfolio", "stocks?", "budget", "tax",
        "accounting", "loan", "interest rate",
    ),
    "education": keywords(
        "teach", "teacher", "lesson", "students?", "classroom", "curriculum", "course",
        "learning objectives?", "grade", "school",
    ),
    "scientific": keywords(
        "science", "scientific", "experiment", "physics", "chemistry", "biology",
        "laboratory", "research", "hypothesis", "molecule",
    ),
}


# ------------------------------------------------------------------
# Scoring
# ------------------------------------------------------------------


def _best(patterns: dict[str, re.Pattern[str]], text: str, default: str) -> tuple[str, int]:
    """Return (winner, hits). Strict ``>`` keeps the first-declared candidate on ties."""
    best_name, best_hits = default, 0
    for name, pattern in patterns.items():
        hits = count_matches(pattern, text)
        if hits > best_hits:
            best_name, best_hits = name, hits
    return best_name, best_hits


def classify_complexity(text: str) -> str:
    words = word_count(text)
    avg = avg_words_per_sentence(text)
    if words > 200 or avg > 25:
        return "expert"
    if words > 100 or avg > 20:
        return "complex"
    if words > 30:
        return "moderate"
    return "simple"


def classify_intent(text: str) -> str:
    return _best(_INTENT_PATTERNS, text, "informational")[0]


def classify_task_intent(text: str) -> str:
    return _best(_TASK_INTENT_PATTERNS, text, "informational")[0]


def detect_domain(text: str) -> str:
    return _best(_DOMAIN_PATTERNS, text, "general")[0]


def classify(text: str) -> Classification:
    """Derive intent, task intent, complexity, and domain in one pass."""
    intent, intent_hits = _best(_INTENT_PATTERNS, text, "informational")
    task_intent, _ = _best(_TASK_INTENT_PATTERNS, text, "informational")
    domain, domain_hits = _best(_DOMAIN_PATTERNS, text, "general")
    words = word_count(text)

    confidence = min(90, domain_hits * 15 + intent_hits * 10 + (20 if words >= 10 else 0))

    result = Classification(
        intent=intent,
        task_intent=task_intent,
        complexity=classify_complexity(text),
        domain=domain,
        confidence=confidence,
        word_count=words,
        sentence_count=sentence_count(text),
    )
    logger.debug(
        "Classified prompt: intent=%s task_intent=%s complexity=%s domain=%s",
        result.intent, result.task_intent, result.complexity, result.domain,
    )
    return result
