"""Technique catalog: the static registry of advanced optimization techniques.

Each entry appends (or, for domain expertise, prepends) a fixed instruction
block. Entries are immutable and loaded once at import.
"""

from __future__ import annotations

import logging

from refinery.schemas.techniques import (
    Applicability,
    OptimizationTechnique,
    TechniqueContext,
)

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Implementations
# ------------------------------------------------------------------

_META_INSTRUCTION = """Please approach this task with the following meta-instructions:
1. Break down complex problems into manageable components
2. Provide step-by-step reasoning for your approach
3. Consider multiple perspectives and potential solutions
4. Validate your reasoning and check for logical consistency
5. Provide practical, actionable recommendations"""

_CONSTITUTIONAL = """Please adhere to these constitutional principles in your response:
- Be helpful, harmless, and honest
- Provide balanced perspectives and acknowledge limitations
- Consider ethical implications and potential consequences
- Ensure accuracy and cite uncertainties
- Respect diverse viewpoints and cultural sensitivities"""

_STAR = """Please structure your response using the STAR framework:
- SITUATION: Describe the context and background
- TASK: Define what needs to be accomplished
- ACTION: Detail the specific steps and methodology
- RESULT: Explain expected outcomes and success metrics"""

_PROBLEM_SOLUTION_BENEFIT = """Please organize your response as follows:
1. PROBLEM: Clearly identify and define the core challenges
2. SOLUTION: Provide detailed, actionable solutions
3. BENEFITS: Explain the advantages and positive outcomes
4. IMPLEMENTATION: Include practical next steps"""

_EMOTIONAL_INTELLIGENCE = """Please incorporate emotional intelligence in your response:
- Acknowledge the emotional context and human perspective
- Use empathetic language and tone appropriate to the situation
- Consider the emotional impact of recommendations
- Provide supportive and encouraging guidance
- Address potential concerns or anxieties"""

_MULTI_PERSPECTIVE = """Please analyze this from multiple perspectives:
1. Stakeholder Analysis: Consider different parties affected
2. Short-term vs Long-term: Evaluate immediate and future implications
3. Risk vs Reward: Assess potential benefits and drawbacks
4. Alternative Viewpoints: Present contrasting but valid perspectives
5. Synthesis: Integrate insights from different angles"""

_EXPERT_INCORPORATE = """Please incorporate:
- Industry-specific terminology and concepts
- Current best practices and standards
- Real-world case studies and examples
- Potential challenges and solutions specific to this domain
- Latest developments and trends in the field"""

_QUALITY_ASSURANCE = """Please apply this quality assurance framework:
1. Accuracy Check: Verify all facts and claims
2. Completeness Review: Ensure all aspects are covered
3. Consistency Validation: Check for logical coherence
4. Clarity Assessment: Ensure clear communication
5. Actionability Test: Confirm recommendations are practical
6. Risk Evaluation: Identify potential issues or limitations"""

_EXPERT_OPENER = "As a recognized expert in"


def _appending(block: str):
    def implementation(prompt: str, context: TechniqueContext | None = None) -> str:
        return f"{prompt}\n\n{block}"

    return implementation


def _inject_expertise(prompt: str, context: TechniqueContext | None = None) -> str:
    domain = context.domain if context else "general"
    return (
        f"{_EXPERT_OPENER} {domain} with deep domain knowledge and practical experience, "
        f"{prompt}\n\n{_EXPERT_INCORPORATE}"
    )


def _heading(block: str) -> str:
    return block.split("\n", 1)[0]


# ------------------------------------------------------------------
# Registry (declaration order is the tie-break order for selection)
# ------------------------------------------------------------------

TECHNIQUES: tuple[OptimizationTechnique, ...] = (
    OptimizationTechnique(
        id="meta_instruction",
        name="Meta-Instruction Enhancement",
        category="meta",
        description="Add meta-instructions about how to approach the task",
        applicability=Applicability(
            complexity=("complex", "expert"),
            intents=("problem_solving", "analytical", "instructional"),
            domains=("technology", "academic", "business"),
        ),
        effectiveness=85,
        marker=_heading(_META_INSTRUCTION),
        implementation=_appending(_META_INSTRUCTION),
    ),
    OptimizationTechnique(
        id="constitutional_ai",
        name="Constitutional AI Principles",
        category="meta",
        description="Apply constitutional AI principles for better alignment",
        applicability=Applicability(
            complexity=("moderate", "complex", "expert"),
            intents=("problem_solving", "analytical", "persuasive"),
            domains=("business", "legal", "academic"),
        ),
        effectiveness=80,
        marker=_heading(_CONSTITUTIONAL),
        implementation=_appending(_CONSTITUTIONAL),
    ),
    OptimizationTechnique(
        id="star_framework",
        name="STAR Framework (Situation-Task-Action-Result)",
        category="structure",
        description="Structure responses using STAR methodology",
        applicability=Applicability(
            complexity=("moderate", "complex"),
            intents=("problem_solving", "instructional"),
            domains=("business", "technology", "academic"),
        ),
        effectiveness=78,
        marker=_heading(_STAR),
        implementation=_appending(_STAR),
    ),
    OptimizationTechnique(
        id="problem_solution_benefit",
        name="Problem-Solution-Benefit Structure",
        category="structure",
        description="Organize content around problems, solutions, and benefits",
        applicability=Applicability(
            complexity=("moderate", "complex"),
            intents=("problem_solving", "persuasive"),
            domains=("business", "technology"),
        ),
        effectiveness=82,
        marker=_heading(_PROBLEM_SOLUTION_BENEFIT),
        implementation=_appending(_PROBLEM_SOLUTION_BENEFIT),
    ),
    OptimizationTechnique(
        id="emotional_intelligence",
        name="Emotional Intelligence Enhancement",
        category="emotional",
        description="Incorporate emotional awareness and empathy",
        applicability=Applicability(
            complexity=("simple", "moderate", "complex"),
            intents=("creative", "persuasive"),
            domains=("creative", "business", "education"),
        ),
        effectiveness=75,
        marker=_heading(_EMOTIONAL_INTELLIGENCE),
        implementation=_appending(_EMOTIONAL_INTELLIGENCE),
    ),
    OptimizationTechnique(
        id="multi_perspective",
        name="Multi-Perspective Analysis",
        category="reasoning",
        description="Analyze from multiple stakeholder perspectives",
        applicability=Applicability(
            complexity=("complex", "expert"),
            intents=("analytical", "problem_solving"),
            domains=("business", "academic", "legal"),
        ),
        effectiveness=88,
        marker=_heading(_MULTI_PERSPECTIVE),
        implementation=_appending(_MULTI_PERSPECTIVE),
    ),
    OptimizationTechnique(
        id="expert_domain_injection",
        name="Expert Domain Knowledge Injection",
        category="domain",
        description="Apply deep domain-specific expertise and terminology",
        applicability=Applicability(
            complexity=("complex", "expert"),
            intents=("instructional", "analytical"),
            domains=("technology", "medical", "legal", "finance"),
        ),
        effectiveness=90,
        marker=_EXPERT_OPENER,
        implementation=_inject_expertise,
    ),
    OptimizationTechnique(
        id="quality_assurance",
        name="Quality Assurance Framework",
        category="meta",
        description="Add quality checks and validation steps",
        applicability=Applicability(
            complexity=("moderate", "complex", "expert"),
            intents=("analytical", "instructional"),
            domains=("technology", "academic", "business"),
        ),
        effectiveness=83,
        marker=_heading(_QUALITY_ASSURANCE),
        implementation=_appending(_QUALITY_ASSURANCE),
    ),
)

_BY_ID: dict[str, OptimizationTechnique] = {t.id: t for t in TECHNIQUES}


def get_technique(technique_id: str) -> OptimizationTechnique | None:
    return _BY_ID.get(technique_id)


def apply_techniques(
    prompt: str, technique_ids: list[str], context: TechniqueContext | None = None
) -> tuple[str, list[str]]:
    """Apply techniques in the given order.

    Returns the rewritten prompt and the names of the techniques that
    actually changed it. Unknown ids are logged and skipped; a technique
    whose marker is already present leaves the prompt untouched.
    """
    applied: list[str] = []
    for technique_id in technique_ids:
        technique = _BY_ID.get(technique_id)
        if technique is None:
            logger.warning("Skipping unknown technique id %r", technique_id)
            continue
        rewritten = technique.apply(prompt, context)
        if rewritten != prompt:
            applied.append(technique.name)
            prompt = rewritten
    return prompt, applied
