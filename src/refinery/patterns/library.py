"""Domain pattern library: fill-in-the-blank prompt templates.

Two registries share the ``DomainPattern`` shape:

- ``PATTERNS``: short single-sentence templates keyed by a pattern domain
  (``technical``, ``programming``, ``marketing``, ...).
- ``FRAMEWORKS``: long structured templates used by the domain optimizer,
  keyed by an analysis domain and restricted to certain task intents.

Placeholders are ``{{name}}``. A render that leaves any ``{{`` behind is
discarded and the caller's prompt is returned unchanged.
"""

from __future__ import annotations

import logging
import re

from refinery.errors import TemplateIncompleteError, UnknownPatternError
from refinery.schemas.techniques import DomainPattern

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\{\{(\w+)\}\}")

# ------------------------------------------------------------------
# Short patterns
# ------------------------------------------------------------------

PATTERNS: tuple[DomainPattern, ...] = (
    DomainPattern(
        id="technical_explainer",
        name="Technical Explainer",
        description="Explain a technical concept clearly to a specific audience",
        template=(
            "Explain {{concept}} to {{audience}} in {{complexity}} terms. Focus on "
            "{{aspectsToHighlight}} and use {{analogyType}} analogies for clarity. "
            "Include {{exampleType}} examples."
        ),
        variables=(
            "concept", "audience", "complexity", "aspectsToHighlight", "analogyType", "exampleType",
        ),
        domain="technical",
        effectiveness=85,
        examples=(
            "Explain Docker containerization to junior developers in intermediate terms. "
            "Focus on practical implementation and use real-world analogies for clarity. "
            "Include code examples.",
            "Explain quantum computing to college students in accessible terms. Focus on "
            "fundamental principles and use everyday analogies for clarity. Include visual examples.",
        ),
    ),
    DomainPattern(
        id="code_generation",
        name="Code Generation",
        description="Generate high-quality code with specific requirements",
        template=(
            "Write a {{language}} function/program to {{taskDescription}}. It should handle "
            "{{edgeCases}}. Optimize for {{optimizationGoals}}. Include {{documentationLevel}} "
            "documentation and {{testingApproach}} tests."
        ),
        variables=(
            "language", "taskDescription", "edgeCases", "optimizationGoals",
            "documentationLevel", "testingApproach",
        ),
        domain="programming",
        effectiveness=90,
        examples=(
            "Write a Python function to parse CSV files with nested JSON fields. It should "
            "handle missing fields and malformed JSON. Optimize for memory efficiency. Include "
            "comprehensive documentation and unit tests.",
            "Write a TypeScript React component to display a paginated data table. It should "
            "handle loading states and error cases. Optimize for accessibility and performance. "
            "Include JSDoc documentation and integration tests.",
        ),
    ),
    DomainPattern(
        id="business_analysis",
        name="Business Analysis",
        description="Analyze business data or scenarios with structured output",
        template=(
            "Analyze the {{businessScenario}} considering {{factorsToConsider}}. Identify key "
            "{{insightType}} insights. Evaluate potential {{riskType}} risks and provide "
            "{{recommendationType}} recommendations based on {{industryStandard}} standards."
        ),
        variables=(
            "businessScenario", "factorsToConsider", "insightType", "riskType",
            "recommendationType", "industryStandard",
        ),
        domain="business",
        effectiveness=82,
        examples=(
            "Analyze the declining user engagement metrics considering seasonal trends and "
            "competitive landscape. Identify key actionable insights. Evaluate potential revenue "
            "risks and provide strategic recommendations based on SaaS industry standards.",
        ),
    ),
    DomainPattern(
        id="marketing_content",
        name="Marketing Content Generator",
        description="Generate effective marketing content for specific audiences",
        template=(
            "Create {{contentType}} marketing content for {{productOrService}} targeting "
            "{{targetAudience}}. Highlight {{valuePropositions}} and address {{painPoints}}. "
            "Use a {{toneName}} tone and include {{callToAction}} CTA. Length: {{contentLength}}."
        ),
        variables=(
            "contentType", "productOrService", "targetAudience", "valuePropositions",
            "painPoints", "toneName", "callToAction", "contentLength",
        ),
        domain="marketing",
        effectiveness=88,
        examples=(
            "Create email newsletter marketing content for a premium fitness app targeting busy "
            "professionals aged 30-45. Highlight time-efficiency and personalization and address "
            "concerns about commitment and results. Use a motivational tone and include "
            "'Start your free trial' CTA. Length: 300-400 words.",
        ),
    ),
    DomainPattern(
        id="creative_writing",
        name="Creative Writing",
        description="Generate creative writing with specific elements and style",
        template=(
            "Write a {{genre}} {{contentType}} about {{subject}}. Include themes of {{themes}} "
            "and set in {{setting}}. The {{characterType}} character should face "
            "{{conflictType}} conflict. Use {{styleName}} style with {{toneDescription}} tone."
        ),
        variables=(
            "genre", "contentType", "subject", "themes", "setting", "characterType",
            "conflictType", "styleName", "toneDescription",
        ),
        domain="creative",
        effectiveness=84,
        examples=(
            "Write a mystery flash fiction about a missing heirloom. Include themes of family "
            "secrets and redemption and set in a Victorian mansion. The elderly detective "
            "character should face intellectual conflict. Use concise style with suspenseful tone.",
        ),
    ),
    DomainPattern(
        id="design_brief",
        name="Design Brief",
        description="Create comprehensive design briefs for various projects",
        template=(
            "Create a design brief for a {{projectType}} project for {{clientType}}. The project "
            "goals are {{projectGoals}}. Target audience is {{targetAudience}} with preferences "
            "for {{audiencePreferences}}. Include {{brandingElements}} branding elements, "
            "{{styleGuidelines}} style guidelines, and {{deliverables}} deliverables."
        ),
        variables=(
            "projectType", "clientType", "projectGoals", "targetAudience",
            "audiencePreferences", "brandingElements", "styleGuidelines", "deliverables",
        ),
        domain="design",
        effectiveness=86,
    ),
    DomainPattern(
        id="lesson_plan",
        name="Lesson Plan Generator",
        description="Create effective lesson plans for educators",
        template=(
            "Create a {{duration}} lesson plan on {{subject}} for {{gradeLevel}} students. "
            "Learning objectives: {{learningObjectives}}. Include {{activityTypes}} activities, "
            "{{resourceTypes}} resources, and {{assessmentMethods}} assessment methods. Address "
            "{{challengesToAddress}} potential challenges."
        ),
        variables=(
            "duration", "subject", "gradeLevel", "learningObjectives", "activityTypes",
            "resourceTypes", "assessmentMethods", "challengesToAddress",
        ),
        domain="education",
        effectiveness=89,
    ),
    DomainPattern(
        id="research_question",
        name="Research Question Formulator",
        description="Formulate precise and effective research questions",
        template=(
            "Formulate {{questionCount}} research questions to investigate the relationship "
            "between {{variableX}} and {{variableY}} in the context of {{researchContext}}. "
            "Questions should be {{questionType}} and consider {{methodologicalApproach}} "
            "methodological approach with {{constraintsToConsider}} constraints."
        ),
        variables=(
            "questionCount", "variableX", "variableY", "researchContext", "questionType",
            "methodologicalApproach", "constraintsToConsider",
        ),
        domain="scientific",
        effectiveness=87,
        examples=(
            "Formulate 3 research questions to investigate the relationship between social "
            "media usage and mental health outcomes in the context of adolescent development. "
            "Questions should be causal and consider longitudinal methodological approach with "
            "ethical data collection and control group constraints.",
        ),
    ),
)

# ------------------------------------------------------------------
# Domain frameworks
# ------------------------------------------------------------------

FRAMEWORKS: tuple[DomainPattern, ...] = (
    DomainPattern(
        id="tech_architecture_design",
        name="System Architecture Design",
        description="For designing software architecture and system components",
        template="""As a senior software architect, design a {{system_type}} system that {{objective}}.

Requirements:
- {{requirements}}
- Consider scalability, maintainability, and performance
- Include technology stack recommendations
- Address security considerations
- Provide deployment strategy

Please structure your response with:
1. High-level architecture overview
2. Component breakdown and responsibilities
3. Technology stack justification
4. Data flow and integration patterns
5. Security and performance considerations
6. Implementation roadmap""",
        variables=("system_type", "objective", "requirements"),
        domain="technology",
        effectiveness=92,
        intents=("problem_solving", "instructional", "analytical"),
    ),
    DomainPattern(
        id="tech_code_review",
        name="Code Review and Optimization",
        description="For code analysis and improvement recommendations",
        template="""As a senior software engineer, review the following {{language}} code for {{purpose}}:

{{code_snippet}}

Please provide a comprehensive code review covering:
1. Code quality and best practices
2. Performance optimizations
3. Security vulnerabilities
4. Maintainability improvements
5. Testing recommendations
6. Refactoring suggestions

For each issue identified, provide:
- Severity level (Critical/High/Medium/Low)
- Specific explanation of the problem
- Detailed solution with code examples
- Best practice explanation""",
        variables=("language", "purpose", "code_snippet"),
        domain="technology",
        effectiveness=90,
        intents=("analytical", "problem_solving"),
    ),
    DomainPattern(
        id="business_strategy_analysis",
        name="Strategic Business Analysis",
        description="For comprehensive business strategy development",
        template="""As a senior management consultant, analyze the {{business_situation}} for {{company_context}}.

Context:
- {{background_information}}
- {{current_challenges}}
- {{objectives}}

Please provide a comprehensive strategic analysis including:

1. SITUATION ANALYSIS
   - Market dynamics and competitive landscape
   - Internal capabilities and resources
   - Key challenges and opportunities

2. STRATEGIC OPTIONS
   - Alternative strategic approaches
   - Risk-benefit analysis for each option
   - Resource requirements and feasibility

3. RECOMMENDATIONS
   - Preferred strategic direction with clear rationale
   - Implementation roadmap with timelines
   - Success metrics and KPIs
   - Risk mitigation strategies

4. FINANCIAL IMPLICATIONS
   - Investment requirements
   - Expected ROI and payback period
   - Budget allocation recommendations""",
        variables=(
            "business_situation", "company_context", "background_information",
            "current_challenges", "objectives",
        ),
        domain="business",
        effectiveness=88,
        intents=("analytical", "problem_solving", "instructional"),
    ),
    DomainPattern(
        id="creative_storytelling",
        name="Advanced Storytelling Framework",
        description="For creating compelling narratives and stories",
        template="""As an award-winning storyteller and creative writer, create a {{story_type}} that {{story_objective}}.

Story Parameters:
- Genre: {{genre}}
- Target audience: {{audience}}
- Tone: {{tone}}
- Length: {{length}}
- Key themes: {{themes}}

Please develop this story using advanced narrative techniques:

1. STORY STRUCTURE
   - Compelling hook and opening
   - Well-paced plot development
   - Clear character arcs
   - Satisfying resolution

2. CHARACTER DEVELOPMENT
   - Multi-dimensional characters with clear motivations
   - Authentic dialogue and voice
   - Character growth throughout the narrative

3. NARRATIVE TECHNIQUES
   - Appropriate point of view
   - Effective use of conflict and tension
   - Sensory details and vivid descriptions
   - Show vs. tell balance

4. THEMATIC DEPTH
   - Meaningful themes woven throughout
   - Symbolic elements and metaphors
   - Emotional resonance with audience""",
        variables=("story_type", "story_objective", "genre", "audience", "tone", "length", "themes"),
        domain="creative",
        effectiveness=85,
        intents=("creative", "instructional"),
    ),
    DomainPattern(
        id="academic_research_analysis",
        name="Scholarly Research Framework",
        description="For academic research and analysis",
        template="""As a distinguished researcher and academic scholar, conduct a comprehensive analysis of {{research_topic}} within the context of {{academic_field}}.

Research Parameters:
- Research question: {{research_question}}
- Scope: {{scope}}
- Methodology preference: {{methodology}}
- Academic level: {{level}}

Please structure your analysis using rigorous academic standards:

1. LITERATURE REVIEW
   - Current state of research in the field
   - Key theories and frameworks
   - Identified gaps and controversies
   - Methodological considerations

2. THEORETICAL FRAMEWORK
   - Relevant theoretical perspectives
   - Conceptual model development
   - Hypothesis formation (if applicable)

3. METHODOLOGY
   - Appropriate research design
   - Data collection strategies
   - Analysis techniques
   - Limitations and ethical considerations

4. IMPLICATIONS
   - Theoretical contributions
   - Practical applications
   - Future research directions
   - Policy implications (if relevant)

Please ensure all recommendations are grounded in peer-reviewed literature and follow academic writing conventions.""",
        variables=(
            "research_topic", "academic_field", "research_question", "scope", "methodology", "level",
        ),
        domain="academic",
        effectiveness=89,
        intents=("analytical", "instructional", "problem_solving"),
    ),
)

_BY_ID: dict[str, DomainPattern] = {p.id: p for p in PATTERNS + FRAMEWORKS}

# Checked in order; first match wins.
_PATTERN_DOMAINS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("programming", re.compile(
        r"(code|function|program|algorithm|software|developer|javascript|python|java"
        r"|typescript|api)", re.IGNORECASE,
    )),
    ("business", re.compile(
        r"(business|marketing|sales|strategy|report|analysis|metrics|revenue|customer|market"
        r"|ROI)", re.IGNORECASE,
    )),
    ("creative", re.compile(
        r"(write|story|article|creative|design|blog|content|novel|poem|script)", re.IGNORECASE,
    )),
    ("education", re.compile(
        r"(teach|learn|student|lesson|education|course|curriculum|academic)", re.IGNORECASE,
    )),
    ("scientific", re.compile(
        r"(research|experiment|study|hypothesis|data|analysis|scientific|evidence)", re.IGNORECASE,
    )),
    ("technical", re.compile(
        r"(technical|technology|system|architecture|infrastructure|framework|platform)",
        re.IGNORECASE,
    )),
)

_DOMAIN_SUGGESTIONS: dict[str, list[str]] = {
    "programming": [
        "Specify the programming language and version",
        "Include expected input/output formats",
        "Mention performance constraints",
        "Ask for code comments or documentation",
    ],
    "business": [
        "Define specific metrics for analysis",
        "Specify the industry or market context",
        "Ask for actionable recommendations",
        "Request data visualization formats",
    ],
    "creative": [
        "Specify tone, style and audience",
        "Provide examples of content you like",
        "Include content length guidelines",
        "Mention specific themes or elements to include",
    ],
    "education": [
        "Specify the educational level",
        "Mention learning objectives",
        "Include time constraints",
        "Request specific teaching approaches",
    ],
}
_DEFAULT_SUGGESTIONS = [
    "Be more specific about your objectives",
    "Provide context for your request",
    "Include constraints or requirements",
    "Specify your audience or target",
]


# ------------------------------------------------------------------
# Lookup
# ------------------------------------------------------------------


def all_patterns() -> list[DomainPattern]:
    return list(PATTERNS + FRAMEWORKS)


def get_pattern(pattern_id: str) -> DomainPattern:
    """Look up a pattern or framework by id; raises ``UnknownPatternError``."""
    try:
        return _BY_ID[pattern_id]
    except KeyError:
        raise UnknownPatternError(pattern_id) from None


def patterns_for_domain(domain: str) -> list[DomainPattern]:
    return [p for p in PATTERNS + FRAMEWORKS if p.domain == domain]


def detect_pattern_domain(prompt: str) -> str:
    for domain, pattern in _PATTERN_DOMAINS:
        if pattern.search(prompt):
            return domain
    return "general"


def suggestions_for_domain(domain: str) -> list[str]:
    return list(_DOMAIN_SUGGESTIONS.get(domain, _DEFAULT_SUGGESTIONS))


# ------------------------------------------------------------------
# Rendering
# ------------------------------------------------------------------


def render(pattern: DomainPattern, variables: dict[str, str]) -> str:
    """Substitute every supplied variable; raise if any ``{{`` survives."""
    result = pattern.template
    for name, value in variables.items():
        result = result.replace("{{" + name + "}}", value)
    if "{{" in result:
        remaining = _PLACEHOLDER.findall(result) or ["{{"]
        raise TemplateIncompleteError(pattern.id, remaining)
    return result


def apply_pattern(prompt: str, pattern_id: str, variables: dict[str, str]) -> str:
    """Render ``pattern_id`` with ``variables``, or return ``prompt`` unchanged.

    Unknown ids and half-filled templates never reach the caller.
    """
    try:
        return render(get_pattern(pattern_id), variables)
    except (UnknownPatternError, TemplateIncompleteError) as exc:
        logger.info("Pattern not applied, keeping original prompt: %s", exc)
        return prompt
