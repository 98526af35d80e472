"""Static HTML report: renders an OptimizationResult to a self-contained page."""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from refinery.compose.platforms import get_platform
from refinery.output.markdown import usage_steps
from refinery.schemas.optimization import OptimizationResult

_TEMPLATE_DIR = Path(__file__).parent / "templates"


def render_html_report(result: OptimizationResult) -> str:
    env = Environment(loader=FileSystemLoader(str(_TEMPLATE_DIR)), autoescape=True)
    template = env.get_template("report.html")

    analysis = result.analysis
    scores = [
        ("Clarity", analysis.quality.clarity),
        ("Specificity", analysis.quality.specificity),
        ("Effectiveness", analysis.quality.effectiveness),
        ("Coherence", analysis.semantic_structure.coherence),
        ("Completeness", analysis.semantic_structure.completeness),
        ("Readability", analysis.readability_score),
    ]
    return template.render(
        platform_name=get_platform(result.platform).name,
        result=result,
        analysis=analysis,
        scores=scores,
        issues=[i.model_dump() for i in analysis.identified_issues],
        usage_steps=usage_steps(result.mode, result.platform),
        token_count=result.token_count,
    )
