"""Export an optimization result as plain text, markdown, JSON, or HTML."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Literal

from refinery.output.html import render_html_report
from refinery.output.markdown import render_export_markdown, usage_type
from refinery.schemas.optimization import OptimizationResult

logger = logging.getLogger(__name__)

ExportFormat = Literal["txt", "md", "json", "html"]
EXPORT_FORMATS: tuple[str, ...] = ("txt", "md", "json", "html")


def render_plain(result: OptimizationResult) -> str:
    return result.optimized_prompt


def render_json(result: OptimizationResult) -> str:
    payload = {
        "prompt": result.optimized_prompt,
        "metadata": {
            "platform": result.platform,
            "mode": result.mode,
            "domain": result.domain,
            "generated_at": result.generated_at,
            "usage_type": usage_type(result.mode),
        },
    }
    return json.dumps(payload, indent=2)


def render(result: OptimizationResult, fmt: ExportFormat) -> str:
    match fmt:
        case "txt":
            return render_plain(result)
        case "md":
            return render_export_markdown(result)
        case "json":
            return render_json(result)
        case "html":
            return render_html_report(result)
        case _:
            raise ValueError(f"Unknown export format {fmt!r}; expected one of {EXPORT_FORMATS}")


def export_filename(result: OptimizationResult, fmt: ExportFormat) -> str:
    return f"prompt-{result.domain}-{result.mode}.{fmt}"


def write_export(result: OptimizationResult, fmt: ExportFormat, directory: str | Path) -> Path:
    """Render ``result`` and write it under ``directory``; returns the file path."""
    out_dir = Path(directory)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / export_filename(result, fmt)
    path.write_text(render(result, fmt), encoding="utf-8")
    logger.info("Exported %s to %s", fmt, path)
    return path
