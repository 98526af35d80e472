"""Best-effort extraction of template variables from free text.

Lossy by nature: a variable with no matching phrase is simply left out.
"""

from __future__ import annotations

import re

_OBJECTIVE = re.compile(r"(?:to|for|objective|purpose|goal)[\s:]+(.*?)(?:\.|$|,)", re.IGNORECASE)
_REQUIREMENTS = re.compile(r"(?:requirements?|needs?|must|should)[\s:]+(.*?)(?:\.|$)", re.IGNORECASE)


def _generic(name: str) -> re.Pattern[str]:
    return re.compile(rf"(?:{re.escape(name)})[\s:]+(.*?)(?:\.|$|,)", re.IGNORECASE)


def extract_variables(prompt: str, names: tuple[str, ...] | list[str]) -> dict[str, str]:
    extracted: dict[str, str] = {}
    for name in names:
        match name:
            case "objective" | "purpose":
                pattern = _OBJECTIVE
            case "requirements":
                pattern = _REQUIREMENTS
            case _:
                pattern = _generic(name)
        found = pattern.search(prompt)
        if found and found.group(1).strip():
            extracted[name] = found.group(1).strip()
    return extracted
