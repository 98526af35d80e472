"""Target platform registry.

A platform decides the system-mode header, the normal-mode framing style,
and whether a visible thinking block is requested. Unknown ids resolve to
``generic``.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

Style = Literal["conversational", "formal", "technical", "neutral"]


class Platform(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    style: Style = "neutral"
    supports_thinking: bool = False


PLATFORMS: dict[str, Platform] = {
    p.id: p
    for p in (
        Platform(id="gpt-4o", name="GPT-4o", style="conversational"),
        Platform(
            id="claude-3.5-sonnet",
            name="Claude 3.5 Sonnet",
            style="formal",
            supports_thinking=True,
        ),
        Platform(id="gemini-pro", name="Gemini Pro", style="conversational"),
        Platform(id="llama-3.1-405b", name="Llama 3.1 405B", style="technical"),
        Platform(id="mistral-large", name="Mistral Large", style="technical"),
        Platform(id="generic", name="Generic LLM"),
    )
}


def get_platform(platform_id: str | None) -> Platform:
    return PLATFORMS.get(platform_id or "generic", PLATFORMS["generic"])
