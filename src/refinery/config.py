"""YAML config loader: reads refinery.yml into RefineryConfig."""

from pathlib import Path

import yaml

from refinery.schemas.config import RefineryConfig


def load_config(path: str | Path) -> RefineryConfig:
    """Load and validate a refinery config file.

    Raises ``FileNotFoundError`` if the path doesn't exist and
    ``pydantic.ValidationError`` if the YAML content is invalid.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    raw = yaml.safe_load(path.read_text())
    if raw is None:
        # An empty file means "all defaults".
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config file must be a YAML mapping, got {type(raw).__name__}")

    # Sections with every key commented out load as None.
    for key in ("options", "cache", "provider"):
        if key in raw and raw[key] is None:
            del raw[key]

    return RefineryConfig(**raw)
