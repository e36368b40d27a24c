"""YAML config loader: reads uiqa-config.yml into QualityConfig."""

from pathlib import Path

import yaml

from uiqa.schemas.config import QualityConfig


def load_config(path: str | Path) -> QualityConfig:
    """Load and validate a config file.

    Raises ``FileNotFoundError`` if the path doesn't exist and
    ``pydantic.ValidationError`` if the YAML content is invalid.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    raw = yaml.safe_load(path.read_text())
    # An empty file (or one with only comments) means "all defaults".
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config file must be a YAML mapping, got {type(raw).__name__}")

    # YAML loads a section whose entries are all commented out as None.
    for key in ("providers", "preferences"):
        if key in raw and raw[key] is None:
            del raw[key]

    return QualityConfig(**raw)
