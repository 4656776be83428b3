"""Pipeline document loading."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from .config.validators import as_mapping
from .errors import PipelineFileNotFoundError, ValidationError


def load_pipeline(path: str | Path) -> dict[str, Any]:
    """Load a pipeline document from a JSON or YAML file."""
    path = Path(path)
    if not path.exists():
        raise PipelineFileNotFoundError(f"File not found: {path}")
    try:
        with path.open("r", encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                payload = json.load(f)
            else:
                payload = yaml.safe_load(f)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Failed to parse JSON pipeline: {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ValidationError(f"Failed to parse YAML pipeline: {path}") from exc

    if payload is None:
        raise ValidationError(f"Pipeline document is empty: {path}")
    try:
        return as_mapping(payload, "document")
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc
