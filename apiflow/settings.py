"""Runtime settings for apiflow."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from .config.validators import ensure_choice

__version__ = "0.1.0"

LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS: tuple[str, ...] = ("text", "json")
DEFAULT_USER_AGENT = f"apiflow/{__version__}"


@dataclass(frozen=True)
class Settings:
    """Container for runtime settings.

    Values come from ``APIFLOW_*`` environment variables; CLI flags override
    them.
    """

    log_level: str = "INFO"
    log_format: str = "text"
    log_file: Path | None = None
    user_agent: str = DEFAULT_USER_AGENT


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from environment variables.

    Args:
        env: Optional environment mapping; defaults to ``os.environ``.

    Returns:
        Validated Settings.
    """

    source = os.environ if env is None else env
    log_level = ensure_choice("APIFLOW_LOG_LEVEL", source.get("APIFLOW_LOG_LEVEL", "INFO").upper(), LOG_LEVELS)
    log_format = ensure_choice("APIFLOW_LOG_FORMAT", source.get("APIFLOW_LOG_FORMAT", "text").lower(), LOG_FORMATS)
    log_file_raw = source.get("APIFLOW_LOG_FILE")
    user_agent = source.get("APIFLOW_USER_AGENT") or DEFAULT_USER_AGENT

    return Settings(
        log_level=log_level,
        log_format=log_format,
        log_file=Path(log_file_raw) if log_file_raw else None,
        user_agent=user_agent,
    )
