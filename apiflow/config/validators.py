"""Shared config validation helpers."""

from __future__ import annotations

from typing import Any, Mapping, Sequence


def as_mapping(value: Any, context: str) -> dict[str, Any]:
    """Require mapping value."""
    if not isinstance(value, dict):
        raise ValueError(f"{context} must be a mapping.")
    return value


def required(mapping: Mapping[str, Any], key: str, context: str) -> Any:
    """Require mapping key existence."""
    if not isinstance(mapping, Mapping):
        raise ValueError(f"{context} must be a mapping.")
    if key not in mapping:
        raise ValueError(f"Missing required key '{key}' in {context}.")
    return mapping[key]


def non_empty_str(value: Any, key: str, context: str) -> str:
    """Require a non-empty string value."""
    if not isinstance(value, str) or not value:
        raise ValueError(f"{context}.{key} must be a non-empty string, got {value!r}.")
    return value


def opt_str(value: Any, key: str, context: str) -> str | None:
    """Return string or None when absent."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"{context}.{key} must be a string, got {value!r}.")
    return value


def opt_bool(value: Any, key: str, context: str, default: bool = False) -> bool:
    """Return bool or default when absent; reject truthy non-bools."""
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ValueError(f"{context}.{key} must be a boolean, got {value!r}.")
    return value


def opt_str_mapping(value: Any, key: str, context: str) -> dict[str, str]:
    """Return a copy of a str -> str mapping, or empty mapping for None."""
    if value is None:
        return {}
    mapping = as_mapping(value, f"{context}.{key}")
    out: dict[str, str] = {}
    for k, v in mapping.items():
        if not isinstance(k, str) or not isinstance(v, str):
            raise ValueError(f"{context}.{key} must map strings to strings, got {k!r}: {v!r}.")
        out[k] = v
    return out


def ensure_choice(name: str, value: str, allowed: Sequence[str]) -> str:
    """Validate str choice and return normalized value."""
    val = str(value)
    if val not in allowed:
        joined = ", ".join(allowed)
        raise ValueError(f"{name} must be one of: {joined}. Got '{val}'.")
    return val
