"""Placeholder templating against the shared result store.

A placeholder is ``{{stepName.path.to.field}}``. The first dotted segment is a
store key (a step name or alias); the remaining segments walk into the stored
value through mapping keys and list indices.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping, MutableMapping
from typing import Any

PLACEHOLDER_RE = re.compile(r"{{(.*?)}}")


class _Missing:
    """Sentinel for a lookup that found nothing."""

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


def render_text(value: Any) -> str:
    """Render a resolved value for substitution into a string."""
    if isinstance(value, str):
        return value
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (Mapping, list, tuple)):
        return json.dumps(value, separators=(",", ":"), default=str)
    return str(value)


class TemplateEngine:
    """Resolve and validate placeholders against a live result store."""

    def __init__(self, store: MutableMapping[str, Any]) -> None:
        self.store = store

    def get_nested_value(self, obj: Any, path: str | list[str]) -> Any:
        """Walk ``path`` through ``obj``; return MISSING on the first absent segment."""
        parts = path.split(".") if isinstance(path, str) else list(path)
        if parts == [""]:
            parts = []

        current = obj
        for part in parts:
            if isinstance(current, Mapping):
                if part not in current:
                    return MISSING
                current = current[part]
            elif isinstance(current, (list, tuple)):
                if not (part.isascii() and part.isdigit()) or int(part) >= len(current):
                    return MISSING
                current = current[int(part)]
            else:
                return MISSING
        return current

    def lookup(self, expression: str) -> Any:
        """Resolve a placeholder body like ``login.data.id``."""
        key, *path = expression.strip().split(".")
        if key not in self.store:
            return MISSING
        return self.get_nested_value(self.store[key], path)

    def resolve_string(self, text: Any) -> Any:
        if not isinstance(text, str):
            return text

        def _substitute(match: re.Match[str]) -> str:
            value = self.lookup(match.group(1))
            if value is MISSING:
                return ""
            return render_text(value)

        return PLACEHOLDER_RE.sub(_substitute, text)

    def resolve_value(self, value: Any) -> Any:
        """Recursively resolve string leaves; containers are rebuilt, not mutated."""
        if isinstance(value, str):
            return self.resolve_string(value)
        if isinstance(value, Mapping):
            return {key: self.resolve_value(item) for key, item in value.items()}
        if isinstance(value, list):
            return [self.resolve_value(item) for item in value]
        if isinstance(value, tuple):
            return tuple(self.resolve_value(item) for item in value)
        return value

    def validate_string(self, text: Any) -> list[str]:
        """Return the literal placeholders in ``text`` that do not resolve."""
        if not isinstance(text, str):
            return []
        return [
            match.group(0)
            for match in PLACEHOLDER_RE.finditer(text)
            if self.lookup(match.group(1)) is MISSING
        ]

    def validate_value(self, value: Any) -> list[str]:
        unresolved: list[str] = []
        if isinstance(value, str):
            unresolved.extend(self.validate_string(value))
        elif isinstance(value, Mapping):
            for item in value.values():
                unresolved.extend(self.validate_value(item))
        elif isinstance(value, (list, tuple)):
            for item in value:
                unresolved.extend(self.validate_value(item))
        return unresolved
