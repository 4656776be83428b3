"""Typed models for pipeline-level configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

HTTP_METHODS: tuple[str, ...] = ("GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS")


class StepKind(str, Enum):
    """Closed set of step kinds."""

    REQUEST = "http"
    SCRIPT = "js"


@dataclass(frozen=True)
class RequestStep:
    """Normalized outbound request step."""

    name: str
    method: str
    url: str
    body: Any = None
    headers: dict[str, str] = field(default_factory=dict)
    content_type: str | None = None
    allow_self_signed_ssl: bool = False
    on_success_alias: str | None = None
    continue_on_error: bool = False

    kind = StepKind.REQUEST


@dataclass(frozen=True)
class ScriptStep:
    """Normalized inline script step."""

    name: str
    code: str
    on_success_alias: str | None = None
    continue_on_error: bool = False

    kind = StepKind.SCRIPT


Step = Union[RequestStep, ScriptStep]


@dataclass(frozen=True)
class Pipeline:
    """Ordered, validated step sequence."""

    steps: tuple[Step, ...]
    metadata: dict[str, Any] = field(default_factory=dict)

    def __iter__(self):
        return iter(self.steps)

    def __len__(self) -> int:
        return len(self.steps)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(step.name for step in self.steps)
