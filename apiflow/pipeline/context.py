"""Run state records shared by the engine and its callers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class RunnerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    ABORTED = "aborted"


class RunStatus(str, Enum):
    COMPLETED = "completed"
    COMPLETED_WITH_ERRORS = "completed_with_errors"


@dataclass(frozen=True)
class ExecutionError:
    """One failed step attempt."""

    step_name: str
    message: str
    timestamp: str = field(default_factory=utc_timestamp)

    def to_marker(self) -> dict[str, Any]:
        """Store entry written for a step that failed under continueOnError."""
        return {
            "error": True,
            "errorMessage": self.message,
            "stepName": self.step_name,
            "timestamp": self.timestamp,
        }


@dataclass
class RunReport:
    """Outcome of one ``PipelineRunner.execute`` call."""

    status: RunStatus
    store: dict[str, Any]
    errors: list[ExecutionError] = field(default_factory=list)
    steps_run: int = 0

    @property
    def ok(self) -> bool:
        return self.status is RunStatus.COMPLETED


__all__ = ["ExecutionError", "RunReport", "RunStatus", "RunnerState", "utc_timestamp"]
