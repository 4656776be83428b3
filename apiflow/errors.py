"""Shared error types for apiflow orchestration layers."""

from __future__ import annotations


class ApiflowError(Exception):
    """Base class for every error raised by apiflow."""


class ValidationError(ApiflowError, ValueError):
    """Raised when a pipeline definition is malformed."""


class PipelineFileNotFoundError(ValidationError):
    """Raised when a pipeline document path does not exist."""


class DispatchError(ApiflowError):
    """Raised when no executor is registered for a step's kind."""


class TransportError(ApiflowError):
    """Outbound call failed before a usable response was produced."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class StepExecutionError(ApiflowError):
    """A single step failed while performing its effect."""

    def __init__(self, step_name: str, message: str) -> None:
        super().__init__(message)
        self.step_name = step_name
        self.message = message


class RequestExecutionError(StepExecutionError):
    """Outbound request failed (transport fault or non-2xx status)."""


class ScriptExecutionError(StepExecutionError):
    """Evaluated script raised."""

    def __init__(self, step_name: str, message: str) -> None:
        super().__init__(step_name, f"Failed to execute script for step '{step_name}': {message}")
        self.inner_message = message


class PipelineExecutionError(ApiflowError):
    """Raised to the caller of ``execute`` when a step fails fatally."""

    def __init__(self, step_name: str, message: str) -> None:
        super().__init__(f"Pipeline execution failed at step '{step_name}': {message}")
        self.step_name = step_name
        self.message = message
