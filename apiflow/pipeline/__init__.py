"""Pipeline primitives for step-based execution."""

from .context import ExecutionError, RunnerState, RunReport, RunStatus
from .engine import PipelineRunner, StepHook
from .registry import StepRegistry, create_step_registry
from .step_base import ResultStore, StepExecutor, store_result
from .steps import RequestExecutor, ScriptExecutor, build_default_executors

__all__ = [
    "ExecutionError",
    "PipelineRunner",
    "RequestExecutor",
    "ResultStore",
    "RunReport",
    "RunStatus",
    "RunnerState",
    "ScriptExecutor",
    "StepExecutor",
    "StepHook",
    "StepRegistry",
    "build_default_executors",
    "create_step_registry",
    "store_result",
]
