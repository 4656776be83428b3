"""Executor registry for pipeline execution."""

from __future__ import annotations

from collections.abc import Iterable

from ..config.pipeline_models import Step, StepKind
from .step_base import StepExecutor


class StepRegistry:
    """Registry that maps each step kind to its executor."""

    def __init__(self, executors: Iterable[StepExecutor] | None = None) -> None:
        self._executors: dict[StepKind, StepExecutor] = {}
        for executor in executors or ():
            self.register(executor)

    def register(self, executor: StepExecutor) -> None:
        if not isinstance(executor, StepExecutor):
            raise TypeError(f"Executor for '{getattr(executor, 'kind', executor)}' must be a StepExecutor.")
        self._executors[StepKind(executor.kind)] = executor

    def resolve(self, step: Step) -> StepExecutor | None:
        executor = self._executors.get(step.kind)
        if executor is None or not executor.can_handle(step):
            return None
        return executor

    def supported_kinds(self) -> tuple[str, ...]:
        return tuple(kind.value for kind in self._executors)


def create_step_registry(executors: Iterable[StepExecutor]) -> StepRegistry:
    """Build a registry from executor instances."""
    return StepRegistry(executors=executors)
