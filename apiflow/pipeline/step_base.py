"""Step executor interface used by the pipeline engine/registry."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, MutableMapping

from ..config.pipeline_models import Step, StepKind
from ..templating import TemplateEngine

ResultStore = MutableMapping[str, Any]


class StepExecutor(ABC):
    """Performs one step kind's effect and records its result in the store."""

    kind: StepKind

    def __init__(self, templating: TemplateEngine) -> None:
        self.templating = templating

    def can_handle(self, step: Step) -> bool:
        return step.kind is self.kind

    @abstractmethod
    def run(self, step: Any, store: ResultStore) -> Any:
        """Perform the effect and return the value to store."""

    def execute(self, step: Step, store: ResultStore) -> Any:
        result = self.run(step, store)
        store_result(store, step, result)
        return result


def store_result(store: ResultStore, step: Step, result: Any) -> None:
    """Write ``result`` under the step name and, if declared, its alias."""
    store[step.name] = result
    if step.on_success_alias:
        store[step.on_success_alias] = result


__all__ = ["ResultStore", "StepExecutor", "store_result"]
