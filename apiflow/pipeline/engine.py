"""Pipeline execution engine."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from ..config.parser import parse_pipeline
from ..config.pipeline_models import Pipeline, RequestStep, Step
from ..errors import DispatchError, PipelineExecutionError
from ..sandbox import PythonSandbox, ScriptSandbox
from ..templating import TemplateEngine
from ..transport import RequestsTransport, Transport
from .context import ExecutionError, RunnerState, RunReport, RunStatus
from .registry import StepRegistry, create_step_registry
from .steps import build_default_executors

logger = logging.getLogger(__name__)

StepHook = Callable[[Step, Pipeline, dict[str, Any]], None]


class PipelineRunner:
    """Run pipeline documents step by step against a persistent result store.

    The store and error log live on the instance: results from one
    ``execute`` call stay visible to placeholders in the next one until
    ``clear_session`` is called. The error log is reset per call.
    """

    def __init__(
        self,
        transport: Transport | None = None,
        sandbox: ScriptSandbox | None = None,
        registry: StepRegistry | None = None,
        on_step_start: StepHook | None = None,
        on_step_end: StepHook | None = None,
    ) -> None:
        self.store: dict[str, Any] = {}
        self.execution_errors: list[ExecutionError] = []
        self.templating = TemplateEngine(self.store)
        self.parser = parse_pipeline
        if registry is None:
            registry = create_step_registry(
                build_default_executors(
                    self.templating,
                    transport if transport is not None else RequestsTransport(),
                    sandbox if sandbox is not None else PythonSandbox(),
                )
            )
        self.registry = registry
        self.on_step_start = on_step_start
        self.on_step_end = on_step_end
        self.state = RunnerState.IDLE

    def _call_hook(self, hook: StepHook | None, label: str, step: Step, pipeline: Pipeline) -> None:
        if hook is None:
            return
        try:
            hook(step, pipeline, self.store)
        except Exception:
            logger.exception(f"Error in {label} for step '{step.name}'")

    def execute_step(self, step: Step) -> Any:
        """Dispatch one step to the executor registered for its kind."""
        executor = self.registry.resolve(step)
        if executor is None:
            supported = ", ".join(self.registry.supported_kinds())
            raise DispatchError(
                f"No executor found for step '{step.name}' with type '{step.kind.value}'. "
                f"Registered: {supported or 'none'}."
            )
        return executor.execute(step, self.store)

    def execute(self, raw: Any) -> RunReport:
        """Parse ``raw`` and run its steps in order.

        Raises:
            ValidationError: The document is malformed; no step has run.
            PipelineExecutionError: A step without ``continueOnError`` failed.
        """
        pipeline = self.parser(raw)
        self.execution_errors = []
        self.state = RunnerState.RUNNING
        steps_run = 0

        for step in pipeline:
            self._call_hook(self.on_step_start, "on_step_start", step, pipeline)
            steps_run += 1
            try:
                self.execute_step(step)
            except Exception as exc:
                record = ExecutionError(step_name=step.name, message=str(exc))
                self.execution_errors.append(record)
                logger.error(f"Error in step '{step.name}': {record.message}")

                if not step.continue_on_error:
                    logger.error(f"Pipeline execution stopped at step '{step.name}' due to error.")
                    self._call_hook(self.on_step_end, "on_step_end", step, pipeline)
                    self.state = RunnerState.ABORTED
                    raise PipelineExecutionError(step.name, record.message) from exc

                logger.warning(f"Continuing despite error in step '{step.name}' (continueOnError=true)")
                self.store[step.name] = record.to_marker()

            self._call_hook(self.on_step_end, "on_step_end", step, pipeline)

        self.state = RunnerState.COMPLETED
        if self.execution_errors:
            status = RunStatus.COMPLETED_WITH_ERRORS
            logger.warning(f"Pipeline execution complete with {len(self.execution_errors)} error(s).")
        else:
            status = RunStatus.COMPLETED
            logger.info("Pipeline execution complete.")

        return RunReport(
            status=status,
            store=self.get_store(),
            errors=self.get_execution_errors(),
            steps_run=steps_run,
        )

    def clear_session(self) -> None:
        """Empty the result store and error log in place."""
        self.store.clear()
        self.execution_errors = []
        self.state = RunnerState.IDLE

    def get_store(self) -> dict[str, Any]:
        return dict(self.store)

    def get_execution_errors(self) -> list[ExecutionError]:
        return list(self.execution_errors)

    def has_execution_errors(self) -> bool:
        return bool(self.execution_errors)

    def validate_placeholders(self, raw: Any) -> list[str]:
        """Dry run: list placeholders in request URLs/bodies that would not resolve now."""
        pipeline = self.parser(raw)
        unresolved: list[str] = []
        for step in pipeline:
            if isinstance(step, RequestStep):
                unresolved.extend(self.templating.validate_string(step.url))
                unresolved.extend(self.templating.validate_value(step.body))
        return unresolved
