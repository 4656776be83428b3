"""Script step executor."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Mapping
from typing import Any

from ...config.parser import normalize_code
from ...config.pipeline_models import ScriptStep, StepKind
from ...errors import ScriptExecutionError
from ...sandbox import ScriptSandbox
from ...templating import TemplateEngine
from ..step_base import ResultStore, StepExecutor

logger = logging.getLogger(__name__)

STORE_BINDING = "store"


async def _await(awaitable: Any) -> Any:
    return await awaitable


class ScriptExecutor(StepExecutor):
    """Evaluate a script step in the sandbox with the live store bound."""

    kind = StepKind.SCRIPT

    def __init__(self, templating: TemplateEngine, sandbox: ScriptSandbox) -> None:
        super().__init__(templating)
        self.sandbox = sandbox

    def run(self, step: ScriptStep, store: ResultStore) -> Any:
        logger.info(f"Executing script step: {step.name}")
        try:
            code = normalize_code(step.code, f"step '{step.name}'")
            result = self.sandbox.evaluate(code, {STORE_BINDING: store})
            if inspect.isawaitable(result):
                result = asyncio.run(_await(result))
        except Exception as exc:
            raise ScriptExecutionError(step.name, str(exc) or type(exc).__name__) from exc

        logger.debug(f"Script step {step.name} completed with result type: {type(result).__name__}")
        if isinstance(result, Mapping) and result:
            logger.debug(f"Available keys: {', '.join(map(str, result))}")
        return result
