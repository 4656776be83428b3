"""Default step executors."""

from __future__ import annotations

from ...sandbox import ScriptSandbox
from ...templating import TemplateEngine
from ...transport import Transport
from ..step_base import StepExecutor
from .request_step import RequestExecutor, is_text_content_type
from .script_step import ScriptExecutor


def build_default_executors(
    templating: TemplateEngine, transport: Transport, sandbox: ScriptSandbox
) -> list[StepExecutor]:
    """Return the built-in executor for every step kind."""
    return [
        RequestExecutor(templating, transport),
        ScriptExecutor(templating, sandbox),
    ]


__all__ = ["RequestExecutor", "ScriptExecutor", "build_default_executors", "is_text_content_type"]
