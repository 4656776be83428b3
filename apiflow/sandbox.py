"""Script evaluation capability.

``PythonSandbox`` evaluates source text as the body of a function whose
parameters are the binding names, so a script step reads and writes
``store`` and hands its result back with ``return``::

    token = store["login"]["data"]["token"]
    return {"auth": "Bearer " + token}

The only isolation is a fresh globals namespace per evaluation. Scripts run
with the interpreter's full privileges; treat pipeline documents as trusted
code.
"""

from __future__ import annotations

import ast
import textwrap
from typing import Any, Mapping, Protocol

_ENTRYPOINT = "__apiflow_script__"


class ScriptSandbox(Protocol):
    def evaluate(self, source: str, bindings: Mapping[str, Any]) -> Any: ...


_SCOPES = (ast.FunctionDef, ast.AsyncFunctionDef, ast.Lambda, ast.ClassDef)
_ASYNC_NODES = (ast.Await, ast.AsyncFor, ast.AsyncWith)


def _uses_await(node: ast.AST) -> bool:
    """True if ``node`` awaits outside any nested function or class scope."""
    for child in ast.iter_child_nodes(node):
        if isinstance(child, _ASYNC_NODES):
            return True
        if isinstance(child, _SCOPES):
            continue
        if _uses_await(child):
            return True
    return False


def parse_script(source: str, filename: str = "<apiflow-script>") -> ast.Module:
    """Parse script text; uniformly indented text is dedented first."""
    try:
        return ast.parse(source, filename=filename)
    except IndentationError:
        return ast.parse(textwrap.dedent(source), filename=filename)


def build_function(script: ast.Module, params: list[str], is_async: bool = False) -> ast.Module:
    """Wrap the statements of ``script`` in a function named ``__apiflow_script__``.

    The statements are moved as nodes, so string literals and line numbers
    are kept exactly as written.
    """
    prefix = "async def" if is_async else "def"
    module = ast.parse(f"{prefix} {_ENTRYPOINT}({', '.join(params)}):\n    pass\n")
    module.body[0].body = script.body or [ast.Pass()]
    return ast.fix_missing_locations(module)


class PythonSandbox:
    """Evaluate Python source with a fixed set of injected bindings.

    The returned value may be awaitable when the source uses ``await``; the
    caller decides how to drive it.
    """

    def __init__(self, filename: str = "<apiflow-script>") -> None:
        self.filename = filename

    def compile(self, source: str, params: list[str]) -> Any:
        script = parse_script(source, self.filename)
        tree = build_function(script, params, is_async=_uses_await(script))
        return compile(tree, self.filename, "exec")

    def evaluate(self, source: str, bindings: Mapping[str, Any]) -> Any:
        params = list(bindings)
        code = self.compile(source, params)
        namespace: dict[str, Any] = {"__name__": "__apiflow_script__"}
        exec(code, namespace)
        return namespace[_ENTRYPOINT](**bindings)
