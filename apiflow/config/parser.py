"""Pipeline parsing and normalization."""

from __future__ import annotations

import copy
from typing import Any, Mapping

from ..errors import ValidationError
from .pipeline_models import HTTP_METHODS, Pipeline, RequestStep, ScriptStep, Step, StepKind
from .validators import as_mapping, non_empty_str, opt_bool, opt_str, opt_str_mapping, required

_TYPE_ALIASES = {
    "http": StepKind.REQUEST,
    "js": StepKind.SCRIPT,
    "script": StepKind.SCRIPT,
}


def parse_step_kind(step: Mapping[str, Any], context: str) -> StepKind:
    """Map a raw ``type`` tag to a StepKind; missing means request."""
    raw_type = step.get("type")
    if raw_type is None:
        return StepKind.REQUEST
    kind = _TYPE_ALIASES.get(str(raw_type).lower()) if isinstance(raw_type, str) else None
    if kind is None:
        raise ValueError(f"{context}.type must be one of: http, js. Got {raw_type!r}.")
    return kind


def normalize_code(code: Any, context: str) -> str:
    """Join list-form code with newlines; require str or list of str."""
    if isinstance(code, str):
        return code
    if isinstance(code, (list, tuple)) and all(isinstance(line, str) for line in code):
        return "\n".join(code)
    raise ValueError(f"{context}.code must be a string or a list of strings.")


def parse_success_alias(value: Any, context: str) -> str | None:
    """Extract ``onSuccess.store.alias``."""
    if value is None:
        return None
    on_success = as_mapping(value, f"{context}.onSuccess")
    store_cfg = on_success.get("store")
    if store_cfg is None:
        return None
    store_cfg = as_mapping(store_cfg, f"{context}.onSuccess.store")
    alias = store_cfg.get("alias")
    if alias is None:
        return None
    return non_empty_str(alias, "alias", f"{context}.onSuccess.store")


def parse_step(raw: Any, idx: int) -> Step:
    """Validate one raw step and return its normalized model."""
    step = as_mapping(raw, f"steps[{idx}]")
    name = non_empty_str(step.get("name"), "name", f"steps[{idx}]")
    context = f'steps[{idx}] ("{name}")'

    kind = parse_step_kind(step, context)
    alias = parse_success_alias(step.get("onSuccess"), context)
    continue_on_error = opt_bool(step.get("continueOnError"), "continueOnError", context)

    if kind is StepKind.SCRIPT:
        code = normalize_code(required(step, "code", context), context)
        return ScriptStep(
            name=name,
            code=code,
            on_success_alias=alias,
            continue_on_error=continue_on_error,
        )

    method = non_empty_str(required(step, "method", context), "method", context).upper()
    if method not in HTTP_METHODS:
        joined = ", ".join(HTTP_METHODS)
        raise ValueError(f"{context}.method '{step['method']}' is invalid. Use one of: {joined}.")
    url = non_empty_str(required(step, "url", context), "url", context)

    return RequestStep(
        name=name,
        method=method,
        url=url,
        body=copy.deepcopy(step.get("body")),
        headers=opt_str_mapping(step.get("headers"), "headers", context),
        content_type=opt_str(step.get("contentType"), "contentType", context) or None,
        allow_self_signed_ssl=opt_bool(step.get("allowSelfSignedSSL"), "allowSelfSignedSSL", context),
        on_success_alias=alias,
        continue_on_error=continue_on_error,
    )


def parse_steps(document: Mapping[str, Any]) -> list[Step]:
    """Parse and normalize pipeline steps, rejecting duplicate names."""
    raw_steps = required(document, "pipeline", "document")
    if not isinstance(raw_steps, list):
        raise ValueError("document.pipeline must be a list.")

    steps: list[Step] = []
    seen: dict[str, int] = {}
    for idx, raw in enumerate(raw_steps):
        step = parse_step(raw, idx)
        if step.name in seen:
            raise ValueError(
                f"Name collision: steps[{seen[step.name]}] and steps[{idx}] are both named '{step.name}'."
            )
        seen[step.name] = idx
        steps.append(step)
    return steps


def parse_pipeline(raw: Any) -> Pipeline:
    """Validate a raw pipeline document and return a normalized Pipeline."""
    try:
        document = as_mapping(raw, "document")
        steps = parse_steps(document)
    except (TypeError, ValueError) as exc:
        raise ValidationError(str(exc)) from exc

    metadata = {key: value for key, value in document.items() if key != "pipeline"}
    return Pipeline(steps=tuple(steps), metadata=metadata)
