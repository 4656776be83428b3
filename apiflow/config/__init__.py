"""Typed pipeline models and parsers."""

from .parser import normalize_code, parse_pipeline, parse_step, parse_steps
from .pipeline_models import HTTP_METHODS, Pipeline, RequestStep, ScriptStep, Step, StepKind
from .validators import as_mapping, ensure_choice, non_empty_str, opt_bool, opt_str, opt_str_mapping, required

__all__ = [
    "HTTP_METHODS",
    "Pipeline",
    "RequestStep",
    "ScriptStep",
    "Step",
    "StepKind",
    "as_mapping",
    "ensure_choice",
    "non_empty_str",
    "normalize_code",
    "opt_bool",
    "opt_str",
    "opt_str_mapping",
    "parse_pipeline",
    "parse_step",
    "parse_steps",
    "required",
]
