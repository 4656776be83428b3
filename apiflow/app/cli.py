"""Application-layer CLI adapter."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from ..errors import PipelineExecutionError, PipelineFileNotFoundError, ValidationError
from ..io import load_pipeline
from ..logging_setup import setup_logging
from ..pipeline.engine import PipelineRunner
from ..pipeline.registry import StepRegistry
from ..selfcheck import run_selfcheck
from ..settings import LOG_FORMATS, LOG_LEVELS, load_settings
from ..transport import RequestsTransport


def build_parser() -> argparse.ArgumentParser:
    """Create CLI parser."""
    parser = argparse.ArgumentParser(
        prog="apiflow", description="apiflow declarative request pipeline runner"
    )
    parser.add_argument("--log-level", choices=LOG_LEVELS, default=None, help="Override APIFLOW_LOG_LEVEL")
    parser.add_argument("--log-format", choices=LOG_FORMATS, default=None, help="Override APIFLOW_LOG_FORMAT")
    sub = parser.add_subparsers(dest="command", required=True)

    run_p = sub.add_parser("run", help="Run a pipeline document (JSON or YAML)")
    run_p.add_argument("pipeline", type=str, help="Path to pipeline document")

    validate_p = sub.add_parser(
        "validate", help="Parse a pipeline and list placeholders that cannot resolve up front"
    )
    validate_p.add_argument("pipeline", type=str, help="Path to pipeline document")

    selfcheck_p = sub.add_parser(
        "selfcheck", help="Run dependency and smoke self-check"
    )
    selfcheck_p.add_argument(
        "--no-smoke",
        action="store_true",
        help="Run import checks only (skip smoke pipeline).",
    )

    return parser


def _dump(value: object) -> str:
    return json.dumps(value, indent=2, default=str)


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings()
    except ValueError as exc:
        parser.exit(2, f"Error: {exc}\n")
    setup_logging(
        level=args.log_level or settings.log_level,
        fmt=args.log_format or settings.log_format,
        logfile=settings.log_file,
    )

    if args.command in ("run", "validate"):
        print(f'using "{args.pipeline}" as pipeline path')
        try:
            document = load_pipeline(args.pipeline)
        except PipelineFileNotFoundError as exc:
            parser.exit(1, f"Error: {exc}\n")
        except ValidationError as exc:
            parser.exit(2, f"Error: {exc}\n")

    if args.command == "run":
        transport = RequestsTransport(user_agent=settings.user_agent)
        runner = PipelineRunner(transport=transport)
        try:
            report = runner.execute(document)
        except ValidationError as exc:
            parser.exit(2, f"Error: {exc}\n")
        except PipelineExecutionError as exc:
            print("Store after run:")
            print(_dump(runner.get_store()))
            parser.exit(1, f"Error: {exc}\n")
        finally:
            transport.close()

        print("Store after run:")
        print(_dump(report.store))
        summary = f"Done. steps={report.steps_run}, status={report.status.value}"
        if report.errors:
            failed = ", ".join(err.step_name for err in report.errors)
            summary += f", failed={failed}"
        print(summary)
        return 0

    if args.command == "validate":
        try:
            # placeholder check only; no executors or HTTP session
            unresolved = PipelineRunner(registry=StepRegistry()).validate_placeholders(document)
        except ValidationError as exc:
            parser.exit(2, f"Error: {exc}\n")
        for placeholder in unresolved:
            print(f"unresolved: {placeholder}")
        print(f"{Path(args.pipeline).name}: {len(unresolved)} unresolved placeholder(s)")
        return 0 if not unresolved else 1

    if args.command == "selfcheck":
        report = run_selfcheck(smoke=not bool(args.no_smoke))
        print(report.to_text())
        return 0 if report.ok else 1

    parser.exit(2, "Unknown command\n")
    return 2
