"""Tests for the module entrypoint wrapper."""

from __future__ import annotations

import pytest

import apiflow.app.cli as app_cli
import apiflow.cli as module_cli


pytestmark = pytest.mark.adapter


def test_cli_wrapper_exports_app_entrypoints() -> None:
    assert module_cli.main is app_cli.main
    assert module_cli.build_parser is app_cli.build_parser


def test_parser_requires_a_command() -> None:
    with pytest.raises(SystemExit):
        module_cli.build_parser().parse_args([])
