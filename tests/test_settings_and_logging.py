"""Tests for runtime settings, logging setup and document loading."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
import yaml

from apiflow.errors import PipelineFileNotFoundError, ValidationError
from apiflow.io import load_pipeline
from apiflow.logging_setup import JsonFormatter, setup_logging
from apiflow.settings import DEFAULT_USER_AGENT, Settings, load_settings


pytestmark = pytest.mark.unit


def test_load_settings_defaults() -> None:
    assert load_settings({}) == Settings()
    assert Settings().user_agent == DEFAULT_USER_AGENT


def test_load_settings_from_env(tmp_path: Path) -> None:
    settings = load_settings(
        {
            "APIFLOW_LOG_LEVEL": "debug",
            "APIFLOW_LOG_FORMAT": "JSON",
            "APIFLOW_LOG_FILE": str(tmp_path / "run.log"),
            "APIFLOW_USER_AGENT": "check/2",
        }
    )
    assert settings.log_level == "DEBUG"
    assert settings.log_format == "json"
    assert settings.log_file == tmp_path / "run.log"
    assert settings.user_agent == "check/2"


def test_load_settings_rejects_bad_values() -> None:
    with pytest.raises(ValueError, match="APIFLOW_LOG_LEVEL must be one of"):
        load_settings({"APIFLOW_LOG_LEVEL": "loud"})
    with pytest.raises(ValueError, match="APIFLOW_LOG_FORMAT must be one of"):
        load_settings({"APIFLOW_LOG_FORMAT": "xml"})


def test_json_formatter_includes_event_and_context() -> None:
    record = logging.LogRecord("apiflow.test", logging.WARNING, __file__, 1, "hello %s", ("there",), None)
    record.event = "step_failed"
    record.context = {"step": "login"}
    payload = json.loads(JsonFormatter().format(record))
    assert payload["message"] == "hello there"
    assert payload["level"] == "WARNING"
    assert payload["logger"] == "apiflow.test"
    assert payload["event"] == "step_failed"
    assert payload["context"] == {"step": "login"}
    assert payload["timestamp"].endswith("Z")


def test_setup_logging_writes_file(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    logfile = tmp_path / "logs" / "apiflow.log"
    try:
        setup_logging(level="INFO", fmt="json", logfile=logfile)
        logging.getLogger("apiflow.test").info("written")
        for handler in root.handlers:
            handler.flush()
        line = logfile.read_text(encoding="utf-8").strip().splitlines()[-1]
        assert json.loads(line)["message"] == "written"
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


def test_load_pipeline_json_and_yaml(tmp_path: Path) -> None:
    doc = {"pipeline": [{"name": "a", "type": "js", "code": "return 1"}]}
    json_path = tmp_path / "p.json"
    json_path.write_text(json.dumps(doc), encoding="utf-8")
    yaml_path = tmp_path / "p.yaml"
    yaml_path.write_text(yaml.safe_dump(doc, sort_keys=False), encoding="utf-8")

    assert load_pipeline(json_path) == doc
    assert load_pipeline(yaml_path) == doc


def test_load_pipeline_errors(tmp_path: Path) -> None:
    with pytest.raises(PipelineFileNotFoundError, match="File not found"):
        load_pipeline(tmp_path / "missing.json")

    bad = tmp_path / "bad.json"
    bad.write_text("{", encoding="utf-8")
    with pytest.raises(ValidationError, match="Failed to parse JSON"):
        load_pipeline(bad)

    empty = tmp_path / "empty.yaml"
    empty.write_text("", encoding="utf-8")
    with pytest.raises(ValidationError, match="empty"):
        load_pipeline(empty)

    listy = tmp_path / "list.yaml"
    listy.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValidationError, match="document must be a mapping"):
        load_pipeline(listy)
