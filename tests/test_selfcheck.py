from __future__ import annotations

from apiflow.selfcheck import run_selfcheck


def test_selfcheck_imports_pass() -> None:
    report = run_selfcheck(smoke=False)
    assert report.ok
    assert [row.name for row in report.rows] == ["requests", "yaml"]


def test_selfcheck_smoke_pipeline() -> None:
    report = run_selfcheck(smoke=True)
    assert report.ok
    assert report.rows[-1].name == "smoke"
    assert "overall: OK" in report.to_text()
