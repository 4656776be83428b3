from __future__ import annotations

import importlib
from dataclasses import dataclass

from .pipeline.engine import PipelineRunner
from .transport import RequestsTransport


@dataclass
class CheckRow:
    name: str
    ok: bool
    detail: str


@dataclass
class SelfCheckReport:
    rows: list[CheckRow]

    @property
    def ok(self) -> bool:
        return all(row.ok for row in self.rows)

    def to_text(self) -> str:
        lines: list[str] = []
        for row in self.rows:
            status = "OK" if row.ok else "FAIL"
            lines.append(f"[{status}] {row.name}: {row.detail}")
        lines.append(f"overall: {'OK' if self.ok else 'FAIL'}")
        return "\n".join(lines)


SMOKE_PIPELINE = {
    "pipeline": [
        {
            "name": "seed",
            "type": "js",
            "code": ["store['seed_value'] = 41", "return {'value': 41}"],
            "onSuccess": {"store": {"alias": "seeded"}},
        },
        {
            "name": "bump",
            "type": "js",
            "code": "return {'value': store['seeded']['value'] + 1}",
        },
    ]
}


def run_selfcheck(*, smoke: bool = True) -> SelfCheckReport:
    rows: list[CheckRow] = []

    for module_name in ("requests", "yaml"):
        try:
            mod = importlib.import_module(module_name)
            version = getattr(mod, "__version__", "unknown")
            rows.append(CheckRow(module_name, True, f"version={version}"))
        except Exception as exc:
            rows.append(CheckRow(module_name, False, str(exc)))

    if smoke and all(row.ok for row in rows):
        transport = RequestsTransport()
        try:
            report = PipelineRunner(transport=transport).execute(SMOKE_PIPELINE)
            value = report.store.get("bump", {}).get("value")
            if value != 42:
                rows.append(CheckRow("smoke", False, f"expected bump.value == 42, got {value!r}"))
            else:
                rows.append(CheckRow("smoke", True, f"steps={report.steps_run}, status={report.status.value}"))
        except Exception as exc:
            rows.append(CheckRow("smoke", False, str(exc)))
        finally:
            transport.close()

    return SelfCheckReport(rows=rows)
