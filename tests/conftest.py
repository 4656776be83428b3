"""Shared fakes for apiflow tests."""

from __future__ import annotations

from typing import Any

import pytest

from apiflow.pipeline.engine import PipelineRunner
from apiflow.transport import TransportRequest


def make_response(data: Any = None, status: int = 200, url: str = "") -> dict[str, Any]:
    return {"status": status, "reason": "OK", "headers": {}, "data": data, "url": url}


class FakeTransport:
    """Records requests; answers from a url -> response/exception table."""

    def __init__(self, responses: dict[str, Any] | None = None) -> None:
        self.responses = dict(responses or {})
        self.requests: list[TransportRequest] = []

    def send(self, request: TransportRequest) -> dict[str, Any]:
        self.requests.append(request)
        outcome = self.responses.get(request.url)
        if isinstance(outcome, Exception):
            raise outcome
        if outcome is None:
            return make_response(url=request.url)
        return outcome

    @property
    def urls(self) -> list[str]:
        return [req.url for req in self.requests]


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def runner(fake_transport: FakeTransport) -> PipelineRunner:
    return PipelineRunner(transport=fake_transport)
