"""Tests for the request step executor."""

from __future__ import annotations

import json
import logging

import pytest

from apiflow.config import RequestStep, ScriptStep
from apiflow.errors import RequestExecutionError, TransportError
from apiflow.pipeline.steps import RequestExecutor, is_text_content_type
from apiflow.templating import TemplateEngine

from conftest import FakeTransport, make_response


pytestmark = pytest.mark.unit


@pytest.fixture
def store() -> dict[str, object]:
    return {"login": {"data": {"id": 42, "token": "t0k"}}}


@pytest.fixture
def executor(store: dict[str, object], fake_transport: FakeTransport) -> RequestExecutor:
    return RequestExecutor(TemplateEngine(store), fake_transport)


def test_can_handle_only_request_steps(executor: RequestExecutor) -> None:
    assert executor.can_handle(RequestStep(name="r", method="GET", url="u"))
    assert not executor.can_handle(ScriptStep(name="s", code="pass"))


def test_resolves_url_headers_and_body(executor: RequestExecutor, fake_transport: FakeTransport) -> None:
    step = RequestStep(
        name="profile",
        method="PUT",
        url="http://x/users/{{login.data.id}}",
        headers={"Authorization": "Bearer {{login.data.token}}"},
        body={"id": "{{login.data.id}}", "tags": ["{{login.data.token}}"]},
    )
    executor.execute(step, executor.templating.store)

    (request,) = fake_transport.requests
    assert request.method == "PUT"
    assert request.url == "http://x/users/42"
    assert request.headers["Authorization"] == "Bearer t0k"
    assert request.headers["Content-Type"] == "application/json"
    assert request.body == {"id": "42", "tags": ["t0k"]}
    assert request.verify_tls is True


def test_string_body_is_resolved_as_string(executor: RequestExecutor, fake_transport: FakeTransport) -> None:
    step = RequestStep(name="r", method="POST", url="u", body="<id>{{login.data.id}}</id>", content_type="text/xml")
    executor.execute(step, executor.templating.store)
    assert fake_transport.requests[0].body == "<id>42</id>"
    assert fake_transport.requests[0].headers == {"Content-Type": "text/xml"}


def test_explicit_content_type_overrides_header(executor: RequestExecutor, fake_transport: FakeTransport) -> None:
    step = RequestStep(
        name="r",
        method="POST",
        url="u",
        headers={"content-type": "application/json", "X-A": "1"},
        body={"a": 1},
        content_type="application/vnd.api+json",
    )
    executor.execute(step, executor.templating.store)
    assert fake_transport.requests[0].headers == {"X-A": "1", "Content-Type": "application/vnd.api+json"}
    assert fake_transport.requests[0].body == {"a": 1}


def test_text_content_type_serializes_structured_body(
    executor: RequestExecutor, fake_transport: FakeTransport, caplog: pytest.LogCaptureFixture
) -> None:
    step = RequestStep(name="r", method="POST", url="u", body={"a": [1, 2]}, content_type="text/plain")
    with caplog.at_level(logging.WARNING):
        executor.execute(step, executor.templating.store)
    body = fake_transport.requests[0].body
    assert isinstance(body, str)
    assert json.loads(body) == {"a": [1, 2]}
    assert "serializing to text" in caplog.text


def test_no_inferred_content_type_for_null_or_string_body(executor: RequestExecutor, fake_transport: FakeTransport) -> None:
    executor.execute(RequestStep(name="a", method="GET", url="u"), executor.templating.store)
    executor.execute(RequestStep(name="b", method="POST", url="u", body="raw"), executor.templating.store)
    assert [req.headers for req in fake_transport.requests] == [{}, {}]


def test_existing_content_type_header_is_kept(executor: RequestExecutor, fake_transport: FakeTransport) -> None:
    step = RequestStep(name="r", method="POST", url="u", headers={"Content-Type": "application/x-custom"}, body=[1])
    executor.execute(step, executor.templating.store)
    assert fake_transport.requests[0].headers == {"Content-Type": "application/x-custom"}


def test_allow_self_signed_disables_verification(executor: RequestExecutor, fake_transport: FakeTransport) -> None:
    executor.execute(RequestStep(name="r", method="GET", url="u", allow_self_signed_ssl=True), executor.templating.store)
    assert fake_transport.requests[0].verify_tls is False


def test_stores_result_under_name_and_alias(executor: RequestExecutor, fake_transport: FakeTransport) -> None:
    response = make_response({"token": "new"}, url="http://x/login")
    fake_transport.responses["http://x/login"] = response
    store = executor.templating.store
    result = executor.execute(
        RequestStep(name="doLogin", method="POST", url="http://x/login", on_success_alias="token"), store
    )
    assert result is response
    assert store["doLogin"] is response
    assert store["token"] is store["doLogin"]


def test_unresolved_placeholders_warn_but_proceed(
    executor: RequestExecutor, fake_transport: FakeTransport, caplog: pytest.LogCaptureFixture
) -> None:
    step = RequestStep(name="r", method="POST", url="http://x/{{ghost.id}}", body={"v": "{{ghost.v}}"})
    with caplog.at_level(logging.WARNING):
        executor.execute(step, executor.templating.store)
    assert fake_transport.requests[0].url == "http://x/"
    assert fake_transport.requests[0].body == {"v": ""}
    assert "{{ghost.id}}" in caplog.text and "{{ghost.v}}" in caplog.text


def test_transport_error_becomes_request_execution_error(
    executor: RequestExecutor, fake_transport: FakeTransport
) -> None:
    fake_transport.responses["http://x/down"] = TransportError("Request failed with status code 503", status=503)
    store = executor.templating.store
    with pytest.raises(RequestExecutionError, match="status code 503") as excinfo:
        executor.execute(RequestStep(name="down", method="GET", url="http://x/down"), store)
    assert excinfo.value.step_name == "down"
    assert isinstance(excinfo.value.__cause__, TransportError)
    assert "down" not in store


def test_unexpected_transport_fault_becomes_request_execution_error(
    executor: RequestExecutor, fake_transport: FakeTransport
) -> None:
    fake_transport.responses["http://x/odd"] = TypeError("body must be bytes")
    store = executor.templating.store
    with pytest.raises(RequestExecutionError, match="body must be bytes") as excinfo:
        executor.execute(RequestStep(name="odd", method="POST", url="http://x/odd", body=5), store)
    assert excinfo.value.step_name == "odd"
    assert isinstance(excinfo.value.__cause__, TypeError)
    assert "odd" not in store


def test_scalar_body_is_passed_through(executor: RequestExecutor, fake_transport: FakeTransport) -> None:
    executor.execute(RequestStep(name="n", method="POST", url="http://x/n", body=5), executor.templating.store)
    assert fake_transport.requests[0].body == 5


@pytest.mark.parametrize(
    "content_type, expected",
    [
        ("text/plain", True),
        ("text/html; charset=utf-8", True),
        ("application/xml", True),
        ("application/soap+xml", True),
        ("application/json", False),
        ("multipart/form-data", False),
    ],
)
def test_is_text_content_type(content_type: str, expected: bool) -> None:
    assert is_text_content_type(content_type) is expected
