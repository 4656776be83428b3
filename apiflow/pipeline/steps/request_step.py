"""Request step executor."""

from __future__ import annotations

import json
import logging
from typing import Any

from ...config.pipeline_models import RequestStep, StepKind
from ...errors import RequestExecutionError
from ...templating import TemplateEngine
from ...transport import Transport, TransportRequest
from ..step_base import ResultStore, StepExecutor

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"


def is_text_content_type(content_type: str) -> bool:
    """True for text/*, XML and plain-text media types."""
    lowered = content_type.lower()
    return lowered.startswith("text/") or "xml" in lowered or "plain" in lowered


def _drop_content_type(headers: dict[str, str]) -> dict[str, str]:
    return {key: value for key, value in headers.items() if key.lower() != "content-type"}


def _has_content_type(headers: dict[str, str]) -> bool:
    return any(key.lower() == "content-type" for key in headers)


class RequestExecutor(StepExecutor):
    """Resolve a request step's fields and send it through the transport."""

    kind = StepKind.REQUEST

    def __init__(self, templating: TemplateEngine, transport: Transport) -> None:
        super().__init__(templating)
        self.transport = transport

    def resolve_body(self, body: Any) -> Any:
        if isinstance(body, str):
            return self.templating.resolve_string(body)
        return self.templating.resolve_value(body)

    def unresolved_placeholders(self, step: RequestStep) -> list[str]:
        return [
            *self.templating.validate_string(step.url),
            *self.templating.validate_value(step.body),
        ]

    def build_request(self, step: RequestStep) -> TransportRequest:
        """Resolve placeholders and apply content-type rules."""
        url = self.templating.resolve_string(step.url)
        body = self.resolve_body(step.body)
        headers = {key: self.templating.resolve_string(value) for key, value in step.headers.items()}
        structured = isinstance(body, (dict, list))

        if step.content_type:
            headers = _drop_content_type(headers)
            headers["Content-Type"] = step.content_type
            if structured and is_text_content_type(step.content_type):
                logger.warning(
                    f"Step '{step.name}' sends structured body as {step.content_type}; serializing to text"
                )
                body = json.dumps(body)
        elif structured and not _has_content_type(headers):
            headers["Content-Type"] = JSON_CONTENT_TYPE

        return TransportRequest(
            method=step.method,
            url=url,
            headers=headers,
            body=body,
            verify_tls=not step.allow_self_signed_ssl,
        )

    def run(self, step: RequestStep, store: ResultStore) -> Any:
        unresolved = self.unresolved_placeholders(step)
        if unresolved:
            logger.warning(f"Step '{step.name}' has unresolvable placeholders: {unresolved}")

        request = self.build_request(step)
        logger.info(f"Executing request step: {step.name} -> [{request.method}] {request.url}")
        if not request.verify_tls:
            logger.debug(f"Step '{step.name}': TLS certificate verification disabled")

        try:
            return self.transport.send(request)
        except Exception as exc:
            raise RequestExecutionError(step.name, str(exc) or type(exc).__name__) from exc
