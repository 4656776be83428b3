"""Outbound HTTP transport.

The request executor talks to a ``Transport``; ``RequestsTransport`` is the
bundled implementation on top of a ``requests.Session``. Responses come back
as plain dicts so placeholders can walk them (``{{login.data.id}}``).
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass, field
from typing import Any, Protocol

import requests
from urllib3.exceptions import InsecureRequestWarning

from .errors import TransportError
from .settings import DEFAULT_USER_AGENT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransportRequest:
    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: Any = None
    verify_tls: bool = True


class Transport(Protocol):
    def send(self, request: TransportRequest) -> dict[str, Any]: ...


def _response_data(response: requests.Response) -> Any:
    if not response.content:
        return None
    content_type = response.headers.get("Content-Type", "")
    if "json" in content_type.lower():
        try:
            return response.json()
        except ValueError:
            logger.debug(f"Response from {response.url} declared JSON but did not parse")
    return response.text


def response_to_dict(response: requests.Response) -> dict[str, Any]:
    """Convert a requests.Response into the stored result shape."""
    return {
        "status": response.status_code,
        "reason": response.reason,
        "headers": dict(response.headers),
        "data": _response_data(response),
        "url": response.url,
    }


class RequestsTransport:
    """Transport backed by a shared requests.Session.

    No retry, backoff or timeout is applied; a hung call blocks the caller.
    """

    def __init__(self, session: requests.Session | None = None, user_agent: str = DEFAULT_USER_AGENT) -> None:
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", user_agent)

    def send(self, request: TransportRequest) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "headers": dict(request.headers),
            "verify": request.verify_tls,
        }
        if isinstance(request.body, str):
            kwargs["data"] = request.body.encode("utf-8")
        elif isinstance(request.body, (bytes, bytearray)):
            kwargs["data"] = bytes(request.body)
        elif request.body is not None:
            kwargs["json"] = request.body

        try:
            with warnings.catch_warnings():
                if not request.verify_tls:
                    warnings.simplefilter("ignore", InsecureRequestWarning)
                response = self.session.request(request.method, request.url, **kwargs)
            response.raise_for_status()
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            raise TransportError(f"Request failed with status code {status}", status=status) from exc
        except requests.RequestException as exc:
            raise TransportError(str(exc)) from exc
        except (TypeError, ValueError) as exc:
            raise TransportError(f"Could not encode request: {exc}") from exc

        return response_to_dict(response)

    def close(self) -> None:
        self.session.close()
