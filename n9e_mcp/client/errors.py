"""Error types raised by the Nightingale API client."""

from __future__ import annotations

import json
from typing import Any

from pydantic_core import to_jsonable_python

BODY_SUMMARY_LIMIT = 200


class N9eError(Exception):
    """Base class for every failure surfaced by the client."""


class TransportError(N9eError):
    """Network failure or non-2xx HTTP status."""

    def __init__(self, message: str, status_code: int = 0, request_id: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.request_id = request_id


class RetriesExhaustedError(TransportError):
    """The retry budget ran out; ``__cause__`` holds the last observed error."""


class RequestCanceledError(TransportError):
    """The invocation was canceled before the next attempt."""


class RequestTimeoutError(TransportError):
    """The invocation deadline passed before the next attempt."""


class DecodeError(N9eError):
    """The response body is not a valid ``{dat, err}`` envelope."""


class APIError(N9eError):
    """Business error reported in the envelope's ``err`` field.

    Carries the full request context for diagnosis.  Only the outbound
    parameters or a size-capped summary of the outbound body are kept,
    never the credential.
    """

    def __init__(
        self,
        method: str,
        path: str,
        err_msg: str,
        status_code: int = 0,
        params: dict[str, str] | None = None,
        body: Any = None,
        request_id: str = "",
    ) -> None:
        self.method = method
        self.path = path
        self.params = params
        self.body = body
        self.status_code = status_code
        self.err_msg = err_msg
        self.request_id = request_id
        super().__init__(self._render())

    def body_summary(self) -> str | None:
        """JSON form of the request body, cut past 200 bytes."""
        if self.body is None:
            return None
        try:
            encoded = json.dumps(to_jsonable_python(self.body), separators=(",", ":")).encode()
        except (TypeError, ValueError):
            encoded = repr(self.body).encode()
        if len(encoded) > BODY_SUMMARY_LIMIT:
            cut = encoded[:BODY_SUMMARY_LIMIT].decode(errors="ignore")
            return f"{cut}...(truncated)"
        return encoded.decode()

    def _render(self) -> str:
        parts = [
            f"n9e api error: {self.method} {self.path}",
            f"status={self.status_code}",
            f"err={json.dumps(self.err_msg, ensure_ascii=False)}",
        ]
        if self.params:
            parts.append(f"params={self.params}")
        summary = self.body_summary()
        if summary is not None:
            parts.append(f"body={summary}")
        if self.request_id:
            parts.append(f"request_id={self.request_id}")
        return " ".join(parts)


def get_api_error(exc: BaseException | None) -> APIError | None:
    """Return the first APIError in *exc*'s cause/context chain, if any."""
    seen: set[int] = set()
    while exc is not None and id(exc) not in seen:
        if isinstance(exc, APIError):
            return exc
        seen.add(id(exc))
        exc = exc.__cause__ or exc.__context__
    return None


def is_api_error(exc: BaseException | None) -> bool:
    return get_api_error(exc) is not None
