"""Async HTTP client for the Nightingale API – timeouts, retries, envelope decoding."""

from __future__ import annotations

import asyncio
import json
import logging
import random
import socket
from functools import lru_cache
from typing import Any, Awaitable, Callable, NamedTuple, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError
from pydantic_core import to_jsonable_python

from n9e_mcp.client.context import RequestContext
from n9e_mcp.client.errors import (
    APIError,
    DecodeError,
    N9eError,
    RetriesExhaustedError,
    TransportError,
)
from n9e_mcp.schemas.common import N9eResponse

logger = logging.getLogger("n9e.client")

T = TypeVar("T")

DEFAULT_BASE_URL = "http://localhost:17000"
DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_DELAY = 1.0
MAX_RESPONSE_SIZE = 10 * 1024 * 1024
PREVIEW_LIMIT = 200

REQUEST_ID_HEADER = "X-Request-Id"


class RawResponse(NamedTuple):
    body: bytes
    status_code: int
    request_id: str


# ---------------------------------------------------------------------------
# Retry helpers
# ---------------------------------------------------------------------------


def retry_delay(attempt: int) -> float:
    """Exponential backoff for *attempt* (0-indexed) with up to 25% jitter."""
    delay = DEFAULT_RETRY_DELAY * (2**attempt)
    return delay + random.random() * delay / 4


def parse_retry_after(headers: httpx.Headers) -> float:
    """Seconds from an integer ``Retry-After`` header, 0 when absent or unusable."""
    value = headers.get("Retry-After", "").strip()
    if not value:
        return 0.0
    try:
        seconds = int(value)
    except ValueError:
        return 0.0
    return float(seconds) if seconds > 0 else 0.0


def is_retryable_error(exc: BaseException) -> bool:
    """Timeouts and temporary DNS failures are worth another attempt."""
    if isinstance(exc, httpx.TimeoutException):
        return True
    seen: set[int] = set()
    cur: BaseException | None = exc
    while cur is not None and id(cur) not in seen:
        if isinstance(cur, socket.gaierror) and cur.errno == getattr(socket, "EAI_AGAIN", None):
            return True
        if isinstance(cur, TimeoutError):
            return True
        seen.add(id(cur))
        cur = cur.__cause__ or cur.__context__
    return False


@lru_cache(maxsize=None)
def _envelope_adapter(shape: Any) -> TypeAdapter:
    return TypeAdapter(N9eResponse[shape])


def _preview(data: bytes) -> str:
    text = data.decode("utf-8", errors="replace")
    if len(text) > PREVIEW_LIMIT:
        return text[:PREVIEW_LIMIT] + "..."
    return text


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class N9eClient:
    """Nightingale API client.

    One instance is created at startup and shared by every tool invocation.
    The connection pool is the only mutable shared state and ``httpx`` pools
    are safe for concurrent use.

    Args:
        token: Value for the ``X-User-Token`` header.  Required.
        base_url: Nightingale address, defaults to ``http://localhost:17000``.
        user_agent: ``User-Agent`` header value.
        http_client: Pre-built ``httpx.AsyncClient`` (tests, custom transports).
        sleep: Coroutine used for backoff pauses.
    """

    def __init__(
        self,
        token: str,
        base_url: str = "",
        user_agent: str = "",
        *,
        http_client: httpx.AsyncClient | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if not token:
            raise ValueError("token is required")
        if not base_url:
            base_url = DEFAULT_BASE_URL
        try:
            parsed = httpx.URL(base_url)
        except httpx.InvalidURL as exc:
            raise ValueError(f"invalid base URL: {exc}") from exc
        if not parsed.scheme or not parsed.host:
            raise ValueError(f"invalid base URL: {base_url!r}")

        self._base_url = parsed
        self._token = token
        self._user_agent = user_agent
        self._sleep = sleep
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(DEFAULT_TIMEOUT),
            limits=httpx.Limits(
                max_connections=None,
                max_keepalive_connections=10,
                keepalive_expiry=90.0,
            ),
            follow_redirects=True,
        )

    @property
    def base_url(self) -> str:
        return str(self._base_url)

    @property
    def user_agent(self) -> str:
        return self._user_agent

    def set_user_agent(self, user_agent: str) -> None:
        self._user_agent = user_agent

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._http.aclose()

    async def __aenter__(self) -> N9eClient:
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        return f"N9eClient(base_url={self.base_url!r})"

    # ── Single attempt ────────────────────────────────────────────────────

    def _build_request(
        self,
        method: str,
        path: str,
        params: dict[str, str] | None,
        content: bytes | None,
    ) -> httpx.Request:
        url = self._base_url.join(path)
        headers = {
            "X-User-Token": self._token,
            "Accept": "application/json",
        }
        if content is not None:
            headers["Content-Type"] = "application/json"
        if self._user_agent:
            headers["User-Agent"] = self._user_agent
        return self._http.build_request(
            method, url, params=params or None, content=content, headers=headers
        )

    async def _attempt(self, request: httpx.Request) -> tuple[httpx.Response, bytes]:
        """Send *request* and read its capped body."""
        response = await self._http.send(request, stream=True)
        try:
            data = await self._read_body(response)
        finally:
            await response.aclose()
        return response, data

    @staticmethod
    async def _read_body(response: httpx.Response) -> bytes:
        """Read at most MAX_RESPONSE_SIZE bytes, discarding the rest."""
        buf = bytearray()
        async for chunk in response.aiter_bytes():
            remaining = MAX_RESPONSE_SIZE - len(buf)
            if len(chunk) >= remaining:
                buf.extend(chunk[:remaining])
                break
            buf.extend(chunk)
        return bytes(buf)

    # ── Retry loop ────────────────────────────────────────────────────────

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, str] | None = None,
        body: Any = None,
        *,
        ctx: RequestContext | None = None,
    ) -> RawResponse:
        """Execute a request with timeout and retry.

        Returns the raw body, HTTP status and correlation id of the first
        2xx response.  Raises :class:`TransportError` (or a subclass) for
        anything else.
        """
        content: bytes | None = None
        if body is not None:
            try:
                content = json.dumps(to_jsonable_python(body, by_alias=True)).encode()
            except (TypeError, ValueError) as exc:
                raise N9eError(f"failed to marshal request body: {exc}") from exc

        last_error: Exception | None = None

        for attempt in range(DEFAULT_MAX_RETRIES + 1):
            if ctx is not None:
                done = ctx.err()
                if done is not None:
                    raise done from last_error

            has_budget = attempt < DEFAULT_MAX_RETRIES
            request = self._build_request(method, path, params, content)
            try:
                # one deadline covers connect, headers and the whole body
                response, data = await asyncio.wait_for(self._attempt(request), DEFAULT_TIMEOUT)
            except (httpx.HTTPError, asyncio.TimeoutError) as exc:
                if isinstance(exc, asyncio.TimeoutError):
                    exc = TransportError(f"request failed: attempt exceeded {DEFAULT_TIMEOUT:g}s timeout")
                elif not is_retryable_error(exc):
                    raise TransportError(f"request failed: {exc!r}") from exc
                last_error = exc
                if has_budget:
                    delay = retry_delay(attempt)
                    logger.warning(
                        "%s %s transport error (%s), retrying in %.2fs (attempt %d/%d)",
                        method, path, exc.__class__.__name__, delay, attempt + 1, DEFAULT_MAX_RETRIES,
                    )
                    await self._sleep(delay)
                    continue
                break

            status = response.status_code
            request_id = response.headers.get(REQUEST_ID_HEADER, "")

            if 200 <= status < 300:
                return RawResponse(data, status, request_id)

            if status == 429:
                last_error = TransportError("rate limited (429)", status, request_id)
                if has_budget:
                    delay = parse_retry_after(response.headers) or retry_delay(attempt)
                    logger.warning(
                        "%s %s rate limited, retrying in %.2fs (attempt %d/%d)",
                        method, path, delay, attempt + 1, DEFAULT_MAX_RETRIES,
                    )
                    await self._sleep(delay)
                    continue
                break

            if status >= 500:
                last_error = TransportError(
                    f"server error: {status} {_preview(data)}", status, request_id
                )
                if has_budget:
                    delay = retry_delay(attempt)
                    logger.warning(
                        "%s %s server error %d, retrying in %.2fs (attempt %d/%d)",
                        method, path, status, delay, attempt + 1, DEFAULT_MAX_RETRIES,
                    )
                    await self._sleep(delay)
                    continue
                break

            if status >= 400:
                raise TransportError(f"client error: {status} {_preview(data)}", status, request_id)

            raise TransportError(f"unexpected status: {status}", status, request_id)

        status_code = getattr(last_error, "status_code", 0)
        request_id = getattr(last_error, "request_id", "")
        logger.error("%s %s failed after %d attempts: %s", method, path, DEFAULT_MAX_RETRIES + 1, last_error)
        raise RetriesExhaustedError(
            f"max retries exceeded: {last_error}", status_code, request_id
        ) from last_error

    # ── Envelope decoding ─────────────────────────────────────────────────

    async def _call(
        self,
        method: str,
        path: str,
        shape: Any,
        params: dict[str, str] | None,
        body: Any,
        ctx: RequestContext | None,
    ) -> Any:
        raw = await self.request(method, path, params, body, ctx=ctx)
        try:
            envelope = _envelope_adapter(shape).validate_json(raw.body)
        except ValidationError as exc:
            raise DecodeError(
                "failed to unmarshal response (check N9E_BASE_URL and N9E_TOKEN): "
                f"{exc.error_count()} validation error(s), first: {exc.errors()[0]['msg']}, "
                f"response preview: {_preview(raw.body)}"
            ) from exc

        if envelope.err:
            raise APIError(
                method=method,
                path=path,
                err_msg=envelope.err,
                status_code=raw.status_code,
                params=params,
                body=body,
                request_id=raw.request_id,
            )
        return envelope.dat

    async def get(
        self,
        path: str,
        shape: type[T] | Any = Any,
        params: dict[str, str] | None = None,
        *,
        ctx: RequestContext | None = None,
    ) -> T:
        return await self._call("GET", path, shape, params, None, ctx)

    async def post(
        self, path: str, shape: type[T] | Any = Any, body: Any = None, *, ctx: RequestContext | None = None
    ) -> T:
        return await self._call("POST", path, shape, None, body, ctx)

    async def put(
        self, path: str, shape: type[T] | Any = Any, body: Any = None, *, ctx: RequestContext | None = None
    ) -> T:
        return await self._call("PUT", path, shape, None, body, ctx)

    async def delete(
        self, path: str, shape: type[T] | Any = Any, body: Any = None, *, ctx: RequestContext | None = None
    ) -> T:
        return await self._call("DELETE", path, shape, None, body, ctx)
