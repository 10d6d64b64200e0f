"""Per-invocation request context and client lookup.

A :class:`RequestContext` is created for every inbound tool call and passed
explicitly down to the handler.  It carries a small key/value table (the
shared :class:`~n9e_mcp.client.client.N9eClient` lives there), a cancellation
flag and an optional deadline.  Deriving a context never mutates the parent.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any, Callable

from n9e_mcp.client.errors import RequestCanceledError, RequestTimeoutError

if TYPE_CHECKING:
    from n9e_mcp.client.client import N9eClient

CLIENT_CONTEXT_KEY = "n9e_client"


class _CancelState:
    __slots__ = ("canceled",)

    def __init__(self) -> None:
        self.canceled = False


class RequestContext:
    """Immutable request-scoped values plus cancellation and deadline."""

    __slots__ = ("_values", "_deadline", "_cancel")

    def __init__(
        self,
        values: dict[str, Any] | None = None,
        deadline: float | None = None,
        _cancel: _CancelState | None = None,
    ) -> None:
        self._values = dict(values or {})
        self._deadline = deadline
        self._cancel = _cancel or _CancelState()

    @property
    def deadline(self) -> float | None:
        """Absolute ``time.monotonic()`` deadline, or ``None``."""
        return self._deadline

    def with_value(self, key: str, value: Any) -> RequestContext:
        values = dict(self._values)
        values[key] = value
        return RequestContext(values, self._deadline, self._cancel)

    def value(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def with_deadline(self, deadline: float) -> RequestContext:
        if self._deadline is not None and self._deadline < deadline:
            deadline = self._deadline
        return RequestContext(self._values, deadline, self._cancel)

    def with_timeout(self, seconds: float) -> RequestContext:
        return self.with_deadline(time.monotonic() + seconds)

    def cancel(self) -> None:
        """Cancel this context and every context derived from it."""
        self._cancel.canceled = True

    def err(self) -> Exception | None:
        """Return why the context is done, or ``None`` while it is live."""
        if self._cancel.canceled:
            return RequestCanceledError("request canceled: context canceled")
        if self._deadline is not None and time.monotonic() >= self._deadline:
            return RequestTimeoutError("request timeout: context deadline exceeded")
        return None


GetClientFunc = Callable[[RequestContext], "N9eClient | None"]


def context_with_client(ctx: RequestContext, client: N9eClient) -> RequestContext:
    return ctx.with_value(CLIENT_CONTEXT_KEY, client)


def client_from_context(ctx: RequestContext | None) -> N9eClient | None:
    if ctx is None:
        return None
    return ctx.value(CLIENT_CONTEXT_KEY)


def must_client_from_context(ctx: RequestContext) -> N9eClient:
    client = client_from_context(ctx)
    if client is None:
        raise LookupError("n9e client not found in context")
    return client


def default_get_client(ctx: RequestContext) -> N9eClient | None:
    return client_from_context(ctx)
