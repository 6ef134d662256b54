"""Request context management using contextvars.

Provides async-safe storage for request-scoped values that log lines and
error responses need without threading them through every call.

Usage:
    token = set_request_id("abc123")
    request_id = get_request_id()
    reset_request_id(token)
"""

from contextvars import ContextVar, Token

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)


def set_request_id(request_id: str | None) -> Token[str | None]:
    """Bind the request id for the current task and its children."""
    return _request_id.set(request_id)


def reset_request_id(token: Token[str | None]) -> None:
    _request_id.reset(token)


def get_request_id() -> str | None:
    """Request id of the request being served, or None outside a request."""
    return _request_id.get()
