"""Request id propagation (raw ASGI).

A caller-supplied id is reused when it is short and made of log-safe
characters; otherwise a fresh UUID4 is generated. The id is stored on
``request.state.request_id``, bound to the logging context for the
duration of the request and echoed on the response.
"""

import re
import uuid
from typing import Callable

from app.shared.context import reset_request_id, set_request_id

_SAFE_ID = re.compile(r"[A-Za-z0-9_-]{1,64}")


def get_header(scope: dict, name: str) -> str | None:
    """First value of header name in an ASGI scope (names compare case-insensitively)."""
    wanted = name.lower().encode("latin-1")
    for key, value in scope.get("headers", ()):
        if key.lower() == wanted:
            return value.decode("latin-1")
    return None


def sanitize_request_id(raw: str | None) -> str:
    candidate = (raw or "").strip()
    return candidate if _SAFE_ID.fullmatch(candidate) else str(uuid.uuid4())


def RequestIDMiddleware(app: Callable, header_name: str = "X-Request-ID") -> Callable:
    """Wrap app so every HTTP response carries header_name."""
    encoded_name = header_name.encode("latin-1")

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return

        request_id = sanitize_request_id(get_header(scope, header_name))
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_with_id(message: dict) -> None:
            if message["type"] == "http.response.start":
                message["headers"] = [
                    *message.get("headers", ()),
                    (encoded_name, request_id.encode("latin-1")),
                ]
            await send(message)

        token = set_request_id(request_id)
        try:
            await app(scope, receive, send_with_id)
        finally:
            reset_request_id(token)

    return asgi_app
