"""Request ID middleware.

Forwards a sane client X-Request-ID or mints a new one, exposes it on
scope["state"]["request_id"] and echoes it on the response. Raw ASGI.
"""

import re
import uuid
from typing import Callable

from filestore.middleware._asgi import get_header

REQUEST_ID_MAX_LENGTH = 64
# Alphanumeric, hyphen, underscore only: the id is written into log lines.
_REQUEST_ID_RE = re.compile(r"^[A-Za-z0-9_-]{1,%d}$" % REQUEST_ID_MAX_LENGTH)


def resolve_request_id(raw: str | None) -> str:
    """Return raw (stripped) when it is a safe id, else a fresh UUID4."""
    candidate = (raw or "").strip()
    if _REQUEST_ID_RE.match(candidate):
        return candidate
    return str(uuid.uuid4())


def RequestIDMiddleware(app: Callable, header_name: str = "X-Request-ID") -> Callable:
    """Add or forward the request id header on each request and response."""
    encoded_name = header_name.lower().encode()

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        request_id = resolve_request_id(get_header(scope, header_name))
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_with_id(message: dict) -> None:
            if message["type"] == "http.response.start":
                message["headers"] = [
                    *message.get("headers", []),
                    (encoded_name, request_id.encode()),
                ]
            await send(message)

        await app(scope, receive, send_with_id)

    return asgi_app
