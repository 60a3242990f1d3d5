"""Request body size limit middleware.

Upload bodies above max_bytes are answered with 413 before the endpoint
parses them. Declared Content-Length is checked up front; bodies without
one are drained and counted first, then replayed to the app. Raw ASGI.
"""

from typing import Callable

from filestore.middleware._asgi import get_header, send_json


async def _reject(send: Callable, max_bytes: int, received: int) -> None:
    await send_json(
        send,
        413,
        {
            "error": "PAYLOAD_TOO_LARGE",
            "message": f"Request body must be at most {max_bytes} bytes",
            "details": {"max_bytes": max_bytes, "content_length": received},
        },
    )


def _replay(messages: list[dict]) -> Callable:
    """receive() that hands back the buffered request messages, then an empty body."""
    pending = list(messages)

    async def receive() -> dict:
        if pending:
            return pending.pop(0)
        return {"type": "http.request", "body": b"", "more_body": False}

    return receive


def RequestSizeLimitMiddleware(app: Callable, max_bytes: int) -> Callable:
    """Reject requests whose body exceeds max_bytes."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return

        declared = get_header(scope, "content-length")
        if declared is not None and declared.strip().isdigit():
            if int(declared) > max_bytes:
                await _reject(send, max_bytes, int(declared))
                return
            await app(scope, receive, send)
            return

        buffered: list[dict] = []
        total = 0
        while True:
            message = await receive()
            if message["type"] != "http.request":
                buffered.append(message)
                break
            total += len(message.get("body", b""))
            if total > max_bytes:
                await _reject(send, max_bytes, total)
                return
            buffered.append(message)
            if not message.get("more_body", False):
                break

        await app(scope, _replay(buffered), send)

    return asgi_app
