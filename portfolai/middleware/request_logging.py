"""Request logging middleware.

Logs one line per HTTP request with method, path, response status and
duration. Bodies are never logged; meeting notes are client-confidential.
"""

import time

import structlog
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = structlog.get_logger()

QUIET_PATHS = frozenset({
    "/api/health",
})


class RequestLoggingMiddleware:
    """Pure ASGI middleware that logs every HTTP request once it has been answered."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope["path"] in QUIET_PATHS:
            await self.app(scope, receive, send)
            return

        started = time.perf_counter()
        response_status = 0

        async def capture_send(message: Message) -> None:
            nonlocal response_status
            if message["type"] == "http.response.start":
                response_status = message.get("status", 0)
            await send(message)

        try:
            await self.app(scope, receive, capture_send)
        finally:
            logger.info(
                "http.request",
                method=scope["method"],
                path=scope["path"],
                status=response_status or 500,
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
            )
