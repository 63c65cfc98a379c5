"""
Correlation ID Middleware

Tags each request with a correlation ID for log tracing and echoes it back
in the X-Correlation-Id response header.
"""

from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from ...utils.logger import set_correlation_id
from ...utils.idgen import generate_correlation_id

HEADER = "X-Correlation-Id"


class CorrelationIdMiddleware:
    """Pure ASGI middleware so the ContextVar is set in the handler's own context"""

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        correlation_id = Headers(scope=scope).get(HEADER) or generate_correlation_id()
        set_correlation_id(correlation_id)

        async def send_with_header(message: Message) -> None:
            if message["type"] == "http.response.start":
                MutableHeaders(scope=message)[HEADER] = correlation_id
            await send(message)

        await self.app(scope, receive, send_with_header)
