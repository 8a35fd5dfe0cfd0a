import logging
import time
import uuid
from contextvars import ContextVar

from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from app.config import settings

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# "-" outside a request (startup, shutdown, background logging)
request_id_var: ContextVar[str] = ContextVar("request_id", default="-")


class RequestContextFilter(logging.Filter):
    """Stamp every log record with the id of the request that produced it."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        return True


class RequestContextMiddleware:
    """
    Pure ASGI middleware giving each request an id and an access log line.

    The id is taken from an incoming ``X-Request-ID`` header when the
    upstream proxy sets one, otherwise generated. It is echoed back on the
    response and exposed to logging through ``request_id_var``, so service
    log lines for one request can be grepped together. Once the response
    starts, one INFO line records method, path, status, duration and the
    caller (the auth header value, or ``anonymous``).
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = Headers(scope=scope)
        request_id = headers.get(REQUEST_ID_HEADER, "").strip() or uuid.uuid4().hex
        caller = headers.get(settings.AUTH_USER_HEADER, "").strip() or "anonymous"
        token = request_id_var.set(request_id)
        start = time.perf_counter()

        async def send_wrapper(message: Message) -> None:
            if message["type"] == "http.response.start":
                response_headers = list(message.get("headers", []))
                response_headers.append((REQUEST_ID_HEADER.lower().encode(), request_id.encode()))
                message["headers"] = response_headers
                logger.info(
                    "%s %s -> %s in %.1fms (caller=%s)",
                    scope["method"],
                    scope["path"],
                    message["status"],
                    (time.perf_counter() - start) * 1000,
                    caller,
                )
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            request_id_var.reset(token)
