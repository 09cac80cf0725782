"""ASGI middleware binding a correlation id to every HTTP request."""

from __future__ import annotations

import time
import uuid

from facts_fulfillment.core.logging import (
    bind_correlation_id,
    bind_request_context,
    get_logger,
    reset_correlation_id,
    reset_request_context,
)
from facts_fulfillment.core.models import RequestContext

logger = get_logger(__name__)


class CorrelationIdMiddleware:  # pylint: disable=too-few-public-methods
    """Reuse or mint a request id, echo it back, and log each request's outcome."""

    header_names = ("X-Request-ID", "X-Correlation-ID")

    def __init__(self, app) -> None:  # type: ignore[no-untyped-def]
        self.app = app

    async def __call__(self, scope, receive, send):  # type: ignore[no-untyped-def]
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        headers = {k.decode().lower(): v.decode() for k, v in scope.get("headers", [])}
        request_ctx = RequestContext(
            correlation_id=self._resolve_correlation_id(headers),
            path=scope.get("path", ""),
            method=scope.get("method", ""),
            user_agent=headers.get("user-agent"),
        )
        scope.setdefault("state", {})["request_context"] = request_ctx
        cid_token = bind_correlation_id(request_ctx.correlation_id)
        ctx_token = bind_request_context(request_ctx)
        cid_bytes = request_ctx.correlation_id.encode()
        echoed = [(name.encode(), cid_bytes) for name in self.header_names]
        status_code = 500
        started = time.perf_counter()

        async def send_wrapper(message):  # type: ignore[no-untyped-def]
            nonlocal status_code
            if message.get("type") == "http.response.start":
                status_code = int(message.get("status") or 500)
                message["headers"] = [*message.get("headers", []), *echoed]
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            logger.info(
                "request completed",
                extra={
                    "event": "http_request",
                    "method": request_ctx.method,
                    "status_code": status_code,
                    "duration_ms": round((time.perf_counter() - started) * 1000.0, 2),
                },
            )
            reset_request_context(ctx_token)
            reset_correlation_id(cid_token)

    def _resolve_correlation_id(self, header_map: dict[str, str]) -> str:
        for header in self.header_names:
            value = header_map.get(header.lower())
            if value:
                return value
        return uuid.uuid4().hex


__all__ = ["CorrelationIdMiddleware"]
