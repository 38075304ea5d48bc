"""Request logging middleware."""

import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from plexcord import log

__all__ = ["RequestLoggingMiddleware"]

MAX_BODY_LOG_LENGTH = 1000
TEXT_CONTENT_TYPES = ("application/json", "text/")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs one debug line per request: method, URL, status, latency and size.

    Requests with a body get a second line summarizing it. JSON and text bodies are
    logged (truncated); anything else, including Plex's multipart uploads, is only
    described by content type and length.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Time the downstream handler and log the outcome."""
        url = request.url.path
        if request.url.query:
            url += f"?{request.url.query}"

        body_summary = await self._summarize_body(request)

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            elapsed_ms = (time.perf_counter() - start) * 1000
            log.debug(f"{request.method} {url} Failed {elapsed_ms:.1f} ms - {e!r}")
            raise

        elapsed_ms = (time.perf_counter() - start) * 1000
        size = response.headers.get("content-length", "-")
        log.debug(
            f"{request.method} {url} Response: {response.status_code} "
            f"{elapsed_ms:.1f} ms - {size}"
        )
        if body_summary:
            log.debug(f"{request.method} {url} Body: {body_summary}")
        return response

    async def _summarize_body(self, request: Request) -> str | None:
        if request.method not in ("POST", "PUT", "PATCH"):
            return None
        try:
            body = await request.body()
        except Exception as e:
            return f"<error reading body: {e}>"
        if not body:
            return None

        content_type = request.headers.get("content-type", "unknown")
        if not content_type.startswith(TEXT_CONTENT_TYPES):
            return f"<{content_type}, {len(body)} bytes>"

        try:
            text = body.decode("utf-8")
        except UnicodeDecodeError:
            return f"<binary data, {len(body)} bytes>"
        if len(text) > MAX_BODY_LOG_LENGTH:
            return f"{text[:MAX_BODY_LOG_LENGTH]}..."
        return text
