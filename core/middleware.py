"""
Request tracing and response hardening
"""
import time
import uuid
import logging
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
QUIET_PATHS = ("/", "/api/health")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id (reusing the caller's if sent) and log its outcome"""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        log = logger.debug if request.url.path in QUIET_PATHS else logger.info

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"{request.method} {request.url.path} [{request_id}] failed after "
                f"{time.perf_counter() - started:.3f}s: {str(e)}"
            )
            raise

        elapsed = time.perf_counter() - started
        log(f"{request.method} {request.url.path} [{request_id}] -> {response.status_code} in {elapsed:.3f}s")

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Process-Time"] = f"{elapsed:.3f}"
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses; auth responses carry tokens and are never cached"""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if request.url.path.startswith("/api/auth"):
            response.headers["Cache-Control"] = "no-store"

        return response
