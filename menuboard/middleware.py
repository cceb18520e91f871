from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
import logging
import time
import uuid

from menuboard.util.logs import request_id_ctx

logger = logging.getLogger("menuboard.http")

class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        req_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        token = request_id_ctx.set(req_id)
        request.state.request_id = req_id
        try:
            response = await call_next(request)
        finally:
            request_id_ctx.reset(token)
        response.headers["X-Request-ID"] = req_id
        return response

class LoggingMiddleware(BaseHTTPMiddleware):
    """One log line per request: method, route, status, latency."""

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        extra = {
            "method": request.method,
            "route": request.url.path,
            "status": response.status_code,
            "latency_ms": int((time.perf_counter() - start) * 1000),
        }
        if response.status_code >= 500:
            logger.error("request failed", extra=extra)
        else:
            logger.info("request", extra=extra)
        return response
