import logging
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from taste_engine.context import request_id_var, subject_id_var

logger = logging.getLogger("taste_engine.request")


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("X-Request-Id") or f"req-{uuid.uuid4().hex[:12]}"
        subject_id = request.headers.get("X-User-Id")

        req_token = request_id_var.set(request_id)
        subject_token = subject_id_var.set(subject_id)
        start = time.perf_counter()

        try:
            response = await call_next(request)
            latency_ms = max((time.perf_counter() - start) * 1000, 0.0)
            response.headers["X-Request-Id"] = request_id
            logger.info(
                "http_request_complete",
                extra={
                    "method": request.method,
                    "path": str(request.url.path),
                    "status_code": response.status_code,
                    "latency_ms": round(latency_ms, 3),
                },
            )
            return response
        finally:
            request_id_var.reset(req_token)
            subject_id_var.reset(subject_token)
