"""API middleware for request logging."""

import logging
import time
import uuid
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from storefront_core.observability.logging import LogContext

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request logging and timing."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Response]
    ) -> Response:
        """Log request details and timing."""
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
        request.state.request_id = request_id

        start_time = time.perf_counter()
        with LogContext(request_id=request_id, method=request.method, path=request.url.path):
            logger.info("Request started")

            try:
                response = await call_next(request)
            except Exception as e:
                processing_time = int((time.perf_counter() - start_time) * 1000)
                logger.error(f"Request failed after {processing_time}ms: {e}")
                raise

            processing_time = int((time.perf_counter() - start_time) * 1000)
            response.headers["X-Request-ID"] = request_id
            response.headers["X-Processing-Time-Ms"] = str(processing_time)

            logger.info(f"Request completed: status={response.status_code} time={processing_time}ms")

        return response
