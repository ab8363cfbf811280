# app/middleware/request_logger.py
import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("app.requests")


class RequestLoggerMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()

        # Call actual endpoint
        response = await call_next(request)

        # The auth dependency stores the user on the shared request state
        user = getattr(request.state, "user", None)
        user_id = getattr(user, "id", None) if user else None
        elapsed_ms = (time.perf_counter() - started) * 1000

        logger.info(
            "%s %s -> %s in %.1fms (user=%s)",
            request.method, request.url.path, response.status_code, elapsed_ms, user_id or "-",
        )
        return response
