"""
Product API — Request Logging Middleware
=========================================

What:  One access log line per request, tagged with how the request ended:
       "ok", "rejected" (API key gate), "fail" (classified 4xx) or "error".
Why:   Lets an operator tell key problems apart from bad product payloads
       and from defects without reading handler code paths.
How:   Times call_next, then reads what the gate and the error normalizer
       left on request.state (auth_rejected, error_type) and logs under
       "productapi.access" at a level chosen from the status code.
When:  Inside RequestIDMiddleware (needs the request ID), outside the error
       normalizer and the API key gate (sees their responses too).

What we log vs what we DON'T log (privacy):
    ✅ Log: method, path, status, outcome, error type, duration, request ID
    ❌ Don't log: request bodies, the x-api-key header
"""

import logging
import time
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from productapi.exceptions import outcome_tag
from productapi.middleware.request_id import request_id_var

logger = logging.getLogger("productapi.access")

LEVEL_BY_OUTCOME = {
    "ok": logging.INFO,
    "rejected": logging.WARNING,
    "fail": logging.WARNING,
    "error": logging.ERROR,
}


def request_outcome(request: Request, status_code: int) -> str:
    """Classifies a finished request for the access log."""
    if status_code < 400:
        return "ok"
    if getattr(request.state, "auth_rejected", False):
        return "rejected"
    return outcome_tag(status_code)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs each completed product API request.

    Fields passed in `extra` (for structured handlers):
        request_id, route, status, outcome, error_type, duration_ms
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        started = time.perf_counter()
        route = f"{request.method} {request.url.path}"

        response = await call_next(request)

        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        outcome = request_outcome(request, response.status_code)
        error_type: Optional[str] = getattr(request.state, "error_type", None)
        rid = request_id_var.get("")

        logger.log(
            LEVEL_BY_OUTCOME[outcome],
            "[%s] %s -> %d %s%s (%.1fms)",
            rid,
            route,
            response.status_code,
            outcome,
            f" {error_type}" if error_type else "",
            duration_ms,
            extra={
                "request_id": rid,
                "route": route,
                "status": response.status_code,
                "outcome": outcome,
                "error_type": error_type,
                "duration_ms": duration_ms,
            },
        )
        return response
