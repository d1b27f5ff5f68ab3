"""
Product API — Request ID Middleware
====================================

What:  Gives every request a short correlation ID and echoes it back in the
       X-Request-ID response header.
Why:   Access log lines, error log lines and the client's view of a failed
       call can be matched up by one value.
How:   Uses the client's X-Request-ID when sent, otherwise the first 8
       characters of a UUID4. Stored in a ContextVar for loggers and in
       request.state for handlers.
When:  Outermost middleware, so even 401 responses from the API key gate
       carry the header.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Coroutine-local: each in-flight request sees its own value
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Assigns (or adopts) a request ID and adds it to the response headers."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())[:8]
        token = request_id_var.set(rid)
        request.state.request_id = rid

        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
