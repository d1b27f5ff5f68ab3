"""
Product API — API Key Gate Middleware
======================================

What:  Rejects every request whose x-api-key header does not match the
       configured secret, before any routing happens.
Why:   The whole API (including / and unknown paths) is private.
How:   Exact string comparison against settings.api_key. On mismatch the
       middleware writes the 401 response itself and never calls the app.
Who:   Applied to every request via Starlette middleware.
When:  Innermost middleware, directly in front of the routes.

Response on rejection:
    HTTP 401
    {"error": "Unauthorized: Invalid API key"}

    This body deliberately differs from the {status, message} envelope the
    error normalizer produces: clients of the API rely on this exact shape.
    See DESIGN.md for the decision to keep it.

What we log vs what we DON'T log:
    ✅ Log: client IP, method, path, whether the header was present
    ❌ Don't log: the submitted key (it may be a near-miss of the real one)
"""

import hmac
import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

API_KEY_HEADER = "x-api-key"
UNAUTHORIZED_BODY = {"error": "Unauthorized: Invalid API key"}


class APIKeyMiddleware(BaseHTTPMiddleware):
    """
    Static shared-secret authentication.

    Header lookup is case-insensitive (Starlette headers are), the value
    comparison is exact.
    """

    def __init__(self, app: ASGIApp, api_key: str):
        super().__init__(app)
        self.api_key = api_key

    def authenticate(self, request: Request) -> bool:
        """True when the request carries exactly the configured key."""
        supplied = request.headers.get(API_KEY_HEADER)
        if not supplied:
            return False
        # compare_digest: same result as ==, without timing leaks
        return hmac.compare_digest(supplied.encode("utf-8"), self.api_key.encode("utf-8"))

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if not self.authenticate(request):
            client_ip = (
                getattr(request.client, "host", "unknown")
                if request.client
                else "unknown"
            )
            logger.warning(
                "Rejected request without valid API key: %s %s from %s (header present: %s)",
                request.method,
                request.url.path,
                client_ip,
                API_KEY_HEADER in request.headers,
            )
            # read by the access log
            request.state.auth_rejected = True
            return JSONResponse(status_code=401, content=UNAUTHORIZED_BODY)

        return await call_next(request)
