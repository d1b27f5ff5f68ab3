"""
Product API — Custom Exception Hierarchy
=========================================

What:  Classified errors carrying an HTTP status code and an outcome tag.
Why:   Handlers raise these on the first invalid condition they detect; the
       error normalizer (registered in main.py) is the only place that turns
       them into JSON responses.
How:   Each exception stores a client-safe message, a status code and an
       optional context dict that is logged but never returned.

Exception Hierarchy:
    ProductAPIError (base)           → status_code given (default 500)
    ├── ValidationError              → 400 Bad Request
    ├── UnauthorizedError            → 401 Unauthorized
    └── NotFoundError                → 404 Not Found

Outcome tag:
    Derived from the status code, never set by hand:
    - "fail":  any 4xx (the client can fix the request)
    - "error": anything else (the server is at fault)

Note on 401:
    The API key gate answers 401 itself with a fixed body and never raises
    UnauthorizedError. The class exists so that any future code path that
    does raise it still gets a consistent envelope from the normalizer.
"""

from typing import Any, Dict, Optional


class ProductAPIError(Exception):
    """
    Base exception for all classified Product API errors.

    Attributes:
        message:        User-facing error description (safe to return)
        status_code:    HTTP status code used by the normalizer
        context:        Additional debug info (logged, NOT returned to client)
        is_operational: True for every classified error; separates expected
                        domain failures from unexpected defects
    """

    is_operational = True

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        status_code: int = 500,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.context = context or {}
        super().__init__(self.message)

    @property
    def status(self) -> str:
        """Outcome tag: 'fail' for 4xx, 'error' otherwise."""
        return outcome_tag(self.status_code)


def outcome_tag(status_code: int) -> str:
    """Maps an HTTP status code to the outcome tag used in error bodies."""
    return "fail" if 400 <= status_code < 500 else "error"


class ValidationError(ProductAPIError):
    """
    Raised when a request payload or query parameter fails validation.

    When:    Missing required field, wrong type, bad page/limit value.
    HTTP:    400 Bad Request

    Validation is fail-fast: the first violation found is reported and
    nothing else is checked.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, status_code=400, context=ctx)
        self.field = field


class UnauthorizedError(ProductAPIError):
    """Authentication failed. HTTP 401."""

    def __init__(
        self,
        message: str = "Unauthorized",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, status_code=401, context=context)


class NotFoundError(ProductAPIError):
    """
    Raised when a lookup by identifier finds nothing.

    When:    GET/PUT/DELETE /api/products/{id} with an unknown id.
    HTTP:    404 Not Found

    The store signals absence with None/False; the service layer converts
    that into this exception.
    """

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource.lower()} was not found"
        if resource_id is not None:
            message = f"{resource} with ID {resource_id} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, status_code=404, context=ctx)
