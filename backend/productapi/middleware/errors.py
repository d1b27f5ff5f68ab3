"""
Product API — Error Normalizer
===============================

What:  Turns every failure raised while handling a request into a JSON body
       of the form {"status": <outcome tag>, "message": <text>}.
Why:   One place decides the wire format of errors; handlers just raise.
How:   Two layers, because Starlette routes exceptions in two ways:

       1. register_exception_handlers(): FastAPI exception handlers for
          classified errors (ProductAPIError), request validation errors
          and Starlette HTTPExceptions (unknown route, wrong method).
       2. ErrorNormalizerMiddleware: catches anything those handlers did not
          (unexpected defects) and answers 500. Starlette would otherwise
          hand such exceptions to ServerErrorMiddleware, which re-raises
          them to the server after responding.

Security:
    In production, 500 responses carry a generic message only. The full
    traceback goes to the server log. In development the body also carries
    the exception type, text and stack.
"""

import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

from productapi.exceptions import ProductAPIError, outcome_tag
from productapi.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again later."


def error_response(status_code: int, message: str, **extra) -> JSONResponse:
    """Build the {status, message} envelope with the tag derived from the code."""
    content = {"status": outcome_tag(status_code), "message": message}
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


def record_error(request: Request, exc: Exception) -> None:
    """Leaves the error class name on request.state for the access log."""
    request.state.error_type = type(exc).__name__


def unexpected_error_response(exc: Exception, debug: bool) -> JSONResponse:
    """500 for an unclassified defect; details only when debug is on."""
    rid = request_id_var.get("")
    logger.error(
        "[%s] Unexpected error: %s",
        rid,
        str(exc),
        exc_info=(type(exc), exc, exc.__traceback__),
    )
    if not debug:
        return error_response(500, GENERIC_ERROR_MESSAGE)
    return error_response(
        500,
        str(exc) or type(exc).__name__,
        error=type(exc).__name__,
        stack=traceback.format_exception(type(exc), exc, exc.__traceback__),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register handlers for every exception type with a known status code.

    Handler hierarchy:
        ProductAPIError            → its status_code (400 / 401 / 404 / ...)
        RequestValidationError     → 400 Bad Request
        StarletteHTTPException     → its status_code (404 unknown route, 405, ...)
        anything else              → ErrorNormalizerMiddleware (500)
    """

    @app.exception_handler(ProductAPIError)
    async def handle_product_api_error(request: Request, exc: ProductAPIError):
        """Classified error raised by a handler or the service layer."""
        record_error(request, exc)
        rid = request_id_var.get("")
        log_level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
        logger.log(
            log_level,
            "[%s] %s: %s | Context: %s",
            rid,
            type(exc).__name__,
            exc.message,
            exc.context,
        )
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        """Framework-level parameter validation (path/query types)."""
        record_error(request, exc)
        rid = request_id_var.get("")
        errors = exc.errors()
        logger.warning("[%s] Request validation error: %s", rid, errors)
        message = "Invalid request"
        if errors:
            location = ".".join(str(part) for part in errors[0].get("loc", ()))
            message = f"Invalid request: {location} {errors[0].get('msg', '')}".strip()
        return error_response(400, message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        """Routing failures raised by Starlette itself."""
        record_error(request, exc)
        message = exc.detail if isinstance(exc.detail, str) else "HTTP error"
        response = error_response(exc.status_code, message)
        if exc.headers:
            response.headers.update(exc.headers)
        return response


class ErrorNormalizerMiddleware(BaseHTTPMiddleware):
    """
    Safety net of last resort: no exception leaves the application.

    Classified errors never reach this point (the exception handlers above
    already turned them into responses); what arrives here is a defect.
    """

    def __init__(self, app: ASGIApp, debug: bool = False):
        super().__init__(app)
        self.debug = debug

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        try:
            return await call_next(request)
        except ProductAPIError as exc:
            record_error(request, exc)
            # Raised by middleware outside the exception handlers' reach
            return error_response(exc.status_code, exc.message)
        except Exception as exc:
            record_error(request, exc)
            return unexpected_error_response(exc, debug=self.debug)
