"""
Product API — Product Route Handlers
=====================================

What:  CRUD endpoints under /api/products plus the stats aggregate.
Why:   The HTTP surface of the service.
How:   Extracts query parameters / JSON bodies, delegates to ProductService,
       sets the success status code. Errors propagate to the normalizer.

Route ordering:
    GET /api/products/stats is declared BEFORE GET /api/products/{product_id}.
    Starlette matches routes in declaration order, so reversing them would
    make "stats" be looked up as a product id (and answer 404).

Why `async def` everywhere:
    FastAPI runs plain `def` handlers in a threadpool, which would let two
    requests mutate the store at the same time. `async def` handlers run on
    the event loop one at a time, and nothing is awaited between reading and
    writing the store.
"""

import json
from typing import Any

from fastapi import APIRouter, Depends, Query, Request, Response

from productapi.exceptions import ValidationError
from productapi.schemas.product import (
    ErrorResponse,
    Product,
    ProductListResponse,
    ProductStats,
)
from productapi.services.product_service import ProductService

router = APIRouter(prefix="/api/products", tags=["Products"])


async def get_product_service(request: Request) -> ProductService:
    """
    Dependency: ProductService bound to this app's store.

    The store lives on app.state (set by create_app), so each app instance,
    and therefore each test, works on its own data.
    """
    settings = request.app.state.settings
    return ProductService(
        store=request.app.state.store,
        default_limit=settings.default_page_size,
        max_limit=settings.max_page_size,
    )


def is_json_content_type(content_type: str) -> bool:
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == "application/json" or media_type.endswith("+json")


async def read_json_body(request: Request) -> Any:
    """
    Parses the request body as JSON; malformed JSON is a 400.

    Bodies sent without a JSON Content-Type are not parsed and read as an
    empty object, so they fail the field checks instead of being trusted.
    """
    if not is_json_content_type(request.headers.get("content-type", "")):
        return {}
    body = await request.body()
    if not body:
        return None
    try:
        return json.loads(body)
    except (ValueError, UnicodeDecodeError):
        # ValueError also covers JSONDecodeError and over-long integer literals
        raise ValidationError("Request body must be valid JSON")


@router.get(
    "",
    response_model=ProductListResponse,
    responses={400: {"description": "Invalid page or limit", "model": ErrorResponse}},
    summary="List products with filtering and pagination",
)
async def list_products(
    category: str | None = Query(default=None, description="Exact category match"),
    search: str | None = Query(default=None, description="Case-insensitive name substring"),
    page: str | None = Query(default=None, description="1-based page number (default 1)"),
    limit: str | None = Query(default=None, description="Page size (default 10)"),
    service: ProductService = Depends(get_product_service),
) -> ProductListResponse:
    # page/limit are taken as raw strings so bad values get our 400 envelope
    return service.list_products(category=category, search=search, page=page, limit=limit)


@router.get("/stats", response_model=ProductStats, summary="Collection statistics")
async def get_stats(
    service: ProductService = Depends(get_product_service),
) -> ProductStats:
    return service.get_stats()


@router.get(
    "/{product_id}",
    response_model=Product,
    responses={404: {"description": "Product not found", "model": ErrorResponse}},
    summary="Get a single product by ID",
)
async def get_product(
    product_id: str,
    service: ProductService = Depends(get_product_service),
) -> Product:
    return service.get_product(product_id)


@router.post(
    "",
    status_code=201,
    response_model=Product,
    responses={400: {"description": "Invalid product fields", "model": ErrorResponse}},
    summary="Create a product",
)
async def create_product(
    request: Request,
    service: ProductService = Depends(get_product_service),
) -> Product:
    payload = await read_json_body(request)
    return service.create_product(payload)


@router.put(
    "/{product_id}",
    response_model=Product,
    responses={
        400: {"description": "Invalid product fields", "model": ErrorResponse},
        404: {"description": "Product not found", "model": ErrorResponse},
    },
    summary="Replace all fields of a product",
)
async def update_product(
    product_id: str,
    request: Request,
    service: ProductService = Depends(get_product_service),
) -> Product:
    payload = await read_json_body(request)
    return service.update_product(product_id, payload)


@router.delete(
    "/{product_id}",
    status_code=204,
    response_class=Response,
    responses={404: {"description": "Product not found", "model": ErrorResponse}},
    summary="Delete a product",
)
async def delete_product(
    product_id: str,
    service: ProductService = Depends(get_product_service),
) -> Response:
    service.delete_product(product_id)
    return Response(status_code=204)
