"""
Product API — Pydantic Schemas
===============================

What:  Pydantic models defining the API contract and the stored record shape.
Why:   One definition for what the store holds and what the API returns.
How:   Python attributes are snake_case; wire names are camelCase aliases
       (`inStock`, `totalValue`). FastAPI serializes response models by alias.

Design Decision:
    Request bodies are NOT parsed into these models by FastAPI. The field
    contract (truthy required fields, strict boolean `inStock`) is checked
    by ProductService so that violations become a 400 with our error
    envelope instead of FastAPI's default 422 body.
"""

from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field


class ProductFields(BaseModel):
    """
    What:  Every client-replaceable field of a product (all but `id`).
    Who:   Built by ProductService after validation; consumed by
           ProductStore.insert() and ProductStore.replace().
    """
    name: str = Field(description="Product name")
    description: str = Field(description="Free-text description")
    price: float = Field(ge=0, description="Unit price, non-negative")
    category: str = Field(description="Category, matched exactly when filtering")
    in_stock: bool = Field(alias="inStock", description="Availability flag")

    model_config = ConfigDict(populate_by_name=True)


class Product(ProductFields):
    """
    What:  A stored product record.
    Who:   Returned by GET/POST/PUT /api/products endpoints.

    `id` is assigned by the store on insert and never changes afterwards.
    """
    id: str = Field(description="Opaque unique identifier (UUID4 for created products)")


class ProductListResponse(BaseModel):
    """
    What:  Paginated response wrapper for GET /api/products.

    Pagination strategy:
        Simple offset slicing: page N holds items [(N-1)*limit, N*limit).
        `total` counts the filtered collection BEFORE slicing so clients
        can compute the number of pages.
    """
    success: bool = Field(default=True)
    data: List[Product] = Field(description="Products on the requested page")
    page: int = Field(description="1-based page number")
    limit: int = Field(description="Page size")
    total: int = Field(description="Number of products matching the filters")


class ProductStats(BaseModel):
    """Aggregate figures over the whole collection (GET /api/products/stats)."""
    total: int = Field(default=0)
    categories: Dict[str, int] = Field(default_factory=dict)
    in_stock: int = Field(default=0, alias="inStock")
    total_value: float = Field(default=0, alias="totalValue")

    model_config = ConfigDict(populate_by_name=True)


class ErrorResponse(BaseModel):
    """
    What:  Standardized error body produced by the error normalizer.

    Example:
        {"status": "fail", "message": "Product with ID 42 not found"}

    The API key gate is the one exception: its 401 body is
    {"error": "Unauthorized: Invalid API key"}.
    """
    status: str = Field(description="Outcome tag: 'fail' (4xx) or 'error' (5xx)")
    message: str = Field(description="Human-readable error description")
