"""
Product API — Product Service (Handler Logic)
==============================================

What:  Validates input, calls the ProductStore and decides 400/404 outcomes.
Why:   Keeps route handlers thin (HTTP concerns only) and keeps the store
       free of HTTP semantics.
How:   Store results of None/False become NotFoundError; payload or query
       problems become ValidationError. Both propagate to the error
       normalizer registered in main.py.
Who:   Instantiated per request by the `get_product_service` dependency
       around the app's store.

Validation is fail-fast: the first violation raises and nothing else is
checked, so a client fixing one problem may then see the next one.
"""

import logging
import math
from typing import Any, Optional

from productapi.exceptions import NotFoundError, ValidationError
from productapi.schemas.product import (
    Product,
    ProductFields,
    ProductListResponse,
    ProductStats,
)
from productapi.services.product_store import ProductStore

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "description", "price", "category")
TEXT_FIELDS = ("name", "description", "category")


def validate_product_fields(payload: Any) -> ProductFields:
    """
    Checks a create/update body against the fixed product field contract.

    Rules (in order, first failure wins):
        1. Body must be a JSON object
        2. name, description, price, category present and truthy
           (price 0 counts as missing)
        3. name, description, category are strings
        4. price is a number or numeric string, finite and non-negative
        5. inStock is a JSON boolean (the string "true" is rejected)

    Returns:
        ProductFields with price coerced to float

    Raises:
        ValidationError: on the first rule violated
    """
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")

    for field in REQUIRED_FIELDS:
        if not payload.get(field):
            raise ValidationError(f"Missing required field: {field}", field=field)

    for field in TEXT_FIELDS:
        if not isinstance(payload[field], str):
            raise ValidationError(f"Field '{field}' must be a string", field=field)

    price = _parse_price(payload["price"])

    in_stock = payload.get("inStock")
    if not isinstance(in_stock, bool):
        raise ValidationError("Field 'inStock' must be a boolean", field="inStock")

    return ProductFields(
        name=payload["name"],
        description=payload["description"],
        price=price,
        category=payload["category"],
        in_stock=in_stock,
    )


def _parse_price(value: Any) -> float:
    # bool is an int subclass; True must not become a price of 1.0
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValidationError("Field 'price' must be a number", field="price")
    try:
        price = float(value)
    except (ValueError, OverflowError):
        # OverflowError: JSON integers beyond float range
        raise ValidationError("Field 'price' must be a number", field="price")
    if not math.isfinite(price):
        raise ValidationError("Field 'price' must be a number", field="price")
    if price < 0:
        raise ValidationError("Field 'price' must not be negative", field="price")
    return price


def parse_positive_int(value: Optional[str], name: str, default: int) -> int:
    """
    Parses a page/limit query value.

    Missing or empty → default. Only plain ASCII digits are accepted
    ("1_0", "+5" and non-ASCII digits are not), and the result must be
    at least 1; anything else raises ValidationError.
    """
    if value is None or value == "":
        return default
    digits = value.strip()
    if not (digits.isascii() and digits.isdigit()):
        raise ValidationError(f"{name} must be a positive integer", field=name)
    try:
        number = int(digits)
    except ValueError:
        # more digits than int() will convert
        raise ValidationError(f"{name} must be a positive integer", field=name)
    if number < 1:
        raise ValidationError(f"{name} must be a positive integer", field=name)
    return number


class ProductService:
    """
    Business logic layer for product operations.

    Responsibilities:
        - list_products(): filter + paginate with parsed query parameters
        - get_product() / delete_product(): id lookups with 404 handling
        - create_product() / update_product(): field contract + store writes
        - get_stats(): aggregate figures
    """

    def __init__(self, store: ProductStore, default_limit: int = 10, max_limit: int = 100):
        self.store = store
        self.default_limit = default_limit
        self.max_limit = max_limit

    def list_products(
        self,
        category: Optional[str] = None,
        search: Optional[str] = None,
        page: Optional[str] = None,
        limit: Optional[str] = None,
    ) -> ProductListResponse:
        """
        Returns one page of products matching the filters.

        `total` is the filtered count before slicing, so a page past the end
        returns an empty `data` list with the real total.
        """
        page_number = parse_positive_int(page, "page", default=1)
        page_size = parse_positive_int(limit, "limit", default=self.default_limit)
        if page_size > self.max_limit:
            raise ValidationError(
                f"limit must not exceed {self.max_limit}",
                field="limit",
                context={"limit": page_size},
            )

        matching = self.store.list(category=category, search=search)
        page_items = self.store.paginate(matching, page=page_number, limit=page_size)

        logger.debug(
            "Listed products: category=%s search=%s page=%d limit=%d -> %d/%d",
            category, search, page_number, page_size, len(page_items), len(matching),
        )

        return ProductListResponse(
            success=True,
            data=page_items,
            page=page_number,
            limit=page_size,
            total=len(matching),
        )

    def get_product(self, product_id: str) -> Product:
        product = self.store.get_by_id(product_id)
        if product is None:
            raise NotFoundError(resource="Product", resource_id=product_id)
        return product

    def create_product(self, payload: Any) -> Product:
        fields = validate_product_fields(payload)
        return self.store.insert(fields)

    def update_product(self, product_id: str, payload: Any) -> Product:
        """
        Replaces every field of an existing product.

        Existence is checked first: an unknown id is a 404 even when the
        body is also invalid.
        """
        if self.store.get_by_id(product_id) is None:
            raise NotFoundError(resource="Product", resource_id=product_id)

        fields = validate_product_fields(payload)
        product = self.store.replace(product_id, fields)
        if product is None:
            raise NotFoundError(resource="Product", resource_id=product_id)
        return product

    def delete_product(self, product_id: str) -> None:
        if not self.store.remove(product_id):
            raise NotFoundError(resource="Product", resource_id=product_id)

    def get_stats(self) -> ProductStats:
        return self.store.stats()
