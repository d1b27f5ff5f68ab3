"""
Product API — In-Memory Product Store
======================================

What:  Ordered collection of Product records held in process memory.
Why:   The service has no database; this object is the authoritative data
       for the lifetime of the process.
How:   A plain list keeps insertion order. Lookups are linear scans by id.
Who:   Owned by the FastAPI app (`app.state.store`) and reached by route
       handlers through ProductService.

Absence is reported with return values (None / False), not exceptions:
deciding that a missing product is a 404 is the service layer's job.

Concurrency:
    Every method is synchronous and finishes without yielding to the event
    loop, and route handlers are `async def` (never run in the threadpool),
    so two mutations can never interleave. No lock is needed.
"""

import logging
import uuid
from typing import Iterable, List, Optional

from productapi.schemas.product import Product, ProductFields, ProductStats

logger = logging.getLogger(__name__)


SAMPLE_PRODUCTS = [
    {
        "id": "1",
        "name": "Laptop",
        "description": "High-performance laptop with 16GB RAM",
        "price": 1200,
        "category": "electronics",
        "inStock": True,
    },
    {
        "id": "2",
        "name": "Smartphone",
        "description": "Latest model with 128GB storage",
        "price": 800,
        "category": "electronics",
        "inStock": True,
    },
    {
        "id": "3",
        "name": "Coffee Maker",
        "description": "Programmable coffee maker with timer",
        "price": 50,
        "category": "kitchen",
        "inStock": False,
    },
]


class ProductStore:
    """
    In-memory, insertion-ordered product collection.

    Responsibilities:
        - list():      filter by category / name substring
        - paginate():  offset slicing of an already filtered list
        - get_by_id(), insert(), replace(), remove()
        - stats():     single-pass aggregate over the collection
    """

    def __init__(self, products: Optional[Iterable[Product]] = None):
        self._products: List[Product] = list(products or [])

    @classmethod
    def with_sample_data(cls) -> "ProductStore":
        """Store pre-loaded with the three sample products."""
        return cls(Product.model_validate(item) for item in SAMPLE_PRODUCTS)

    def __len__(self) -> int:
        return len(self._products)

    def list(
        self,
        category: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[Product]:
        """
        Returns products matching every provided filter, in storage order.

        category: exact, case-sensitive match
        search:   case-insensitive substring of the product name
        """
        products = list(self._products)

        if category:
            products = [p for p in products if p.category == category]

        if search:
            needle = search.lower()
            products = [p for p in products if needle in p.name.lower()]

        return products

    @staticmethod
    def paginate(items: List[Product], page: int = 1, limit: int = 10) -> List[Product]:
        """Slice [(page-1)*limit, (page-1)*limit + limit). Out of range gives []."""
        start = (page - 1) * limit
        return items[start:start + limit]

    def get_by_id(self, product_id: str) -> Optional[Product]:
        for product in self._products:
            if product.id == product_id:
                return product
        return None

    def insert(self, fields: ProductFields) -> Product:
        """Assigns a fresh UUID4 id, appends the record and returns it."""
        product = Product(
            id=str(uuid.uuid4()),
            **self._coerce(fields),
        )
        self._products.append(product)
        logger.info("Product created: %s (%s)", product.id, product.name)
        return product

    def replace(self, product_id: str, fields: ProductFields) -> Optional[Product]:
        """
        Overwrites every field except `id`, keeping the record's position.

        Returns the updated product, or None when the id is unknown.
        """
        index = self._index_of(product_id)
        if index is None:
            return None

        product = Product(id=product_id, **self._coerce(fields))
        self._products[index] = product
        logger.info("Product updated: %s", product_id)
        return product

    def remove(self, product_id: str) -> bool:
        """Deletes the product; returns False when the id is unknown."""
        index = self._index_of(product_id)
        if index is None:
            return False

        del self._products[index]
        logger.info("Product deleted: %s", product_id)
        return True

    def stats(self) -> ProductStats:
        """
        Aggregates the whole collection in one pass.

        total_value is the raw sum of prices (no rounding).
        """
        stats = ProductStats()
        for product in self._products:
            stats.total += 1
            stats.categories[product.category] = stats.categories.get(product.category, 0) + 1
            stats.in_stock += 1 if product.in_stock else 0
            stats.total_value += product.price
        return stats

    def _index_of(self, product_id: str) -> Optional[int]:
        for index, product in enumerate(self._products):
            if product.id == product_id:
                return index
        return None

    @staticmethod
    def _coerce(fields: ProductFields) -> dict:
        data = fields.model_dump()
        data["price"] = float(data["price"])
        return data
