"""
Product API — Application Package Initializer
==============================================

What: Marks the `productapi` directory as a Python package.
Why:  Enables module imports like `from productapi.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by pytest and uvicorn.

Architecture Note:
    The service follows a small layered architecture:

    ┌─────────────────────────────────────┐
    │  Middleware (request ID, logging,   │  ← cross-cutting concerns
    │  error normalizer, API key gate)    │
    ├─────────────────────────────────────┤
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │      ProductService (validation)    │  ← field contract, 404/400 decisions
    ├─────────────────────────────────────┤
    │     ProductStore (in-memory data)   │  ← ordered list of products
    └─────────────────────────────────────┘

    The store lives on `app.state` and is handed to routes through a
    dependency, so every app instance (and every test) owns its own data.
"""

__version__ = "1.0.0"
