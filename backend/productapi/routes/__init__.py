# Routes package init
"""
Product API — Routes Package
=============================

Route Inventory:
    - root.py:      GET    /                         (welcome text)
    - products.py:  GET    /api/products             (list, filter, paginate)
                    GET    /api/products/stats       (aggregate figures)
                    GET    /api/products/{id}        (single product)
                    POST   /api/products             (create)
                    PUT    /api/products/{id}        (replace)
                    DELETE /api/products/{id}        (delete)

Design Principle:
    Routes are THIN: read the request, call ProductService, pick the
    status code. Validation and 404 decisions live in the service.
"""
