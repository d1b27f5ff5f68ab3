# Services package init
"""
Product API — Services Layer
=============================

Service Inventory:
    - ProductStore:   in-memory, insertion-ordered product collection
    - ProductService: field validation, pagination parsing, 404 decisions

Why two pieces:
    The store only knows about data and reports absence with None/False.
    The service knows the request contract and raises classified errors.
    Either can be tested without HTTP.
"""
