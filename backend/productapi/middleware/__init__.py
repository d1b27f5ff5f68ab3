# Middleware package init
"""
Product API — Middleware Package
=================================

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [Error Normalizer] → [API Key] → Route

    1. Request ID first: every later log line and response can carry it
    2. Logging: records the final status, including 401s and 500s
    3. Error Normalizer: no exception travels further out than this
    4. API Key last: rejects before any routing happens

Starlette runs middleware in REVERSE order of add_middleware() calls,
so main.py adds them from the innermost (API Key) to the outermost.
"""
