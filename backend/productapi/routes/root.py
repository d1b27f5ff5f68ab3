"""
Product API — Root Route
=========================

GET / returns a plain-text welcome message pointing at the product list.
Like every other path it sits behind the API key gate.
"""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["Root"])

WELCOME_MESSAGE = "Welcome to the Product API! Go to /api/products to see all products."


@router.get("/", response_class=PlainTextResponse, summary="Welcome message")
async def root() -> str:
    return WELCOME_MESSAGE
