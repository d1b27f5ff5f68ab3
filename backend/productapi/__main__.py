"""
Run the Product API with uvicorn: `python -m productapi` (or `productapi`).

Host, port and log level come from the same Settings as the app.
"""

import uvicorn

from productapi.config import settings


def main() -> None:
    uvicorn.run(
        "productapi.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
