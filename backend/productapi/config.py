"""
Product API — Application Configuration
========================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by main.py; passed explicitly to the pieces that need it
       (API key gate, error normalizer, product service).
When:  Loaded once at module import time; validated when the app starts.
"""

from pydantic_settings import BaseSettings
from pydantic import Field, field_validator

DEFAULT_API_KEY = "your-secret-api-key"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have defaults suitable for local development.
    Production deployments MUST override API_KEY.
    """

    # ── Security ──────────────────────────────────────────────────────────
    # What: Shared secret clients send in the x-api-key header
    # Default is a well-known placeholder; startup logs a warning while it is in use
    api_key: str = Field(
        default=DEFAULT_API_KEY,
        description="Static API key expected in the x-api-key header",
    )

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000, ge=1, le=65535)

    # What: Deployment style; controls how much detail 500 responses carry
    # development: exception type, text and stack are returned to the client
    # production:  generic message only (details stay in server logs)
    environment: str = Field(default="production")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensures environment is one of the supported deployment styles."""
        valid = {"development", "production"}
        lower = v.lower()
        if lower not in valid:
            raise ValueError(f"Invalid environment '{v}'. Must be one of: {valid}")
        return lower

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Listing ───────────────────────────────────────────────────────────
    # What: page size used when the client sends no limit, and the largest
    # limit accepted before the request is rejected with 400
    default_page_size: int = Field(default=10, ge=1, le=1000)
    max_page_size: int = Field(default=100, ge=1, le=1000)

    # ── Data ──────────────────────────────────────────────────────────────
    # What: Start with the three sample products (Laptop, Smartphone, Coffee Maker)
    seed_sample_data: bool = Field(default=True)

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # API_KEY and api_key both work
        "extra": "ignore",
    }

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    def validate_required_for_production(self) -> None:
        """
        What:  Flags settings that are unsafe outside local development.
        When:  Called during app startup (lifespan).
        How:   Collects every problem and raises one ValueError listing them.
        """
        errors = []
        if not self.api_key or self.api_key == DEFAULT_API_KEY:
            errors.append(
                "API_KEY is not set; the public default key is in use. "
                "Set API_KEY to a private value."
            )
        if self.default_page_size > self.max_page_size:
            errors.append(
                f"DEFAULT_PAGE_SIZE ({self.default_page_size}) exceeds "
                f"MAX_PAGE_SIZE ({self.max_page_size})"
            )
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


# Singleton instance used by the module-level app in main.py
settings = Settings()
