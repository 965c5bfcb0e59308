"""Application configuration."""

import os
from dataclasses import dataclass


@dataclass
class Config:
    """Application configuration loaded from environment variables."""

    # API settings
    host: str = "0.0.0.0"
    port: int = 8081

    # Hyperliquid API
    hyperliquid_api_url: str = "https://api.hyperliquid.xyz"
    page_size: int = 500
    request_timeout: float = 30.0
    max_retries: int = 3

    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8081")),
            hyperliquid_api_url=os.getenv(
                "HYPERLIQUID_API_URL",
                "https://api.hyperliquid.xyz"
            ),
            page_size=int(os.getenv("PAGE_SIZE", "500")),
            request_timeout=float(os.getenv("REQUEST_TIMEOUT", "30.0")),
            max_retries=int(os.getenv("MAX_RETRIES", "3")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
