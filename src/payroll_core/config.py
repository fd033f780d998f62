"""Configuration management for payroll core."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment."""

    currency: str
    tax_rates_path: str | None
    status_poll_interval_seconds: float
    status_poll_timeout_seconds: float
    log_level: str
    host: str
    port: int
    debug: bool

    @property
    def HOST(self) -> str:
        """Alias for host."""
        return self.host

    @property
    def PORT(self) -> int:
        """Alias for port."""
        return self.port

    @property
    def DEBUG(self) -> bool:
        """Alias for debug."""
        return self.debug

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from environment variables."""
        load_dotenv()

        return cls(
            currency=os.getenv("PAYROLL_CURRENCY", "USD"),
            tax_rates_path=os.getenv("TAX_RATES_PATH") or None,
            status_poll_interval_seconds=float(
                os.getenv("STATUS_POLL_INTERVAL_SECONDS", "5")
            ),
            status_poll_timeout_seconds=float(
                os.getenv("STATUS_POLL_TIMEOUT_SECONDS", "300")
            ),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
            debug=os.getenv("DEBUG", "false").lower() == "true",
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings.from_env()
