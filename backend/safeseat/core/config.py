# backend/safeseat/core/config.py
from decimal import Decimal
import logging
import os
from pathlib import Path
from typing import Dict, Literal

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..constants.pricing_defaults import BOOKING_DISPLAY_FEE_RATES, PAYOUT_FEE_RATE
from .constants import API_TITLE


logger = logging.getLogger(__name__)

# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = Path(__file__).parent.parent.parent / ".env"  # Goes up to backend/.env
    logger.debug(f"[CONFIG] Looking for .env at: {env_path}")
    load_dotenv(env_path)


class Settings(BaseSettings):
    environment: Literal["development", "test", "staging", "production"] = Field(
        default="development",
        description="Deployment environment name",
    )
    api_title: str = Field(default=API_TITLE, description="Title shown in the OpenAPI schema")

    database_url: str = Field(
        default="sqlite:///./safeseat.db",
        description="SQLAlchemy database URL (PostgreSQL in production)",
    )
    database_echo: bool = Field(default=False, description="Echo SQL statements to the log")

    log_level: str = Field(default="INFO", description="Root log level")

    # Independent fee rates: the payout fee is flat while the
    # booking display fee depends on the organization's subscription tier.
    payout_fee_rate: Decimal = Field(
        default=PAYOUT_FEE_RATE,
        description="Flat fee rate deducted from payout requests",
    )
    booking_display_fee_rates: Dict[str, Decimal] = Field(
        default_factory=lambda: dict(BOOKING_DISPLAY_FEE_RATES),
        description="Tier -> informational platform fee rate shown at booking time",
    )

    audit_enabled: bool = Field(default=True, description="Write booking audit entries")
    audit_write_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Bounded retry count for best-effort audit writes",
    )

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("payout_fee_rate")
    @classmethod
    def _validate_payout_fee_rate(cls, value: Decimal) -> Decimal:
        if value < 0 or value >= 1:
            raise ValueError("payout_fee_rate must be in [0, 1)")
        return value

    @field_validator("booking_display_fee_rates")
    @classmethod
    def _validate_display_rates(cls, value: Dict[str, Decimal]) -> Dict[str, Decimal]:
        for tier, rate in value.items():
            if rate < 0 or rate >= 1:
                raise ValueError(f"booking display fee rate for {tier} must be in [0, 1)")
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: object) -> str:
        if value is None:
            return "INFO"
        return str(value).strip().upper() or "INFO"


settings = Settings()
