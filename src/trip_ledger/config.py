"""Configuration management for Trip Ledger."""

from decimal import Decimal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError

# ISO 4217 currencies whose minor unit is not the cent
_CURRENCY_EXPONENTS: dict[str, int] = {
    "BIF": 0,
    "CLP": 0,
    "DJF": 0,
    "GNF": 0,
    "ISK": 0,
    "JPY": 0,
    "KMF": 0,
    "KRW": 0,
    "PYG": 0,
    "RWF": 0,
    "UGX": 0,
    "VND": 0,
    "VUV": 0,
    "XAF": 0,
    "XOF": 0,
    "XPF": 0,
    "BHD": 3,
    "IQD": 3,
    "JOD": 3,
    "KWD": 3,
    "LYD": 3,
    "OMR": 3,
    "TND": 3,
}


class Settings(BaseSettings):
    """Settlement settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TRIP_LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Minor units
    default_currency_exponent: int = Field(default=2, ge=0, le=6)
    currency_exponents: dict[str, int] = Field(
        default_factory=lambda: dict(_CURRENCY_EXPONENTS)
    )

    # Percentage ratios must sum to 100 within this tolerance
    percentage_tolerance: Decimal = Decimal("0.000001")

    # Balances and debts at or below this many minor units are dropped
    dust_threshold_minor_units: int = Field(default=0, ge=0)

    def exponent_for(self, currency: str) -> int:
        """Number of decimal places of the currency's minor unit."""
        return self.currency_exponents.get(
            currency.upper(), self.default_currency_exponent
        )


def load_settings() -> Settings:
    """Load settlement settings from environment variables."""
    try:
        return Settings()
    except Exception as e:
        raise ConfigurationError(
            f"Failed to load settings. Check the TRIP_LEDGER_* environment "
            f"variables and your .env file.\n"
            f"Error: {e}"
        ) from e
