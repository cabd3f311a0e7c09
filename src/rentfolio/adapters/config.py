# src/rentfolio/adapters/config.py
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    # App & logging
    ENV: str = Field(default="dev")
    LOG_LEVEL: str = Field(default="INFO")

    # persistence (saved portfolios)
    DB_URI: str = Field(default="sqlite:///rentfolio.db")
    MAX_SAVED_PORTFOLIOS: int = Field(default=5)

    # -----------------------------
    # Valuation / reporting defaults
    # -----------------------------
    # Percent, e.g. 6.0 means a 6% market cap rate
    DEFAULT_MARKET_CAP_RATE: float = Field(default=6.0)

    # Portfolios are owned in equal stakes by this many investors
    DEFAULT_INVESTOR_COUNT: int = Field(default=4)

    model_config = SettingsConfigDict(
        env_prefix="RENTFOLIO_",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("DEFAULT_MARKET_CAP_RATE", mode="before")
    @classmethod
    def _to_non_negative_percent(cls, v: Any) -> Any:
        if v is None:
            return v
        if isinstance(v, str):
            v = v.strip().replace("%", "")
        try:
            f = float(v)
        except Exception as err:
            raise ValueError("rate must be numeric or percent-like") from err
        if f < 0:
            raise ValueError("rate must be non-negative")
        return f

    @field_validator("MAX_SAVED_PORTFOLIOS", "DEFAULT_INVESTOR_COUNT", mode="before")
    @classmethod
    def _positive_int(cls, v: Any) -> Any:
        n = int(v)
        if n <= 0:
            raise ValueError("must be > 0")
        return n


config = AppConfig()
