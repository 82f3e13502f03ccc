"""
Application configuration using Pydantic Settings.
"""

import os
from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings

from app.calculations.policy import DEFAULT_POLICY, EnginePolicy


def get_env_file() -> str:
    """Determine which env file to use based on environment."""
    env = os.getenv("APP_ENV", "development")
    if env == "production":
        return ".env.production"
    return ".env.development"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str = "sqlite:///./dev.db"

    # App settings
    app_name: str = "Portfolio Underwriting"
    debug: bool = False
    log_level: str = "INFO"
    app_env: str = "development"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Engine policy overrides (unset keeps the built-in policy)
    default_ltv: Optional[float] = None
    gp_equity_share: Optional[float] = None
    default_pref_rate: Optional[float] = None
    default_gp_promote: Optional[float] = None
    lp_capital_floor: Optional[float] = None
    default_hold_years: Optional[float] = None

    class Config:
        env_file = get_env_file()
        env_file_encoding = "utf-8"
        extra = "ignore"

    def engine_policy(self) -> EnginePolicy:
        """Build the calculation policy from settings."""
        return DEFAULT_POLICY.with_overrides(
            default_ltv=self.default_ltv,
            gp_equity_share=self.gp_equity_share,
            default_pref_rate=self.default_pref_rate,
            default_gp_promote=self.default_gp_promote,
            lp_capital_floor=self.lp_capital_floor,
            default_hold_years=self.default_hold_years,
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def get_engine_policy() -> EnginePolicy:
    """Dependency for the calculation policy."""
    return get_settings().engine_policy()
