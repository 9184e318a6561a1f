"""Cart Service Configuration"""

import os
from datetime import date
from typing import Optional
from pydantic_settings import BaseSettings
from functools import lru_cache

from cart_engine import MissingProductPolicy

CONFIG_DIR = os.path.join(os.path.dirname(__file__), "..", "..", "config")


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    # Application
    app_name: str = "Retail Cart Service"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8001
    log_level: str = "INFO"

    # Pricing
    default_currency: str = "USD"
    tax_rate: float = 0.0875  # 8.75% tax, reported on the cart summary only

    # Cart behaviour
    strict_product_lookup: bool = False  # reject update/remove of absent products

    # Promotions
    business_date: Optional[date] = None  # pins "today" for activation checks
    promotions_file: Optional[str] = None  # JSON list of promotions replacing the seeded catalog

    class Config:
        env_file = os.path.join(CONFIG_DIR, ".env")
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    @property
    def missing_product_policy(self) -> MissingProductPolicy:
        if self.strict_product_lookup:
            return MissingProductPolicy.REJECT
        return MissingProductPolicy.IGNORE

    def today(self) -> date:
        """Business date used when evaluating promotion windows"""
        return self.business_date or date.today()


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
