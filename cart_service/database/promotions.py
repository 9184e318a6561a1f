"""Promotion catalog for the cart service"""

import json
import logging
from datetime import date, timedelta
from typing import Optional

from pydantic import TypeAdapter

from cart_engine import InMemoryPromotionCatalog, Promotion
from ..core.config import Settings, settings
from ..models.promotion import PromotionRecord

logger = logging.getLogger(__name__)

# Known code that never resolves, used to exercise the invalid-code path
UNRESOLVABLE_CODES = ["INVALID123"]


def seed_promotions(today: date) -> list[Promotion]:
    """Default promotions, with windows placed relative to ``today``"""
    one_month_ago = today - timedelta(days=30)
    one_month_later = today + timedelta(days=30)
    one_week_ago = today - timedelta(weeks=1)
    one_week_later = today + timedelta(weeks=1)

    return [
        Promotion.percentage(
            "SUMMER25", "Summer Collection 25% Off", 25, one_month_ago, one_month_later, combinable=True
        ),
        Promotion.percentage(
            "SUMMER10", "Summer Special 10% Off", 10, one_month_ago, one_month_later, combinable=True
        ),
        Promotion.percentage(
            "NEWCUSTOMER5", "New Customer 5% Off", 5, one_month_ago, one_month_later, combinable=True
        ),
        Promotion.percentage(
            "SAVE20", "Save 20% On Your Order", 20, one_month_ago, one_month_later, combinable=True
        ),
        Promotion.percentage(
            "SALE30", "Special Sale 30% Off", 30, one_month_ago, one_month_later, combinable=False
        ),
        Promotion.percentage(
            "BUNDLE20", "Bundle Discount 20% Off", 20, one_month_ago, one_month_later, combinable=False
        ),
        Promotion.fixed_amount(
            "FREESHIP10",
            "$10 Off Shipping",
            10,
            one_month_ago,
            one_month_later,
            combinable=True,
            incompatible_codes={"NEWCUSTOMER5"},
        ),
        # Outside their activation windows
        Promotion.percentage(
            "EXPIRED21", "Expired Promotion 21% Off", 21, one_month_ago, one_week_ago, combinable=True
        ),
        Promotion.percentage(
            "SEASONAL22", "Upcoming Seasonal 22% Off", 22, one_week_later, one_month_later, combinable=True
        ),
    ]


def load_promotions_file(path: str) -> list[Promotion]:
    """Load promotions from a JSON list of promotion records"""
    with open(path, "r") as f:
        raw = json.load(f)

    records = TypeAdapter(list[PromotionRecord]).validate_python(raw)
    return [record.to_promotion() for record in records]


class PromotionDatabase(InMemoryPromotionCatalog):
    """In-memory promotion catalog for the cart service"""

    # date the seed windows were placed against; None for file-loaded catalogs
    seed_date: Optional[date] = None

    @classmethod
    def seeded(cls, today: date) -> "PromotionDatabase":
        catalog = cls(seed_promotions(today))
        catalog.seed_date = today
        for code in UNRESOLVABLE_CODES:
            catalog.register_unresolvable(code)
        return catalog

    @classmethod
    def from_settings(cls, config: Settings, today: Optional[date] = None) -> "PromotionDatabase":
        """Build the catalog from a promotions file if configured, else the seed data"""
        if config.promotions_file:
            promotions = load_promotions_file(config.promotions_file)
            logger.info(f"Loaded {len(promotions)} promotions from {config.promotions_file}")
            return cls(promotions)
        return cls.seeded(today or config.today())


# Singleton instance. Seed windows are fixed at import, see dependencies.resolve_today
promotion_db = PromotionDatabase.from_settings(settings)
