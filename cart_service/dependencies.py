"""FastAPI dependencies for the cart service"""

from datetime import date

from .core.config import Settings, settings
from .database.carts import CartDatabase, cart_db
from .database.promotions import PromotionDatabase, promotion_db


def get_app_settings() -> Settings:
    return settings


def get_cart_database() -> CartDatabase:
    return cart_db


def get_promotion_catalog() -> PromotionDatabase:
    return promotion_db


def resolve_today(config: Settings, catalog: PromotionDatabase) -> date:
    """
    Business date for promotion activation checks.

    An explicit ``business_date`` wins. Otherwise a seeded catalog pins the
    clock to the date its windows were built against, so EXPIRED21 and
    SEASONAL22 stay outside their windows however long the process runs.
    File-loaded catalogs follow the calendar.
    """
    if config.business_date:
        return config.business_date
    if catalog.seed_date:
        return catalog.seed_date
    return config.today()


def get_today() -> date:
    return resolve_today(settings, promotion_db)
