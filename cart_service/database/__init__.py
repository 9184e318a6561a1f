# Database modules

from .carts import cart_db, CartDatabase
from .promotions import promotion_db, PromotionDatabase

__all__ = [
    "cart_db",
    "CartDatabase",
    "promotion_db",
    "PromotionDatabase",
]
