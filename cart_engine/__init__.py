# Cart Engine
# Line items, promotions and the cart aggregate that prices them

from .cart import Cart
from .catalog import InMemoryPromotionCatalog, PromotionCatalog
from .models import (
    CartResult,
    DiscountKind,
    LineItem,
    MissingProductPolicy,
    Promotion,
    PromotionState,
    Rejection,
    RejectionCode,
)

__all__ = [
    "Cart",
    "CartResult",
    "DiscountKind",
    "InMemoryPromotionCatalog",
    "LineItem",
    "MissingProductPolicy",
    "Promotion",
    "PromotionCatalog",
    "PromotionState",
    "Rejection",
    "RejectionCode",
]
