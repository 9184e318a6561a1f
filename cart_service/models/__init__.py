# Cart Service Models

from .cart import (
    AddItemRequest,
    AppliedPromotionResource,
    ApplyPromotionRequest,
    CartItemResource,
    CartResource,
    CartSummary,
    CreateCartRequest,
    ErrorResponse,
    StoredCart,
    UpdateItemRequest,
)
from .promotion import PromotionRecord, PromotionResource

__all__ = [
    "AddItemRequest",
    "AppliedPromotionResource",
    "ApplyPromotionRequest",
    "CartItemResource",
    "CartResource",
    "CartSummary",
    "CreateCartRequest",
    "ErrorResponse",
    "StoredCart",
    "UpdateItemRequest",
    "PromotionRecord",
    "PromotionResource",
]
