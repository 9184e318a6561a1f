# API Routes

from .cart import router as cart_router
from .promotions import router as promotions_router

__all__ = ["cart_router", "promotions_router"]
