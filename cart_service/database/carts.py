"""Cart storage for the cart service"""

import uuid
from datetime import datetime
from typing import Optional

from cart_engine import Cart, MissingProductPolicy
from ..core.config import settings
from ..models.cart import StoredCart


class CartDatabase:
    """In-memory cart storage"""

    def __init__(
        self,
        default_currency: str = "USD",
        missing_product_policy: MissingProductPolicy = MissingProductPolicy.IGNORE,
    ):
        self.default_currency = default_currency
        self.missing_product_policy = missing_product_policy
        self.carts: dict[str, StoredCart] = {}

    def create_cart(
        self,
        customer_id: Optional[str] = None,
        currency: Optional[str] = None,
    ) -> StoredCart:
        """Create a new, empty cart"""
        now = datetime.utcnow()
        stored = StoredCart(
            cart_id=str(uuid.uuid4()),
            customer_id=customer_id,
            currency=currency or self.default_currency,
            created_at=now,
            updated_at=now,
            cart=Cart(missing_product_policy=self.missing_product_policy),
        )
        self.carts[stored.cart_id] = stored
        return stored

    def get_cart(self, cart_id: str) -> Optional[StoredCart]:
        """Get a cart by ID"""
        return self.carts.get(cart_id)

    def delete_cart(self, cart_id: str) -> bool:
        """Delete a cart"""
        if cart_id in self.carts:
            del self.carts[cart_id]
            return True
        return False


# Singleton instance
cart_db = CartDatabase(
    default_currency=settings.default_currency,
    missing_product_policy=settings.missing_product_policy,
)
