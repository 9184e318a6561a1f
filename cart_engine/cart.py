"""Shopping cart aggregate"""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from .catalog import PromotionCatalog
from .models import (
    ZERO,
    CartResult,
    LineItem,
    MissingProductPolicy,
    Number,
    Promotion,
    PromotionState,
    Rejection,
    RejectionCode,
)

logger = logging.getLogger(__name__)


class Cart:
    """
    Line items plus the promotions applied to them.

    Totals are always derived from the current line items and promotions,
    nothing is cached across mutations. Business rejections (bad codes,
    expired promotions, conflicts) are returned as CartResult values and
    ``rejections`` holds the reasons from the most recent failed operation;
    they are never raised.
    """

    def __init__(self, missing_product_policy: MissingProductPolicy = MissingProductPolicy.IGNORE):
        self.missing_product_policy = missing_product_policy
        # dicts keep insertion order: line items by first add, promotions by application
        self._items: dict[str, LineItem] = {}
        self._promotions: dict[str, Promotion] = {}
        self.rejections: list[Rejection] = []

    # ==================== Line items ====================

    @property
    def line_items(self) -> list[LineItem]:
        return list(self._items.values())

    def get_line_item(self, product_id: str) -> Optional[LineItem]:
        return self._items.get(product_id)

    def add_product(
        self,
        product_id: str,
        unit_price: Number,
        quantity: int,
        name: Optional[str] = None,
    ) -> LineItem:
        """
        Add a product to the cart.

        If the product is already present its quantity is incremented and the
        existing unit price is kept. Quantity is not validated here; callers
        that need strictly positive quantities check before calling.
        """
        existing = self._items.get(product_id)
        if existing:
            existing.quantity += quantity
            return existing

        item = LineItem(product_id=product_id, unit_price=unit_price, quantity=quantity, name=name)
        self._items[product_id] = item
        return item

    def update_quantity(self, product_id: str, quantity: int) -> CartResult:
        """Set a line item's quantity; zero or less removes it"""
        item = self._items.get(product_id)
        if not item:
            return self._missing_product(product_id)

        if quantity <= 0:
            del self._items[product_id]
        else:
            item.quantity = quantity
        return CartResult.ok()

    def remove_product(self, product_id: str) -> CartResult:
        if product_id not in self._items:
            return self._missing_product(product_id)

        del self._items[product_id]
        return CartResult.ok()

    def clear_items(self) -> None:
        self._items.clear()

    def item_count(self) -> int:
        """Total units across all line items"""
        return sum(item.quantity for item in self._items.values())

    def unique_item_count(self) -> int:
        return len(self._items)

    def _missing_product(self, product_id: str) -> CartResult:
        if self.missing_product_policy == MissingProductPolicy.IGNORE:
            return CartResult.ok()
        return self._reject(
            Rejection(
                code=RejectionCode.PRODUCT_NOT_FOUND,
                message=f"Product {product_id} is not in the cart",
            )
        )

    # ==================== Promotions ====================

    @property
    def applied_promotions(self) -> list[Promotion]:
        return list(self._promotions.values())

    @property
    def applied_codes(self) -> list[str]:
        return list(self._promotions)

    @property
    def promotion_state(self) -> PromotionState:
        if not self._promotions:
            return PromotionState.NO_PROMOTION
        if len(self._promotions) == 1:
            return PromotionState.ONE_PROMOTION_APPLIED
        return PromotionState.MULTIPLE_PROMOTIONS_APPLIED

    def apply_promotion(self, code: str, catalog: PromotionCatalog, today: date) -> CartResult:
        """
        Apply a promotion code as of ``today``.

        The candidate must resolve in the catalog, be active on ``today`` and be
        compatible with every promotion already applied. Only the first
        conflicting promotion is reported. Re-applying a code that is already
        applied replaces the entry under the same key, so the applied set does
        not grow.
        """
        candidate = catalog.lookup(code)
        if candidate is None:
            return self._reject(
                Rejection(
                    code=RejectionCode.INVALID_PROMOTION_CODE,
                    message="The promotion code is invalid",
                )
            )

        if not candidate.is_active(today):
            if today < candidate.start_date:
                rejection = Rejection(
                    code=RejectionCode.PROMOTION_NOT_YET_ACTIVE,
                    message="This promotion is not currently active",
                )
            else:
                rejection = Rejection(
                    code=RejectionCode.PROMOTION_EXPIRED,
                    message="This promotion code has expired",
                )
            return self._reject(rejection)

        for existing in self._promotions.values():
            if not existing.is_compatible_with(candidate):
                return self._reject(
                    Rejection(
                        code=RejectionCode.PROMOTION_INCOMPATIBLE,
                        message=f"This promotion cannot be combined with {existing.code}",
                        conflicting_code=existing.code,
                    )
                )

        self._promotions[candidate.code] = candidate
        logger.info(f"Applied promotion {candidate.code} ({candidate.describe()})")
        return CartResult.ok()

    def remove_promotion(self, code: str) -> bool:
        """Remove an applied promotion, returning whether it was applied"""
        return self._promotions.pop(code, None) is not None

    def clear_promotions(self) -> None:
        self._promotions.clear()

    # ==================== Totals ====================

    def subtotal(self) -> Decimal:
        return sum((item.line_subtotal() for item in self._items.values()), ZERO)

    def discount_breakdown(self) -> dict[str, Decimal]:
        """Each applied promotion's discount, computed against the full subtotal"""
        subtotal = self.subtotal()
        return {
            code: promotion.calculate_discount(subtotal)
            for code, promotion in self._promotions.items()
        }

    def total_discount(self) -> Decimal:
        # additive on the pre-discount subtotal, not compounded
        return sum(self.discount_breakdown().values(), ZERO)

    def final_total(self) -> Decimal:
        return max(ZERO, self.subtotal() - self.total_discount())

    # ==================== Rejections ====================

    @property
    def last_rejection(self) -> Optional[Rejection]:
        return self.rejections[-1] if self.rejections else None

    def clear_rejections(self) -> None:
        self.rejections.clear()

    def _reject(self, rejection: Rejection) -> CartResult:
        logger.debug(f"Cart operation rejected: {rejection.code.value} - {rejection.message}")
        # only the most recent failed operation is kept
        self.rejections = [rejection]
        return CartResult.rejected(rejection)

    def __repr__(self) -> str:
        return (
            f"Cart(items={len(self._items)}, promotions={self.applied_codes}, "
            f"subtotal={self.subtotal()}, total={self.final_total()})"
        )
