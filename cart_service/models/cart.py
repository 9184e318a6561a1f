"""Cart models for the cart service"""

from decimal import Decimal, ROUND_HALF_UP
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from cart_engine import Cart, DiscountKind

CENT = Decimal("0.01")


def money(value: Decimal) -> float:
    """Round a Decimal amount half-up to cents for presentation"""
    return float(value.quantize(CENT, rounding=ROUND_HALF_UP))


class ApiModel(BaseModel):
    """Base for request/response bodies with camelCase JSON keys"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class CreateCartRequest(ApiModel):
    """Request to create a cart"""
    customer_id: Optional[str] = None
    currency: Optional[str] = None


class AddItemRequest(ApiModel):
    """Request to add a product line to a cart"""
    product_id: str = Field(min_length=1)
    quantity: int = Field(default=1, gt=0)
    price: float = Field(ge=0)
    name: Optional[str] = None


class UpdateItemRequest(ApiModel):
    """Request to change a line item's quantity; zero or less removes it"""
    quantity: int


class ApplyPromotionRequest(ApiModel):
    """Request to apply a promotion code"""
    promo_code: str


class CartItemResource(ApiModel):
    """Line item in a cart response"""
    product_id: str
    name: Optional[str] = None
    quantity: int
    price: float
    line_total: float


class AppliedPromotionResource(ApiModel):
    """Applied promotion with the discount it currently grants"""
    code: str
    description: str
    discount_type: DiscountKind
    discount_value: float
    discount_amount: float


class CartResource(ApiModel):
    """Cart API response"""
    id: str
    customer_id: Optional[str] = None
    currency: str = "USD"
    items: list[CartItemResource] = []
    subtotal: float = 0.0
    discount_amount: float = 0.0
    total: float = 0.0
    applied_promotions: list[AppliedPromotionResource] = []
    created_at: datetime
    updated_at: datetime


class CartSummary(ApiModel):
    """Aggregate figures for a cart, including tax"""
    item_count: int
    unique_item_count: int
    subtotal: float
    discount_amount: float
    tax: float
    total: float


class ErrorResponse(ApiModel):
    """Error body for rejected operations and missing resources"""
    error: str
    message: str


class StoredCart(BaseModel):
    """A domain cart together with its session metadata"""
    cart_id: str
    customer_id: Optional[str] = None
    currency: str = "USD"
    created_at: datetime
    updated_at: datetime
    cart: Cart

    class Config:
        arbitrary_types_allowed = True

    def touch(self) -> None:
        self.updated_at = datetime.utcnow()

    def to_resource(self) -> CartResource:
        """Translate the domain cart to its API representation"""
        breakdown = self.cart.discount_breakdown()
        return CartResource(
            id=self.cart_id,
            customer_id=self.customer_id,
            currency=self.currency,
            items=[
                CartItemResource(
                    product_id=item.product_id,
                    name=item.name,
                    quantity=item.quantity,
                    price=money(item.unit_price),
                    line_total=money(item.line_subtotal()),
                )
                for item in self.cart.line_items
            ],
            subtotal=money(self.cart.subtotal()),
            discount_amount=money(self.cart.total_discount()),
            total=money(self.cart.final_total()),
            applied_promotions=[
                AppliedPromotionResource(
                    code=promotion.code,
                    description=promotion.description,
                    discount_type=promotion.discount_kind,
                    discount_value=float(promotion.discount_value),
                    discount_amount=money(breakdown[promotion.code]),
                )
                for promotion in self.cart.applied_promotions
            ],
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    def to_summary(self, tax_rate: float) -> CartSummary:
        """Summarise the cart; tax is charged on the discounted total"""
        total = self.cart.final_total()
        tax = (total * Decimal(str(tax_rate))).quantize(CENT, rounding=ROUND_HALF_UP)
        return CartSummary(
            item_count=self.cart.item_count(),
            unique_item_count=self.cart.unique_item_count(),
            subtotal=money(self.cart.subtotal()),
            discount_amount=money(self.cart.total_discount()),
            tax=float(tax),
            total=money(total + tax),
        )
