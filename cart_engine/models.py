"""Cart Engine Data Models"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

Number = Union[Decimal, int, float, str]

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_decimal(value: Number) -> Decimal:
    """Coerce a price-like value to Decimal without float artifacts"""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


class DiscountKind(str, Enum):
    """How a promotion's discount value is interpreted"""
    PERCENTAGE = "percentage"
    FIXED_AMOUNT = "fixed_amount"


class RejectionCode(str, Enum):
    """Machine-readable reasons a cart operation was rejected"""
    INVALID_PROMOTION_CODE = "INVALID_PROMOTION_CODE"
    PROMOTION_NOT_YET_ACTIVE = "PROMOTION_NOT_YET_ACTIVE"
    PROMOTION_EXPIRED = "PROMOTION_EXPIRED"
    PROMOTION_INCOMPATIBLE = "PROMOTION_INCOMPATIBLE"
    PRODUCT_NOT_FOUND = "PRODUCT_NOT_FOUND"


class PromotionState(str, Enum):
    """Promotion sub-state of a cart"""
    NO_PROMOTION = "no_promotion"
    ONE_PROMOTION_APPLIED = "one_promotion_applied"
    MULTIPLE_PROMOTIONS_APPLIED = "multiple_promotions_applied"


class MissingProductPolicy(str, Enum):
    """What update/remove do when the product is not in the cart"""
    IGNORE = "ignore"
    REJECT = "reject"


@dataclass
class LineItem:
    """One product line in a cart"""
    product_id: str
    unit_price: Decimal
    quantity: int
    name: Optional[str] = None

    def __post_init__(self) -> None:
        self.unit_price = to_decimal(self.unit_price)
        if self.unit_price < ZERO:
            raise ValueError(f"Unit price for {self.product_id} must not be negative")

    def line_subtotal(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class Promotion:
    """
    A discount rule identified by a code.

    The activation window is inclusive on both ends. A promotion that is not
    combinable conflicts with every other promotion; a combinable one still
    conflicts with anything listed in incompatible_codes (checked both ways).
    """
    code: str
    description: str
    discount_kind: DiscountKind
    discount_value: Decimal
    start_date: date
    end_date: date
    combinable: bool = True
    incompatible_codes: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        # frozen, so normalise through object.__setattr__
        object.__setattr__(self, "discount_kind", DiscountKind(self.discount_kind))
        object.__setattr__(self, "discount_value", to_decimal(self.discount_value))
        object.__setattr__(self, "incompatible_codes", frozenset(self.incompatible_codes))

        if self.start_date > self.end_date:
            raise ValueError(
                f"Promotion {self.code}: start date {self.start_date} is after end date {self.end_date}"
            )
        if self.discount_kind == DiscountKind.PERCENTAGE:
            if not ZERO <= self.discount_value <= HUNDRED:
                raise ValueError(f"Promotion {self.code}: percentage must be within 0-100")
        elif self.discount_value < ZERO:
            raise ValueError(f"Promotion {self.code}: fixed amount must not be negative")

    @classmethod
    def percentage(
        cls,
        code: str,
        description: str,
        percent: Number,
        start_date: date,
        end_date: date,
        combinable: bool = True,
        incompatible_codes: Optional[set[str]] = None,
    ) -> "Promotion":
        """Build a percentage-off promotion"""
        return cls(
            code=code,
            description=description,
            discount_kind=DiscountKind.PERCENTAGE,
            discount_value=to_decimal(percent),
            start_date=start_date,
            end_date=end_date,
            combinable=combinable,
            incompatible_codes=frozenset(incompatible_codes or ()),
        )

    @classmethod
    def fixed_amount(
        cls,
        code: str,
        description: str,
        amount: Number,
        start_date: date,
        end_date: date,
        combinable: bool = True,
        incompatible_codes: Optional[set[str]] = None,
    ) -> "Promotion":
        """Build a fixed-amount-off promotion"""
        return cls(
            code=code,
            description=description,
            discount_kind=DiscountKind.FIXED_AMOUNT,
            discount_value=to_decimal(amount),
            start_date=start_date,
            end_date=end_date,
            combinable=combinable,
            incompatible_codes=frozenset(incompatible_codes or ()),
        )

    @property
    def is_percentage(self) -> bool:
        return self.discount_kind == DiscountKind.PERCENTAGE

    def is_active(self, on: date) -> bool:
        """Check whether the promotion can be used on the given date"""
        return self.start_date <= on <= self.end_date

    def calculate_discount(self, subtotal: Number) -> Decimal:
        """Discount this promotion grants against a pre-discount subtotal"""
        subtotal = to_decimal(subtotal)
        if self.is_percentage:
            return subtotal * (self.discount_value / HUNDRED)
        return min(self.discount_value, subtotal)

    def is_compatible_with(self, other: "Promotion") -> bool:
        if not self.combinable or not other.combinable:
            return False
        return other.code not in self.incompatible_codes and self.code not in other.incompatible_codes

    def describe(self) -> str:
        if self.is_percentage:
            return f"{self.discount_value.normalize():f}% off"
        return f"${self.discount_value.quantize(Decimal('0.01'))} off"


@dataclass
class Rejection:
    """Why a cart operation did not change the cart"""
    code: RejectionCode
    message: str
    conflicting_code: Optional[str] = None


@dataclass
class CartResult:
    """Outcome of a cart mutation"""
    accepted: bool
    rejection: Optional[Rejection] = None

    @classmethod
    def ok(cls) -> "CartResult":
        return cls(accepted=True)

    @classmethod
    def rejected(cls, rejection: Rejection) -> "CartResult":
        return cls(accepted=False, rejection=rejection)

    @property
    def error_code(self) -> Optional[RejectionCode]:
        return self.rejection.code if self.rejection else None

    @property
    def message(self) -> Optional[str]:
        return self.rejection.message if self.rejection else None

    def __bool__(self) -> bool:
        return self.accepted
