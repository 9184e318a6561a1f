"""Promotion models for the cart service"""

from datetime import date

from pydantic import Field, model_validator

from cart_engine import DiscountKind, Promotion
from .cart import ApiModel


class PromotionRecord(ApiModel):
    """Promotion as stored in a catalog file"""
    code: str = Field(min_length=1)
    description: str = ""
    discount_type: DiscountKind
    discount_value: float = Field(ge=0)
    start_date: date
    end_date: date
    combinable: bool = True
    incompatible_codes: list[str] = []

    @model_validator(mode="after")
    def check_window(self) -> "PromotionRecord":
        if self.start_date > self.end_date:
            raise ValueError(f"start_date must not be after end_date for {self.code}")
        if self.discount_type == DiscountKind.PERCENTAGE and self.discount_value > 100:
            raise ValueError(f"percentage discount must be at most 100 for {self.code}")
        return self

    def to_promotion(self) -> Promotion:
        return Promotion(
            code=self.code,
            description=self.description,
            discount_kind=self.discount_type,
            discount_value=self.discount_value,
            start_date=self.start_date,
            end_date=self.end_date,
            combinable=self.combinable,
            incompatible_codes=frozenset(self.incompatible_codes),
        )


class PromotionResource(PromotionRecord):
    """Promotion API response"""
    active: bool

    @classmethod
    def from_promotion(cls, promotion: Promotion, today: date) -> "PromotionResource":
        return cls(
            code=promotion.code,
            description=promotion.description,
            discount_type=promotion.discount_kind,
            discount_value=float(promotion.discount_value),
            start_date=promotion.start_date,
            end_date=promotion.end_date,
            combinable=promotion.combinable,
            incompatible_codes=sorted(promotion.incompatible_codes),
            active=promotion.is_active(today),
        )
