"""Promotion lookup routes"""

from datetime import date

from fastapi import APIRouter, Depends

from ..database.promotions import PromotionDatabase
from ..dependencies import get_promotion_catalog, get_today
from ..errors import CartServiceError
from ..models.cart import ErrorResponse
from ..models.promotion import PromotionResource

router = APIRouter(prefix="/api/promotions", tags=["Promotions"])


@router.get("", response_model=list[PromotionResource])
async def list_promotions(
    catalog: PromotionDatabase = Depends(get_promotion_catalog),
    today: date = Depends(get_today),
):
    """List every resolvable promotion in the catalog"""
    promotions = [catalog.lookup(code) for code in catalog.codes()]
    return [
        PromotionResource.from_promotion(promotion, today)
        for promotion in promotions
        if promotion is not None
    ]


@router.get(
    "/{code}",
    response_model=PromotionResource,
    responses={404: {"model": ErrorResponse, "description": "Promotion not found"}},
)
async def get_promotion(
    code: str,
    catalog: PromotionDatabase = Depends(get_promotion_catalog),
    today: date = Depends(get_today),
):
    """Get a promotion and whether it is active today"""
    promotion = catalog.lookup(code)
    if promotion is None:
        raise CartServiceError(
            status_code=404,
            error="PROMOTION_NOT_FOUND",
            message=f"Promotion {code} not found",
        )
    return PromotionResource.from_promotion(promotion, today)
