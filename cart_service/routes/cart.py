"""Cart API routes"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Response

from cart_engine import PromotionCatalog
from ..core.config import Settings
from ..database.carts import CartDatabase
from ..dependencies import (
    get_app_settings,
    get_cart_database,
    get_promotion_catalog,
    get_today,
)
from ..errors import CartServiceError
from ..models.cart import (
    AddItemRequest,
    ApplyPromotionRequest,
    CartResource,
    CartSummary,
    CreateCartRequest,
    ErrorResponse,
    StoredCart,
    UpdateItemRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cart", tags=["Cart"])

ITEM_RESPONSES = {
    404: {"model": ErrorResponse, "description": "Cart or item not found"},
}

PROMOTION_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Promotion rejected"},
    404: {"model": ErrorResponse, "description": "Cart not found or promotion not applied"},
}


def get_stored_cart(
    cart_id: str,
    db: CartDatabase = Depends(get_cart_database),
) -> StoredCart:
    """Resolve the cart in the path or fail with 404"""
    stored = db.get_cart(cart_id)
    if not stored:
        raise CartServiceError(
            status_code=404,
            error="CART_NOT_FOUND",
            message=f"Cart {cart_id} not found",
        )
    return stored


@router.post("", response_model=CartResource, status_code=201)
async def create_cart(
    request: Optional[CreateCartRequest] = None,
    db: CartDatabase = Depends(get_cart_database),
):
    """Create a new shopping cart"""
    request = request or CreateCartRequest()
    stored = db.create_cart(customer_id=request.customer_id, currency=request.currency)
    logger.info(f"Cart {stored.cart_id} created for customer {stored.customer_id}")
    return stored.to_resource()


@router.get("/{cart_id}", response_model=CartResource)
async def get_cart(stored: StoredCart = Depends(get_stored_cart)):
    """Get cart by ID"""
    return stored.to_resource()


@router.delete("/{cart_id}", status_code=204)
async def delete_cart(
    stored: StoredCart = Depends(get_stored_cart),
    db: CartDatabase = Depends(get_cart_database),
):
    """Discard a cart"""
    db.delete_cart(stored.cart_id)
    return Response(status_code=204)


@router.get("/{cart_id}/summary", response_model=CartSummary)
async def get_cart_summary(
    stored: StoredCart = Depends(get_stored_cart),
    config: Settings = Depends(get_app_settings),
):
    """Item counts and totals, including tax"""
    return stored.to_summary(config.tax_rate)


@router.post("/{cart_id}/items", response_model=CartResource)
async def add_item(
    request: AddItemRequest,
    stored: StoredCart = Depends(get_stored_cart),
):
    """Add a product line to the cart, merging with an existing line for the same product"""
    stored.cart.add_product(
        product_id=request.product_id,
        unit_price=request.price,
        quantity=request.quantity,
        name=request.name,
    )
    stored.touch()
    return stored.to_resource()


@router.put(
    "/{cart_id}/items/{product_id}",
    response_model=CartResource,
    responses=ITEM_RESPONSES,
)
async def update_item(
    product_id: str,
    request: UpdateItemRequest,
    stored: StoredCart = Depends(get_stored_cart),
):
    """Update item quantity in cart"""
    result = stored.cart.update_quantity(product_id, request.quantity)
    if not result:
        raise CartServiceError.from_rejection(result.rejection)

    stored.touch()
    return stored.to_resource()


@router.delete("/{cart_id}/items/{product_id}", status_code=204, responses=ITEM_RESPONSES)
async def remove_item(
    product_id: str,
    stored: StoredCart = Depends(get_stored_cart),
):
    """Remove an item from the cart"""
    result = stored.cart.remove_product(product_id)
    if not result:
        raise CartServiceError.from_rejection(result.rejection)

    stored.touch()
    return Response(status_code=204)


@router.delete("/{cart_id}/items", status_code=204)
async def clear_items(stored: StoredCart = Depends(get_stored_cart)):
    """Remove every item from the cart; applied promotions stay"""
    stored.cart.clear_items()
    stored.touch()
    return Response(status_code=204)


@router.post(
    "/{cart_id}/promotions",
    response_model=CartResource,
    responses=PROMOTION_RESPONSES,
)
async def apply_promotion(
    request: ApplyPromotionRequest,
    stored: StoredCart = Depends(get_stored_cart),
    catalog: PromotionCatalog = Depends(get_promotion_catalog),
    today: date = Depends(get_today),
):
    """Apply a promotion code to the cart"""
    result = stored.cart.apply_promotion(request.promo_code, catalog, today)
    if not result:
        raise CartServiceError.from_rejection(result.rejection)

    stored.touch()
    logger.info(f"Promotion {request.promo_code} applied to cart {stored.cart_id}")
    return stored.to_resource()


@router.delete(
    "/{cart_id}/promotions/{code}",
    response_model=CartResource,
    responses=PROMOTION_RESPONSES,
)
async def remove_promotion(
    code: str,
    stored: StoredCart = Depends(get_stored_cart),
):
    """Remove an applied promotion"""
    if not stored.cart.remove_promotion(code):
        raise CartServiceError(
            status_code=404,
            error="PROMOTION_NOT_APPLIED",
            message=f"Promotion {code} is not applied to this cart",
        )

    stored.touch()
    return stored.to_resource()


@router.delete("/{cart_id}/promotions", response_model=CartResource)
async def clear_promotions(stored: StoredCart = Depends(get_stored_cart)):
    """Remove every applied promotion"""
    stored.cart.clear_promotions()
    stored.touch()
    return stored.to_resource()
