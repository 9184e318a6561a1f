"""Error responses for the cart service"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from cart_engine import Rejection, RejectionCode

logger = logging.getLogger(__name__)

# Rejections that are about a missing resource rather than a bad request
NOT_FOUND_CODES = {RejectionCode.PRODUCT_NOT_FOUND}


class CartServiceError(Exception):
    """Error carrying a machine-readable code and a human-readable message"""

    def __init__(self, status_code: int, error: str, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.error = error
        self.message = message

    @classmethod
    def from_rejection(cls, rejection: Rejection) -> "CartServiceError":
        status_code = 404 if rejection.code in NOT_FOUND_CODES else 400
        return cls(status_code=status_code, error=rejection.code.value, message=rejection.message)


async def cart_service_error_handler(request: Request, exc: CartServiceError) -> JSONResponse:
    """Render a CartServiceError as ``{error, message}``"""
    logger.warning(f"{request.method} {request.url.path} rejected: {exc.error} - {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.error, "message": exc.message},
    )
