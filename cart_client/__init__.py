# Cart Service API Client

from .client import CartClient, CartClientError, CartAPIError

__all__ = ["CartClient", "CartClientError", "CartAPIError"]
