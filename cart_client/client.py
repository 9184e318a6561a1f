"""
Cart API Client

HTTP client for the retail cart service.
Wraps every cart and promotion endpoint and turns error responses into
typed exceptions carrying the service's error code.
"""

import logging
from typing import Optional, Any

import httpx

logger = logging.getLogger(__name__)


class CartClientError(Exception):
    """Base exception for cart client errors"""
    pass


class CartAPIError(CartClientError):
    """The cart service answered with an error status"""

    def __init__(self, status_code: int, error: Optional[str], message: str):
        super().__init__(f"{status_code} {error or 'ERROR'}: {message}")
        self.status_code = status_code
        self.error = error
        self.message = message

    @classmethod
    def from_response(cls, response: httpx.Response) -> "CartAPIError":
        """Parse ``{error, message}`` bodies as well as FastAPI ``{detail}`` bodies"""
        try:
            body = response.json()
        except ValueError:
            return cls(response.status_code, None, response.text)

        if not isinstance(body, dict):
            return cls(response.status_code, None, str(body))
        if "error" in body:
            return cls(response.status_code, body["error"], body.get("message", ""))
        return cls(response.status_code, None, str(body.get("detail", body)))


class CartClient:
    """
    Client for the cart service API.

    Usage:
        async with CartClient("http://localhost:8001") as client:
            cart = await client.create_cart(customer_id="c-1")
            await client.add_item(cart["id"], "P001", quantity=2, price=49.99)
            cart = await client.apply_promotion(cart["id"], "SAVE20")
    """

    def __init__(
        self,
        base_url: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 30.0,
    ):
        """
        Initialize cart client.

        Args:
            base_url: Base URL of the cart service
            transport: Optional httpx transport, e.g. ASGITransport for in-process calls
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self._http_client = httpx.AsyncClient(
            base_url=self.base_url,
            transport=transport,
            timeout=timeout,
            headers={
                "Accept": "application/json",
                "User-Agent": "RetailCartClient/1.0",
            },
        )

    async def __aenter__(self) -> "CartClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        """Close HTTP client"""
        await self._http_client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        body: Optional[dict] = None,
    ) -> Any:
        """Make an HTTP request, raising CartAPIError on error statuses"""
        response = await self._http_client.request(method=method, url=path, json=body)

        if response.status_code >= 400:
            logger.error(f"Request failed: {method} {path} {response.status_code} - {response.text}")
            raise CartAPIError.from_response(response)

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # ==================== Cart APIs ====================

    async def create_cart(
        self,
        customer_id: Optional[str] = None,
        currency: Optional[str] = None,
    ) -> dict:
        """Create a new shopping cart"""
        body = {}
        if customer_id:
            body["customerId"] = customer_id
        if currency:
            body["currency"] = currency
        return await self._request("POST", "/api/cart", body=body)

    async def get_cart(self, cart_id: str) -> dict:
        """Get cart by ID"""
        return await self._request("GET", f"/api/cart/{cart_id}")

    async def get_summary(self, cart_id: str) -> dict:
        """Get item counts, tax and totals for a cart"""
        return await self._request("GET", f"/api/cart/{cart_id}/summary")

    async def delete_cart(self, cart_id: str) -> None:
        """Discard a cart"""
        await self._request("DELETE", f"/api/cart/{cart_id}")

    async def add_item(
        self,
        cart_id: str,
        product_id: str,
        quantity: int = 1,
        price: float = 0.0,
        name: Optional[str] = None,
    ) -> dict:
        """Add item to cart"""
        body = {"productId": product_id, "quantity": quantity, "price": price}
        if name:
            body["name"] = name
        return await self._request("POST", f"/api/cart/{cart_id}/items", body=body)

    async def update_item(
        self,
        cart_id: str,
        product_id: str,
        quantity: int,
    ) -> dict:
        """Update item quantity in cart"""
        return await self._request(
            "PUT",
            f"/api/cart/{cart_id}/items/{product_id}",
            body={"quantity": quantity},
        )

    async def remove_item(self, cart_id: str, product_id: str) -> None:
        """Remove item from cart"""
        await self._request("DELETE", f"/api/cart/{cart_id}/items/{product_id}")

    async def clear_items(self, cart_id: str) -> None:
        """Remove every item from cart"""
        await self._request("DELETE", f"/api/cart/{cart_id}/items")

    # ==================== Promotion APIs ====================

    async def apply_promotion(self, cart_id: str, promo_code: str) -> dict:
        """Apply a promotion code; rejected codes raise CartAPIError"""
        return await self._request(
            "POST",
            f"/api/cart/{cart_id}/promotions",
            body={"promoCode": promo_code},
        )

    async def remove_promotion(self, cart_id: str, code: str) -> dict:
        """Remove an applied promotion"""
        return await self._request("DELETE", f"/api/cart/{cart_id}/promotions/{code}")

    async def clear_promotions(self, cart_id: str) -> dict:
        """Remove every applied promotion"""
        return await self._request("DELETE", f"/api/cart/{cart_id}/promotions")

    async def list_promotions(self) -> list[dict]:
        """List every resolvable promotion with its activity as of the service's business date"""
        return await self._request("GET", "/api/promotions")

    async def get_promotion(self, code: str) -> dict:
        """Get promotion details"""
        return await self._request("GET", f"/api/promotions/{code}")
