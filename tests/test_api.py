from cart_engine import MissingProductPolicy
from cart_service.database.carts import CartDatabase
from cart_service.dependencies import get_cart_database


class TestCartResource:

    def test_create_cart(self, client):
        response = client.post("/api/cart", json={"customerId": "c-42", "currency": "USD"})

        assert response.status_code == 201
        body = response.json()
        assert body["id"]
        assert body["customerId"] == "c-42"
        assert body["currency"] == "USD"
        assert body["items"] == []
        assert body["subtotal"] == 0.0
        assert body["total"] == 0.0
        assert body["appliedPromotions"] == []
        assert body["createdAt"]

    def test_create_cart_without_body_uses_defaults(self, client):
        response = client.post("/api/cart")

        assert response.status_code == 201
        assert response.json()["currency"] == "USD"
        assert response.json()["customerId"] is None

    def test_get_cart(self, client, new_cart):
        cart_id = new_cart()

        response = client.get(f"/api/cart/{cart_id}")

        assert response.status_code == 200
        assert response.json()["id"] == cart_id
        assert response.json()["customerId"] == "customer-1"

    def test_unknown_cart_is_404(self, client):
        response = client.get("/api/cart/does-not-exist")

        assert response.status_code == 404
        assert response.json() == {
            "error": "CART_NOT_FOUND",
            "message": "Cart does-not-exist not found",
        }

    def test_delete_cart(self, client, new_cart):
        cart_id = new_cart()

        assert client.delete(f"/api/cart/{cart_id}").status_code == 204
        assert client.get(f"/api/cart/{cart_id}").status_code == 404


class TestItems:

    def test_add_product(self, client, new_cart):
        cart_id = new_cart()

        response = client.post(
            f"/api/cart/{cart_id}/items",
            json={"productId": "P001", "quantity": 2, "price": 49.99},
        )

        assert response.status_code == 200
        body = response.json()
        assert len(body["items"]) == 1
        assert body["items"][0]["productId"] == "P001"
        assert body["items"][0]["quantity"] == 2
        assert body["items"][0]["price"] == 49.99
        assert body["items"][0]["lineTotal"] == 99.98
        assert body["subtotal"] == 99.98
        assert body["total"] == 99.98

    def test_adding_same_product_merges(self, client, new_cart):
        cart_id = new_cart(("P001", 1, 10.00))

        body = client.post(
            f"/api/cart/{cart_id}/items",
            json={"productId": "P001", "quantity": 2, "price": 12.00},
        ).json()

        assert body["items"] == [
            {"productId": "P001", "name": None, "quantity": 3, "price": 10.0, "lineTotal": 30.0}
        ]

    def test_add_rejects_non_positive_quantity(self, client, new_cart):
        cart_id = new_cart()

        response = client.post(
            f"/api/cart/{cart_id}/items",
            json={"productId": "P001", "quantity": 0, "price": 5},
        )

        assert response.status_code == 422

    def test_add_rejects_negative_price(self, client, new_cart):
        cart_id = new_cart()

        response = client.post(
            f"/api/cart/{cart_id}/items",
            json={"productId": "P001", "quantity": 1, "price": -5},
        )

        assert response.status_code == 422

    def test_update_quantity(self, client, new_cart):
        cart_id = new_cart(("P002", 1, 25.00))

        response = client.put(f"/api/cart/{cart_id}/items/P002", json={"quantity": 3})

        assert response.status_code == 200
        assert response.json()["items"][0]["quantity"] == 3
        assert response.json()["subtotal"] == 75.00

    def test_update_to_zero_removes(self, client, new_cart):
        cart_id = new_cart(("P002", 1, 25.00))

        response = client.put(f"/api/cart/{cart_id}/items/P002", json={"quantity": 0})

        assert response.json()["items"] == []

    def test_update_missing_product_is_ignored_by_default(self, client, new_cart):
        cart_id = new_cart(("P002", 1, 25.00))

        response = client.put(f"/api/cart/{cart_id}/items/NOPE", json={"quantity": 5})

        assert response.status_code == 200
        assert response.json()["subtotal"] == 25.00

    def test_strict_lookup_reports_missing_product(self, api_app, client, new_cart):
        strict_db = CartDatabase(missing_product_policy=MissingProductPolicy.REJECT)
        api_app.dependency_overrides[get_cart_database] = lambda: strict_db
        cart_id = new_cart(("P002", 1, 25.00))

        update = client.put(f"/api/cart/{cart_id}/items/NOPE", json={"quantity": 5})
        remove = client.delete(f"/api/cart/{cart_id}/items/NOPE")

        assert update.status_code == 404
        assert update.json()["error"] == "PRODUCT_NOT_FOUND"
        assert remove.status_code == 404
        assert remove.json()["message"] == "Product NOPE is not in the cart"

    def test_remove_product(self, client, new_cart):
        cart_id = new_cart(("P003", 2, 15.50))

        assert client.delete(f"/api/cart/{cart_id}/items/P003").status_code == 204

        body = client.get(f"/api/cart/{cart_id}").json()
        assert body["items"] == []
        assert body["subtotal"] == 0.0

    def test_clear_items(self, client, new_cart):
        cart_id = new_cart(("P006", 2, 30.00), ("P007", 1, 45.00))

        assert client.delete(f"/api/cart/{cart_id}/items").status_code == 204

        body = client.get(f"/api/cart/{cart_id}").json()
        assert body["items"] == []
        assert body["subtotal"] == 0.0
        assert body["total"] == 0.0

    def test_summary_with_multiple_items(self, client, new_cart):
        cart_id = new_cart(("P008", 2, 25.99), ("P009", 1, 15.50), ("P010", 3, 8.99))

        response = client.get(f"/api/cart/{cart_id}/summary")

        assert response.status_code == 200
        body = response.json()
        assert body["itemCount"] == 6
        assert body["uniqueItemCount"] == 3
        assert body["subtotal"] == 94.45
        assert body["discountAmount"] == 0.0
        assert body["tax"] == 8.26
        assert body["total"] == 102.71


class TestPromotions:

    def test_apply_promotion(self, client, new_cart):
        cart_id = new_cart(("P004", 1, 100.00))

        response = client.post(f"/api/cart/{cart_id}/promotions", json={"promoCode": "SAVE20"})

        assert response.status_code == 200
        body = response.json()
        assert len(body["appliedPromotions"]) == 1
        assert body["appliedPromotions"][0]["code"] == "SAVE20"
        assert body["appliedPromotions"][0]["discountType"] == "percentage"
        assert body["appliedPromotions"][0]["discountAmount"] == 20.0
        assert body["discountAmount"] == 20.0
        assert body["total"] == 80.0

    def test_invalid_promotion_code(self, client, new_cart):
        cart_id = new_cart(("P005", 1, 50.00))

        response = client.post(f"/api/cart/{cart_id}/promotions", json={"promoCode": "INVALID123"})

        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_PROMOTION_CODE"
        assert "promotion code is invalid" in response.json()["message"]
        body = client.get(f"/api/cart/{cart_id}").json()
        assert body["total"] == 50.0
        assert body["appliedPromotions"] == []

    def test_expired_and_future_promotions(self, client, new_cart):
        cart_id = new_cart(("P005", 1, 50.00))

        expired = client.post(f"/api/cart/{cart_id}/promotions", json={"promoCode": "EXPIRED21"})
        future = client.post(f"/api/cart/{cart_id}/promotions", json={"promoCode": "SEASONAL22"})

        assert expired.status_code == 400
        assert expired.json()["error"] == "PROMOTION_EXPIRED"
        assert future.status_code == 400
        assert future.json()["error"] == "PROMOTION_NOT_YET_ACTIVE"

    def test_non_combinable_promotion_blocks_second_code(self, client, new_cart):
        cart_id = new_cart(("P001", 1, 100.00))
        assert client.post(f"/api/cart/{cart_id}/promotions", json={"promoCode": "SALE30"}).status_code == 200

        response = client.post(f"/api/cart/{cart_id}/promotions", json={"promoCode": "SUMMER10"})

        assert response.status_code == 400
        assert response.json() == {
            "error": "PROMOTION_INCOMPATIBLE",
            "message": "This promotion cannot be combined with SALE30",
        }
        body = client.get(f"/api/cart/{cart_id}").json()
        assert [p["code"] for p in body["appliedPromotions"]] == ["SALE30"]
        assert body["total"] == 70.0

    def test_combined_promotions_are_additive(self, client, new_cart):
        cart_id = new_cart(("P001", 1, 200.00))

        client.post(f"/api/cart/{cart_id}/promotions", json={"promoCode": "SUMMER25"})
        body = client.post(f"/api/cart/{cart_id}/promotions", json={"promoCode": "FREESHIP10"}).json()

        assert [p["discountAmount"] for p in body["appliedPromotions"]] == [50.0, 10.0]
        assert body["discountAmount"] == 60.0
        assert body["total"] == 140.0

    def test_remove_only_product_with_promotion_applied(self, client, new_cart):
        cart_id = new_cart(("P001", 1, 80.00))
        client.post(f"/api/cart/{cart_id}/promotions", json={"promoCode": "FREESHIP10"})

        client.delete(f"/api/cart/{cart_id}/items/P001")

        body = client.get(f"/api/cart/{cart_id}").json()
        assert body["subtotal"] == 0.0
        assert body["discountAmount"] == 0.0
        assert body["total"] == 0.0

    def test_remove_promotion(self, client, new_cart):
        cart_id = new_cart(("P004", 1, 100.00))
        client.post(f"/api/cart/{cart_id}/promotions", json={"promoCode": "SAVE20"})

        response = client.delete(f"/api/cart/{cart_id}/promotions/SAVE20")

        assert response.status_code == 200
        assert response.json()["appliedPromotions"] == []
        assert response.json()["total"] == 100.0

    def test_remove_unapplied_promotion(self, client, new_cart):
        cart_id = new_cart()

        response = client.delete(f"/api/cart/{cart_id}/promotions/SAVE20")

        assert response.status_code == 404
        assert response.json()["error"] == "PROMOTION_NOT_APPLIED"

    def test_clear_promotions(self, client, new_cart):
        cart_id = new_cart(("P004", 1, 100.00))
        client.post(f"/api/cart/{cart_id}/promotions", json={"promoCode": "SAVE20"})
        client.post(f"/api/cart/{cart_id}/promotions", json={"promoCode": "SUMMER10"})

        response = client.delete(f"/api/cart/{cart_id}/promotions")

        assert response.status_code == 200
        assert response.json()["appliedPromotions"] == []


class TestPromotionCatalogRoutes:

    def test_get_active_promotion(self, client):
        response = client.get("/api/promotions/SUMMER25")

        assert response.status_code == 200
        body = response.json()
        assert body["code"] == "SUMMER25"
        assert body["discountType"] == "percentage"
        assert body["discountValue"] == 25.0
        assert body["active"] is True

    def test_get_expired_promotion(self, client):
        assert client.get("/api/promotions/EXPIRED21").json()["active"] is False

    def test_unresolvable_promotion_is_404(self, client):
        response = client.get("/api/promotions/INVALID123")

        assert response.status_code == 404
        assert response.json() == {
            "error": "PROMOTION_NOT_FOUND",
            "message": "Promotion INVALID123 not found",
        }

    def test_list_promotions_skips_unresolvable_codes(self, client):
        codes = {p["code"] for p in client.get("/api/promotions").json()}

        assert "SAVE20" in codes
        assert "INVALID123" not in codes


def test_cart_database_lifecycle():
    db = CartDatabase(default_currency="EUR")
    stored = db.create_cart(customer_id="c-9")

    assert db.get_cart(stored.cart_id) is stored
    assert stored.currency == "EUR"
    assert db.delete_cart(stored.cart_id) is True
    assert db.delete_cart(stored.cart_id) is False
    assert db.get_cart(stored.cart_id) is None
    assert not hasattr(db, "clear")


def test_item_routes_do_not_document_promotion_rejections(client):
    paths = client.get("/openapi.json").json()["paths"]
    item_route = paths["/api/cart/{cart_id}/items/{product_id}"]
    promotion_route = paths["/api/cart/{cart_id}/promotions"]

    assert "400" not in item_route["put"]["responses"]
    assert "400" not in item_route["delete"]["responses"]
    assert item_route["put"]["responses"]["404"]["description"] == "Cart or item not found"
    assert promotion_route["post"]["responses"]["400"]["description"] == "Promotion rejected"


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy", "service": "cart-service"}
