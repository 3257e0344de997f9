"""Integration tests for the cart endpoints via TestClient."""


def _add(client, product_id, quantity=1, headers=None, **body):
    payload = {"productId": product_id, "quantity": quantity}
    payload.update(body)
    return client.post("/api/cart", json=payload, headers=headers or {})


class TestGuestCart:
    def test_add_and_read(self, client, product_id):
        response = _add(client, product_id, 2, sessionId="sess-1")
        assert response.status_code == 201
        assert response.json()["quantity"] == 2
        assert response.json()["product"]["id"] == product_id
        assert response.headers["X-Invalidates"] == "cart:session:sess-1"

        cart = client.get("/api/cart", params={"sessionId": "sess-1"}).json()
        assert [item["productId"] for item in cart] == [product_id]

    def test_quantity_is_clamped(self, client, product_id):
        response = _add(client, product_id, 50, sessionId="sess-1")
        assert response.json()["quantity"] == 10

    def test_needs_a_session_or_token(self, client, product_id):
        response = _add(client, product_id)
        assert response.status_code == 400
        assert "owner" in response.json()["error"]

    def test_claiming_a_user_cart_needs_that_users_token(self, client, product_id, other_shopper):
        assert _add(client, product_id, userId="user-1").status_code == 401
        assert _add(client, product_id, userId="user-1", headers=other_shopper).status_code == 401

    def test_patch_quantity(self, client, product_id):
        item = _add(client, product_id, sessionId="sess-1").json()
        response = client.patch(f"/api/cart/{item['id']}", json={"quantity": 4})
        assert response.status_code == 200
        assert response.json()["quantity"] == 4

    def test_patch_delta_to_zero_removes(self, client, product_id):
        item = _add(client, product_id, sessionId="sess-1").json()
        response = client.patch(f"/api/cart/{item['id']}", json={"delta": -1})
        assert response.status_code == 200
        assert response.json() == {"id": item["id"], "removed": True}
        assert client.get("/api/cart", params={"sessionId": "sess-1"}).json() == []

    def test_patch_needs_exactly_one_change(self, client, product_id):
        item = _add(client, product_id, sessionId="sess-1").json()
        response = client.patch(f"/api/cart/{item['id']}", json={"quantity": 2, "delta": 1})
        assert response.status_code == 400

    def test_delete(self, client, product_id):
        item = _add(client, product_id, sessionId="sess-1").json()
        response = client.delete(f"/api/cart/{item['id']}")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_unknown_row(self, client):
        assert client.delete("/api/cart/missing").status_code == 404


class TestSignedInCart:
    def test_token_owner_gets_a_user_cart(self, client, product_id, shopper):
        response = _add(client, product_id, headers=shopper, sessionId="sess-1")
        assert response.json()["userId"] == "user-1"
        assert response.json()["sessionId"] is None
        assert response.headers["X-Invalidates"] == "cart:user:user-1"

        cart = client.get("/api/cart", headers=shopper).json()
        assert len(cart) == 1

    def test_other_shoppers_cannot_touch_the_row(self, client, product_id, shopper, other_shopper):
        item = _add(client, product_id, headers=shopper).json()

        assert client.patch(f"/api/cart/{item['id']}", json={"quantity": 2}, headers=other_shopper).status_code == 403
        assert client.delete(f"/api/cart/{item['id']}").status_code == 403

    def test_merge_session_cart(self, client, product_id, shopper):
        _add(client, product_id, 3, headers=shopper)
        _add(client, product_id, 4, sessionId="sess-1")

        response = client.post("/api/cart/merge", json={"sessionId": "sess-1"}, headers=shopper)

        assert response.status_code == 200
        (item,) = response.json()
        assert item["quantity"] == 7
        assert response.headers["X-Invalidates"] == "cart:session:sess-1, cart:user:user-1"
        assert client.get("/api/cart", params={"sessionId": "sess-1"}).json() == []

    def test_merge_requires_a_token(self, client):
        assert client.post("/api/cart/merge", json={"sessionId": "sess-1"}).status_code == 401
