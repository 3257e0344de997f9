"""Integration tests for addresses, wishlist and store administration via TestClient."""

ADDRESS = {
    "label": "Home",
    "fullName": "Lakshmi Pillai",
    "phone": "+91 94444 44444",
    "address": "7 Temple Street",
    "city": "Madurai",
    "state": "Tamil Nadu",
    "pincode": "625001",
}


class TestAddressesEndpoint:
    def test_add_and_list(self, client, shopper):
        response = client.post("/api/addresses", json=ADDRESS, headers=shopper)
        assert response.status_code == 201
        assert response.json()["isDefault"] is True
        assert response.headers["X-Invalidates"] == "addresses:user-1"

        assert len(client.get("/api/addresses", headers=shopper).json()) == 1

    def test_set_default(self, client, shopper):
        client.post("/api/addresses", json=ADDRESS, headers=shopper)
        office = client.post("/api/addresses", json=dict(ADDRESS, label="Office"), headers=shopper).json()

        response = client.post(f"/api/addresses/{office['id']}/default", headers=shopper)

        defaults = [a["id"] for a in response.json() if a["isDefault"]]
        assert defaults == [office["id"]]

    def test_update_and_delete(self, client, shopper):
        home = client.post("/api/addresses", json=ADDRESS, headers=shopper).json()

        updated = client.patch(f"/api/addresses/{home['id']}", json={"city": "Chennai"}, headers=shopper)
        assert updated.json()["city"] == "Chennai"

        assert client.delete(f"/api/addresses/{home['id']}", headers=shopper).status_code == 200
        assert client.get("/api/addresses", headers=shopper).json() == []

    def test_unknown_address_is_not_found(self, client, shopper):
        client.post("/api/addresses", json=ADDRESS, headers=shopper)

        assert client.patch("/api/addresses/missing", json={"city": "Chennai"}, headers=shopper).status_code == 404
        assert client.delete("/api/addresses/missing", headers=shopper).status_code == 404
        assert client.post("/api/addresses/missing/default", headers=shopper).status_code == 404

    def test_addresses_are_private(self, client, shopper, other_shopper):
        client.post("/api/addresses", json=ADDRESS, headers=shopper)
        assert client.get("/api/addresses", headers=other_shopper).json() == []
        assert client.get("/api/addresses").status_code == 401


class TestWishlistEndpoint:
    def test_add_list_remove(self, client, product_id, shopper):
        added = client.post("/api/wishlist", json={"productId": product_id}, headers=shopper)
        assert added.status_code == 201
        assert added.json()["productIds"] == [product_id]
        assert added.json()["products"][0]["id"] == product_id

        removed = client.delete(f"/api/wishlist/{product_id}", headers=shopper)
        assert removed.json() == {"productIds": [], "products": []}

    def test_empty_wishlist(self, client, shopper):
        assert client.get("/api/wishlist", headers=shopper).json() == {"productIds": [], "products": []}


class TestStoreAdministration:
    def test_register_and_deactivate(self, client, admin):
        response = client.post(
            "/api/admin/stores",
            json={"name": "Mysore Silks", "email": "hello@mysoresilks.example", "city": "Mysuru"},
            headers=admin,
        )
        assert response.status_code == 201
        store = response.json()
        assert store["isActive"] is True
        assert response.headers["X-Invalidates"] == "stores:*"

        assert client.delete(f"/api/admin/stores/{store['id']}", headers=admin).status_code == 200
        listed = client.get("/api/admin/stores", headers=admin).json()
        assert listed[0]["isActive"] is False

    def test_duplicate_email(self, client, admin):
        body = {"name": "Mysore Silks", "email": "hello@mysoresilks.example"}
        client.post("/api/admin/stores", json=body, headers=admin)
        response = client.post("/api/admin/stores", json=body, headers=admin)
        assert response.status_code == 400

    def test_admin_only(self, client, shopper, store_id, owner_of):
        assert client.get("/api/admin/stores", headers=shopper).status_code == 403
        assert client.get("/api/admin/stores", headers=owner_of(store_id)).status_code == 403
