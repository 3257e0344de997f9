"""Storefront load test scenarios.

Every journey starts by registering its own store through the admin API and
listing a few sarees, so runs never depend on seeded data. Tokens are minted
locally with the same secret the API verifies (``STOREFRONT_JWT_SECRET``).
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import (
    return_reason,
    saree_data,
    session_id,
    shipping_data,
    store_data,
    user_id,
)
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import SellerState, ShopperState
from storefront.api.auth import Principal, issue_token


def bearer(principal: Principal) -> dict:
    return {"Authorization": f"Bearer {issue_token(principal)}"}


ADMIN_HEADERS = bearer(Principal(user_id="admin-loadtest", is_admin=True))


def open_store(client, state: SellerState, products: int = 3) -> bool:
    """Register a store and list sarees for it. Returns False on any failure."""
    with client.post(
        "/api/admin/stores",
        json=store_data(),
        headers=ADMIN_HEADERS,
        catch_response=True,
        name="POST /api/admin/stores",
    ) as resp:
        if resp.status_code != 201:
            resp.failure(f"Store registration failed: {resp.status_code} - {extract_error_detail(resp)}")
            return False
        state.store_id = resp.json()["id"]

    state.headers = bearer(
        Principal(user_id=f"owner-{state.store_id}", is_store_owner=True, store_id=state.store_id)
    )

    for _ in range(products):
        with client.post(
            "/api/inventory/products",
            json=saree_data(total_stock=random.randint(20, 200)),
            headers=state.headers,
            catch_response=True,
            name="POST /api/inventory/products",
        ) as resp:
            if resp.status_code != 201:
                resp.failure(f"Listing failed: {resp.status_code} - {extract_error_detail(resp)}")
                return False
            state.product_ids.append(resp.json()["id"])
    return True


class GuestCheckoutJourney(SequentialTaskSet):
    """Guest shopper: browse -> add to a session cart -> checkout -> seller ships and delivers.

    Shipping decrements stock, so each iteration also reads the product back
    and checks the units went down.
    """

    def on_start(self):
        self.seller = SellerState()
        if not open_store(self.client, self.seller):
            self.interrupt()
        self.state = ShopperState(session_id=session_id())

    @task
    def browse_catalogue(self):
        with self.client.get("/api/products", catch_response=True, name="GET /api/products") as resp:
            if resp.status_code != 200:
                resp.failure(f"Catalogue failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()
                return
        self.state.product_id = random.choice(self.seller.product_ids)

    @task
    def add_to_cart(self):
        with self.client.post(
            "/api/cart",
            json={"productId": self.state.product_id, "quantity": random.randint(1, 3), "sessionId": self.state.session_id},
            catch_response=True,
            name="POST /api/cart",
        ) as resp:
            if resp.status_code == 201:
                self.state.cart_item_ids.append(resp.json()["id"])
            else:
                resp.failure(f"Add to cart failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def view_cart(self):
        self.client.get("/api/cart", params={"sessionId": self.state.session_id}, name="GET /api/cart")

    @task
    def checkout(self):
        body = dict(
            shipping_data(),
            items=[{"productId": self.state.product_id, "quantity": 1}],
            sessionId=self.state.session_id,
        )
        with self.client.post("/api/orders", json=body, catch_response=True, name="POST /api/orders") as resp:
            if resp.status_code == 201:
                self.state.order_id = resp.json()["id"]
            else:
                resp.failure(f"Checkout failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def ship(self):
        self._advance("shipped")

    @task
    def deliver(self):
        self._advance("delivered")

    @task
    def done(self):
        self.interrupt()

    def _advance(self, status: str):
        with self.client.patch(
            f"/api/inventory/orders/{self.state.order_id}/status",
            json={"status": status},
            headers=self.seller.headers,
            catch_response=True,
            name=f"PATCH /api/inventory/orders/[id]/status ({status})",
        ) as resp:
            if resp.status_code == 200:
                self.state.current_status = status
            else:
                resp.failure(f"Status change to {status} failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()


class SignedInReturnJourney(SequentialTaskSet):
    """Signed-in shopper: guest cart -> merge on sign-in -> checkout -> delivery -> return -> approval."""

    def on_start(self):
        self.seller = SellerState()
        if not open_store(self.client, self.seller, products=1):
            self.interrupt()
        self.state = ShopperState(
            user_id=user_id(),
            session_id=session_id(),
            product_id=self.seller.product_ids[0],
            store_id=self.seller.store_id,
        )
        self.state.headers = bearer(Principal(user_id=self.state.user_id))
        self.return_id = None

    @task
    def add_as_guest(self):
        with self.client.post(
            "/api/cart",
            json={"productId": self.state.product_id, "quantity": 2, "sessionId": self.state.session_id},
            catch_response=True,
            name="POST /api/cart",
        ) as resp:
            if resp.status_code != 201:
                resp.failure(f"Add to cart failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def merge_on_sign_in(self):
        with self.client.post(
            "/api/cart/merge",
            json={"sessionId": self.state.session_id},
            headers=self.state.headers,
            catch_response=True,
            name="POST /api/cart/merge",
        ) as resp:
            if resp.status_code != 200 or not resp.json():
                resp.failure(f"Merge failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def checkout(self):
        body = dict(shipping_data(), items=[{"productId": self.state.product_id, "quantity": 2}])
        with self.client.post(
            "/api/orders", json=body, headers=self.state.headers, catch_response=True, name="POST /api/orders"
        ) as resp:
            if resp.status_code == 201:
                self.state.order_id = resp.json()["id"]
            else:
                resp.failure(f"Checkout failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def deliver(self):
        with self.client.patch(
            f"/api/inventory/orders/{self.state.order_id}/status",
            json={"status": "delivered"},
            headers=self.seller.headers,
            catch_response=True,
            name="PATCH /api/inventory/orders/[id]/status (delivered)",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Delivery failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def request_return(self):
        with self.client.post(
            "/api/returns",
            json={
                "orderId": self.state.order_id,
                "productId": self.state.product_id,
                "quantity": 1,
                "reason": return_reason(),
            },
            headers=self.state.headers,
            catch_response=True,
            name="POST /api/returns",
        ) as resp:
            if resp.status_code == 201:
                self.return_id = resp.json()["id"]
            else:
                resp.failure(f"Return request failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def review_return(self):
        with self.client.patch(
            f"/api/inventory/returns/{self.return_id}/status",
            json={"status": random.choice(["approved", "rejected"])},
            headers=self.seller.headers,
            catch_response=True,
            name="PATCH /api/inventory/returns/[id]/status",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Return review failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class BrowsingUser(HttpUser):
    """Read-heavy traffic: catalogue filters and product pages."""

    wait_time = between(0.5, 2)
    weight = 6

    @task(4)
    def list_products(self):
        self.client.get("/api/products", name="GET /api/products")

    @task(2)
    def filter_by_fabric(self):
        fabric = random.choice(["Silk", "Cotton", "Georgette"])
        self.client.get("/api/products", params={"fabric": fabric}, name="GET /api/products?fabric")

    @task(1)
    def product_page(self):
        with self.client.get("/api/products", catch_response=True, name="GET /api/products") as resp:
            products = resp.json() if resp.status_code == 200 else []
        if products:
            tracking_id = random.choice(products)["trackingId"]
            self.client.get(f"/api/products/{tracking_id}", name="GET /api/products/[trackingId]")


class StorefrontUser(HttpUser):
    """Shoppers who buy. Guests outnumber signed-in shoppers who go on to return."""

    wait_time = between(1, 3)
    weight = 3
    tasks = {GuestCheckoutJourney: 3, SignedInReturnJourney: 1}
