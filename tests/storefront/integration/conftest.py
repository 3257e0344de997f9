import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from storefront.api import ROUTERS
from storefront.api.auth import Principal, issue_token
from storefront.api.errors import register_exception_handlers


@pytest.fixture()
def client():
    app = FastAPI()
    register_exception_handlers(app)
    for router in ROUTERS:
        app.include_router(router)
    return TestClient(app)


def bearer(user_id="user-1", **claims):
    return {"Authorization": f"Bearer {issue_token(Principal(user_id=user_id, **claims))}"}


@pytest.fixture()
def shopper():
    return bearer("user-1")


@pytest.fixture()
def other_shopper():
    return bearer("user-2")


@pytest.fixture()
def admin():
    return bearer("admin-1", is_admin=True)


@pytest.fixture()
def owner_of():
    """Headers for the owner of a given store."""

    def _headers(store_id):
        return bearer(f"owner-{store_id}", is_store_owner=True, store_id=store_id)

    return _headers
