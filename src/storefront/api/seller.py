"""FastAPI routes for store owners and administrators.

Every inventory route is scoped to the caller's store. Records that belong
to another store answer 404, exactly as if they did not exist.
"""

import json

from fastapi import APIRouter, Depends, Response
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.api import invalidation
from storefront.api.auth import Principal, require_admin, require_store_owner
from storefront.api.schemas import (
    CreateProductRequest,
    CreateStoreRequest,
    OrderResponse,
    ProductResponse,
    ReallocateStockRequest,
    ReturnResponse,
    ReviewReturnRequest,
    StatusResponse,
    StoreResponse,
    UpdateOrderStatusRequest,
    UpdateProductRequest,
    UpdateRefundRequest,
)
from storefront.order.lifecycle import ChangeOrderStatus
from storefront.order.lookup import find_order, orders_for_store
from storefront.order.order import Order
from storefront.order.refunds import UpdateRefundStatus
from storefront.product.creation import CreateProduct
from storefront.product.details import UpdateProductDetails
from storefront.product.lookup import products_for_store
from storefront.product.product import Product
from storefront.product.reallocation import ReallocateStock
from storefront.product.removal import DeleteProduct
from storefront.returns.lookup import returns_for_store
from storefront.returns.return_request import ReturnRequest
from storefront.returns.review import ReviewReturn
from storefront.store.management import DeactivateStore, RegisterStore
from storefront.store.store import Store


def _scoped(aggregate_cls, identifier, principal: Principal):
    record = current_domain.repository_for(aggregate_cls).get(identifier)
    return _owned(record, identifier, principal)


def _owned(record, identifier, principal: Principal):
    if str(record.store_id) != principal.store_id:
        raise ObjectNotFoundError(f"{record.__class__.__name__} {identifier} does not exist")
    return record


def _scoped_order(reference, principal: Principal) -> Order:
    """An order of the caller's store, by internal id or ``ORD-`` tracking id."""
    return _owned(find_order(reference), reference, principal)


def _allocations(entries) -> str:
    return json.dumps([{"store_id": e.store_id, "quantity": e.quantity} for e in entries])


# ---------------------------------------------------------------------------
# Inventory Router (store owners)
# ---------------------------------------------------------------------------
inventory_router = APIRouter(prefix="/api/inventory", tags=["inventory"])


@inventory_router.get("/products", response_model=list[ProductResponse])
async def list_store_products(principal: Principal = Depends(require_store_owner)) -> list[ProductResponse]:
    return [ProductResponse.from_product(p) for p in products_for_store(principal.store_id)]


@inventory_router.post("/products", status_code=201, response_model=ProductResponse)
async def create_product(
    body: CreateProductRequest,
    response: Response,
    principal: Principal = Depends(require_store_owner),
) -> ProductResponse:
    command = CreateProduct(
        store_id=principal.store_id,
        name=body.name,
        description=body.description,
        price=str(body.price),
        images=json.dumps(body.images),
        video_url=body.video_url,
        fabric=body.fabric,
        color=body.color,
        occasion=body.occasion,
        category=body.category,
        channel=body.channel,
        total_stock=body.total_stock,
        online_stock=body.online_stock,
        store_inventory=_allocations(body.store_inventory),
    )
    product_id = current_domain.process(command, asynchronous=False)

    product = current_domain.repository_for(Product).get(product_id)
    invalidation.announce(response, invalidation.product_changed(product))
    return ProductResponse.from_product(product)


@inventory_router.patch("/products/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str,
    body: UpdateProductRequest,
    response: Response,
    principal: Principal = Depends(require_store_owner),
) -> ProductResponse:
    _scoped(Product, product_id, principal)

    changes = body.model_dump(exclude_none=True)
    if "price" in changes:
        changes["price"] = str(changes["price"])
    if "images" in changes:
        changes["images"] = json.dumps(changes["images"])
    current_domain.process(UpdateProductDetails(product_id=product_id, **changes), asynchronous=False)

    product = current_domain.repository_for(Product).get(product_id)
    invalidation.announce(response, invalidation.product_changed(product))
    return ProductResponse.from_product(product)


@inventory_router.put("/products/{product_id}/allocation", response_model=ProductResponse)
async def reallocate_product_stock(
    product_id: str,
    body: ReallocateStockRequest,
    response: Response,
    principal: Principal = Depends(require_store_owner),
) -> ProductResponse:
    _scoped(Product, product_id, principal)

    command = ReallocateStock(
        product_id=product_id,
        channel=body.channel,
        total_stock=body.total_stock,
        online_stock=body.online_stock,
        store_inventory=_allocations(body.store_inventory),
    )
    current_domain.process(command, asynchronous=False)

    product = current_domain.repository_for(Product).get(product_id)
    invalidation.announce(response, invalidation.product_changed(product))
    return ProductResponse.from_product(product)


@inventory_router.delete("/products/{product_id}", status_code=204, response_class=Response)
async def delete_product(product_id: str, principal: Principal = Depends(require_store_owner)) -> Response:
    product = _scoped(Product, product_id, principal)

    current_domain.process(DeleteProduct(product_id=product_id), asynchronous=False)

    response = Response(status_code=204)
    invalidation.announce(response, invalidation.product_deleted(product))
    return response


@inventory_router.get("/orders", response_model=list[OrderResponse])
async def list_store_orders(principal: Principal = Depends(require_store_owner)) -> list[OrderResponse]:
    return [OrderResponse.from_order(o) for o in orders_for_store(principal.store_id)]


@inventory_router.patch("/orders/{reference}/status", response_model=OrderResponse)
async def update_order_status(
    reference: str,
    body: UpdateOrderStatusRequest,
    response: Response,
    principal: Principal = Depends(require_store_owner),
) -> OrderResponse:
    order_id = str(_scoped_order(reference, principal).id)

    transition = current_domain.process(
        ChangeOrderStatus(order_id=order_id, status=body.status),
        asynchronous=False,
    )

    order = current_domain.repository_for(Order).get(order_id)
    if transition.changed:
        product_ids = [product_id for product_id, _ in transition.consumed]
        invalidation.announce(response, invalidation.order_status_changed(order, product_ids))
    return OrderResponse.from_order(order)


@inventory_router.patch("/orders/{reference}/refund", response_model=OrderResponse)
async def update_order_refund(
    reference: str,
    body: UpdateRefundRequest,
    response: Response,
    principal: Principal = Depends(require_store_owner),
) -> OrderResponse:
    order_id = str(_scoped_order(reference, principal).id)

    current_domain.process(
        UpdateRefundStatus(order_id=order_id, refund_status=body.refund_status, return_notes=body.return_notes),
        asynchronous=False,
    )

    order = current_domain.repository_for(Order).get(order_id)
    invalidation.announce(response, invalidation.order_changed(order))
    return OrderResponse.from_order(order)


@inventory_router.get("/returns", response_model=list[ReturnResponse])
async def list_store_returns(principal: Principal = Depends(require_store_owner)) -> list[ReturnResponse]:
    return [ReturnResponse.from_return(r) for r in returns_for_store(principal.store_id)]


@inventory_router.patch("/returns/{return_id}/status", response_model=ReturnResponse)
async def review_return(
    return_id: str,
    body: ReviewReturnRequest,
    response: Response,
    principal: Principal = Depends(require_store_owner),
) -> ReturnResponse:
    _scoped(ReturnRequest, return_id, principal)

    current_domain.process(ReviewReturn(return_id=return_id, status=body.status), asynchronous=False)

    return_request = current_domain.repository_for(ReturnRequest).get(return_id)
    invalidation.announce(response, invalidation.return_changed(return_request))
    return ReturnResponse.from_return(return_request)


@inventory_router.get("/stores", response_model=list[StoreResponse])
async def list_active_stores(principal: Principal = Depends(require_store_owner)) -> list[StoreResponse]:
    """Stores that can receive stock allocations."""
    stores = current_domain.repository_for(Store)._dao.query.filter(is_active=True).limit(None).all().items
    return [StoreResponse.from_store(s) for s in sorted(stores, key=lambda s: s.name)]


# ---------------------------------------------------------------------------
# Admin Router
# ---------------------------------------------------------------------------
admin_router = APIRouter(prefix="/api/admin", tags=["admin"])


@admin_router.get("/stores", response_model=list[StoreResponse])
async def list_stores(principal: Principal = Depends(require_admin)) -> list[StoreResponse]:
    stores = current_domain.repository_for(Store)._dao.query.limit(None).all().items
    return [StoreResponse.from_store(s) for s in sorted(stores, key=lambda s: s.name)]


@admin_router.post("/stores", status_code=201, response_model=StoreResponse)
async def register_store(
    body: CreateStoreRequest,
    response: Response,
    principal: Principal = Depends(require_admin),
) -> StoreResponse:
    store_id = current_domain.process(RegisterStore(**body.model_dump()), asynchronous=False)
    invalidation.announce(response, invalidation.stores_changed())
    return StoreResponse.from_store(current_domain.repository_for(Store).get(store_id))


@admin_router.delete("/stores/{store_id}", response_model=StatusResponse)
async def deactivate_store(
    store_id: str,
    response: Response,
    principal: Principal = Depends(require_admin),
) -> StatusResponse:
    current_domain.process(DeactivateStore(store_id=store_id), asynchronous=False)
    invalidation.announce(response, invalidation.stores_changed())
    return StatusResponse()
