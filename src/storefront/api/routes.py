"""FastAPI routes for shoppers: catalogue, cart, checkout, returns,
addresses and wishlist."""

import json

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.address.management import (
    AddAddress,
    RemoveAddress,
    SetDefaultAddress,
    UpdateAddress,
    address_book_for,
)
from storefront.api import invalidation
from storefront.api.auth import Principal, optional_principal, require_principal
from storefront.api.schemas import (
    AddressRequest,
    AddressResponse,
    AddToCartRequest,
    CartItemResponse,
    CreateOrderRequest,
    CreateReturnRequest,
    MergeCartRequest,
    OrderResponse,
    ProductResponse,
    RemovedCartItemResponse,
    ReturnResponse,
    StatusResponse,
    UpdateAddressRequest,
    UpdateCartItemRequest,
    WishlistRequest,
    WishlistResponse,
)
from storefront.cart.cart import CartItem
from storefront.cart.items import AddToCart, AdjustCartQuantity, RemoveFromCart, SetCartQuantity
from storefront.cart.lookup import cart_rows
from storefront.cart.merge import MergeSessionCart
from storefront.order.checkout import PlaceOrder
from storefront.order.lookup import find_order, orders_for_user
from storefront.order.order import Order
from storefront.product.lookup import find_product, search_catalogue
from storefront.product.product import Product
from storefront.returns.lookup import returns_for_user
from storefront.returns.return_request import ReturnRequest
from storefront.returns.submission import RequestReturn
from storefront.wishlist.management import AddToWishlist, RemoveFromWishlist, wishlist_for


def _cart_response(rows) -> list[CartItemResponse]:
    repo = current_domain.repository_for(Product)
    responses = []
    for row in rows:
        try:
            product = repo.get(row.product_id)
        except ObjectNotFoundError:
            product = None
        responses.append(CartItemResponse.from_row(row, product))
    return responses


def _owned_cart_row(item_id: str, principal: Principal | None) -> CartItem:
    """Rows in a user's cart can only be touched by that user."""
    row = current_domain.repository_for(CartItem).get(item_id)
    if row.user_id and (principal is None or principal.user_id != str(row.user_id)):
        raise HTTPException(status_code=403, detail="This cart item belongs to another customer")
    return row


# ---------------------------------------------------------------------------
# Catalogue Router
# ---------------------------------------------------------------------------
catalogue_router = APIRouter(prefix="/api/products", tags=["products"])


@catalogue_router.get("", response_model=list[ProductResponse])
async def list_products(
    search: str | None = None,
    fabric: str | None = None,
    occasion: str | None = None,
    min_price: str | None = Query(default=None, alias="minPrice"),
    max_price: str | None = Query(default=None, alias="maxPrice"),
) -> list[ProductResponse]:
    products = search_catalogue(
        search=search,
        fabric=fabric,
        occasion=occasion,
        min_price=min_price,
        max_price=max_price,
    )
    return [ProductResponse.from_product(p) for p in products]


@catalogue_router.get("/{reference}", response_model=ProductResponse)
async def get_product(reference: str) -> ProductResponse:
    return ProductResponse.from_product(find_product(reference))


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/api/cart", tags=["cart"])


@cart_router.get("", response_model=list[CartItemResponse])
async def get_cart(
    session_id: str | None = Query(default=None, alias="sessionId"),
    principal: Principal | None = Depends(optional_principal),
) -> list[CartItemResponse]:
    user_id = principal.user_id if principal else None
    return _cart_response(cart_rows(session_id=session_id, user_id=user_id))


@cart_router.post("", status_code=201, response_model=CartItemResponse)
async def add_to_cart(
    body: AddToCartRequest,
    response: Response,
    principal: Principal | None = Depends(optional_principal),
) -> CartItemResponse:
    if body.user_id and (principal is None or principal.user_id != body.user_id):
        raise HTTPException(status_code=401, detail="Sign in to add to this customer's cart")

    user_id = principal.user_id if principal else None
    command = AddToCart(
        product_id=body.product_id,
        quantity=body.quantity,
        session_id=None if user_id else body.session_id,
        user_id=user_id,
    )
    item_id = current_domain.process(command, asynchronous=False)

    row = current_domain.repository_for(CartItem).get(item_id)
    invalidation.announce(response, invalidation.cart_changed(session_id=row.session_id, user_id=row.user_id))
    return _cart_response([row])[0]


@cart_router.patch("/{item_id}", response_model=CartItemResponse | RemovedCartItemResponse)
async def update_cart_item(
    item_id: str,
    body: UpdateCartItemRequest,
    response: Response,
    principal: Principal | None = Depends(optional_principal),
):
    row = _owned_cart_row(item_id, principal)
    invalidation.announce(response, invalidation.cart_changed(session_id=row.session_id, user_id=row.user_id))

    if body.quantity is not None:
        current_domain.process(SetCartQuantity(cart_item_id=item_id, quantity=body.quantity), asynchronous=False)
    else:
        remaining = current_domain.process(
            AdjustCartQuantity(cart_item_id=item_id, delta=body.delta), asynchronous=False
        )
        if remaining is None:
            return RemovedCartItemResponse(id=item_id)

    row = current_domain.repository_for(CartItem).get(item_id)
    return _cart_response([row])[0]


@cart_router.delete("/{item_id}", response_model=StatusResponse)
async def remove_cart_item(
    item_id: str,
    response: Response,
    principal: Principal | None = Depends(optional_principal),
) -> StatusResponse:
    row = _owned_cart_row(item_id, principal)
    current_domain.process(RemoveFromCart(cart_item_id=item_id), asynchronous=False)
    invalidation.announce(response, invalidation.cart_changed(session_id=row.session_id, user_id=row.user_id))
    return StatusResponse()


@cart_router.post("/merge", response_model=list[CartItemResponse])
async def merge_cart(
    body: MergeCartRequest,
    response: Response,
    principal: Principal = Depends(require_principal),
) -> list[CartItemResponse]:
    current_domain.process(
        MergeSessionCart(session_id=body.session_id, user_id=principal.user_id),
        asynchronous=False,
    )
    invalidation.announce(
        response,
        invalidation.cart_changed(session_id=body.session_id) + invalidation.cart_changed(user_id=principal.user_id),
    )
    return _cart_response(cart_rows(user_id=principal.user_id))


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/api/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderResponse)
async def place_order(
    body: CreateOrderRequest,
    response: Response,
    principal: Principal | None = Depends(optional_principal),
) -> OrderResponse:
    items = body.items if isinstance(body.items, str) else json.dumps([item.model_dump() for item in body.items])
    command = PlaceOrder(
        items=items,
        customer_name=body.customer_name,
        email=body.email,
        phone=body.phone,
        address=body.address,
        city=body.city,
        state=body.state,
        pincode=body.pincode,
        total_amount=str(body.total_amount) if body.total_amount is not None else None,
        user_id=principal.user_id if principal else None,
        session_id=body.session_id,
    )
    order_id = current_domain.process(command, asynchronous=False)

    order = current_domain.repository_for(Order).get(order_id)
    invalidation.announce(response, invalidation.order_placed(order))
    return OrderResponse.from_order(order)


@order_router.get("", response_model=list[OrderResponse])
async def list_my_orders(principal: Principal = Depends(require_principal)) -> list[OrderResponse]:
    return [OrderResponse.from_order(o) for o in orders_for_user(principal.user_id)]


@order_router.get("/{reference}", response_model=OrderResponse)
async def get_order(
    reference: str,
    principal: Principal | None = Depends(optional_principal),
) -> OrderResponse:
    """Guest orders are readable by their id or tracking id alone."""
    order = find_order(reference)
    if order.user_id:
        allowed = principal is not None and (
            principal.user_id == str(order.user_id)
            or principal.is_admin
            or (principal.is_store_owner and principal.store_id == str(order.store_id))
        )
        if not allowed:
            raise HTTPException(status_code=403, detail="This order belongs to another customer")
    return OrderResponse.from_order(order)


# ---------------------------------------------------------------------------
# Return Router
# ---------------------------------------------------------------------------
return_router = APIRouter(prefix="/api/returns", tags=["returns"])


@return_router.post("", status_code=201, response_model=ReturnResponse)
async def request_return(
    body: CreateReturnRequest,
    response: Response,
    principal: Principal = Depends(require_principal),
) -> ReturnResponse:
    order = current_domain.repository_for(Order).get(body.order_id)
    if str(order.user_id) != principal.user_id:
        raise HTTPException(status_code=403, detail="Returns can only be requested for your own orders")

    command = RequestReturn(
        order_id=body.order_id,
        product_id=body.product_id,
        user_id=principal.user_id,
        quantity=body.quantity,
        reason=body.reason,
        refund_amount=str(body.refund_amount) if body.refund_amount is not None else None,
    )
    return_id = current_domain.process(command, asynchronous=False)

    return_request = current_domain.repository_for(ReturnRequest).get(return_id)
    invalidation.announce(response, invalidation.return_changed(return_request))
    return ReturnResponse.from_return(return_request)


@return_router.get("", response_model=list[ReturnResponse])
async def list_my_returns(principal: Principal = Depends(require_principal)) -> list[ReturnResponse]:
    return [ReturnResponse.from_return(r) for r in returns_for_user(principal.user_id)]


# ---------------------------------------------------------------------------
# Address Router
# ---------------------------------------------------------------------------
address_router = APIRouter(prefix="/api/addresses", tags=["addresses"])


def _addresses(user_id) -> list[AddressResponse]:
    book = address_book_for(user_id)
    return [AddressResponse.from_address(a) for a in book.addresses] if book else []


@address_router.get("", response_model=list[AddressResponse])
async def list_addresses(principal: Principal = Depends(require_principal)) -> list[AddressResponse]:
    return _addresses(principal.user_id)


@address_router.post("", status_code=201, response_model=AddressResponse)
async def add_address(
    body: AddressRequest,
    response: Response,
    principal: Principal = Depends(require_principal),
) -> AddressResponse:
    address_id = current_domain.process(
        AddAddress(user_id=principal.user_id, **body.model_dump()),
        asynchronous=False,
    )
    invalidation.announce(response, invalidation.user_resource_changed("addresses", principal.user_id))
    return next(a for a in _addresses(principal.user_id) if a.id == address_id)


@address_router.patch("/{address_id}", response_model=AddressResponse)
async def update_address(
    address_id: str,
    body: UpdateAddressRequest,
    response: Response,
    principal: Principal = Depends(require_principal),
) -> AddressResponse:
    current_domain.process(
        UpdateAddress(user_id=principal.user_id, address_id=address_id, **body.model_dump()),
        asynchronous=False,
    )
    invalidation.announce(response, invalidation.user_resource_changed("addresses", principal.user_id))
    return next(a for a in _addresses(principal.user_id) if a.id == address_id)


@address_router.delete("/{address_id}", response_model=StatusResponse)
async def remove_address(
    address_id: str,
    response: Response,
    principal: Principal = Depends(require_principal),
) -> StatusResponse:
    current_domain.process(RemoveAddress(user_id=principal.user_id, address_id=address_id), asynchronous=False)
    invalidation.announce(response, invalidation.user_resource_changed("addresses", principal.user_id))
    return StatusResponse()


@address_router.post("/{address_id}/default", response_model=list[AddressResponse])
async def set_default_address(
    address_id: str,
    response: Response,
    principal: Principal = Depends(require_principal),
) -> list[AddressResponse]:
    current_domain.process(SetDefaultAddress(user_id=principal.user_id, address_id=address_id), asynchronous=False)
    invalidation.announce(response, invalidation.user_resource_changed("addresses", principal.user_id))
    return _addresses(principal.user_id)


# ---------------------------------------------------------------------------
# Wishlist Router
# ---------------------------------------------------------------------------
wishlist_router = APIRouter(prefix="/api/wishlist", tags=["wishlist"])


def _wishlist(user_id) -> WishlistResponse:
    wishlist = wishlist_for(user_id)
    product_ids = [str(e.product_id) for e in wishlist.entries] if wishlist else []
    repo = current_domain.repository_for(Product)
    products = []
    for product_id in product_ids:
        try:
            products.append(ProductResponse.from_product(repo.get(product_id)))
        except ObjectNotFoundError:
            continue
    return WishlistResponse(product_ids=product_ids, products=products)


@wishlist_router.get("", response_model=WishlistResponse)
async def get_wishlist(principal: Principal = Depends(require_principal)) -> WishlistResponse:
    return _wishlist(principal.user_id)


@wishlist_router.post("", status_code=201, response_model=WishlistResponse)
async def add_to_wishlist(
    body: WishlistRequest,
    response: Response,
    principal: Principal = Depends(require_principal),
) -> WishlistResponse:
    current_domain.process(AddToWishlist(user_id=principal.user_id, product_id=body.product_id), asynchronous=False)
    invalidation.announce(response, invalidation.user_resource_changed("wishlist", principal.user_id))
    return _wishlist(principal.user_id)


@wishlist_router.delete("/{product_id}", response_model=WishlistResponse)
async def remove_from_wishlist(
    product_id: str,
    response: Response,
    principal: Principal = Depends(require_principal),
) -> WishlistResponse:
    current_domain.process(RemoveFromWishlist(user_id=principal.user_id, product_id=product_id), asynchronous=False)
    invalidation.announce(response, invalidation.user_resource_changed("wishlist", principal.user_id))
    return _wishlist(principal.user_id)
