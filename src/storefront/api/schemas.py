"""Pydantic request/response schemas for the storefront API.

These are the external contracts: camelCase on the wire (snake_case is
accepted on input too), kept separate from the internal Protean commands.
Money is always a decimal string in responses.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

Amount = str | int | float


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------
class StatusResponse(CamelModel):
    status: str = "ok"


class StoreAllocationSchema(CamelModel):
    store_id: str
    quantity: int
    channel: str = "physical"


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
class CreateProductRequest(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    price: Amount
    images: list[str] = Field(default_factory=list)
    video_url: str | None = None
    fabric: str
    color: str
    occasion: str
    category: str
    channel: str = "online"
    total_stock: int
    online_stock: int | None = None
    store_inventory: list[StoreAllocationSchema] = Field(default_factory=list)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Kanjivaram Silk Saree",
                    "description": "Handwoven pure silk with zari border",
                    "price": "12500.00",
                    "images": ["https://cdn.example.com/sarees/kanjivaram-red.jpg"],
                    "fabric": "Silk",
                    "color": "Red",
                    "occasion": "Wedding",
                    "category": "Kanjivaram",
                    "channel": "both",
                    "totalStock": 20,
                    "onlineStock": 8,
                    "storeInventory": [{"storeId": "store-chennai", "quantity": 12}],
                }
            ]
        }
    }


class UpdateProductRequest(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    price: Amount | None = None
    images: list[str] | None = None
    video_url: str | None = None
    fabric: str | None = None
    color: str | None = None
    occasion: str | None = None
    category: str | None = None


class ReallocateStockRequest(CamelModel):
    channel: str
    total_stock: int
    online_stock: int | None = None
    store_inventory: list[StoreAllocationSchema] = Field(default_factory=list)


class ProductResponse(CamelModel):
    id: str
    tracking_id: str
    store_id: str
    name: str
    description: str | None = None
    price: str
    images: list[str]
    video_url: str | None = None
    fabric: str
    color: str
    occasion: str
    category: str
    channel: str
    total_stock: int
    online_stock: int
    in_stock: int
    store_inventory: list[StoreAllocationSchema]
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_product(cls, product) -> "ProductResponse":
        return cls(
            id=str(product.id),
            tracking_id=product.tracking_id,
            store_id=str(product.store_id),
            name=product.name,
            description=product.description,
            price=product.price,
            images=product.image_urls,
            video_url=product.video_url,
            fabric=product.fabric,
            color=product.color,
            occasion=product.occasion,
            category=product.category,
            channel=product.channel,
            total_stock=product.total_stock,
            online_stock=product.online_stock,
            in_stock=product.in_stock,
            store_inventory=[
                StoreAllocationSchema(store_id=str(a.store_id), quantity=a.quantity, channel=a.channel)
                for a in product.store_inventory
            ],
            created_at=product.created_at,
            updated_at=product.updated_at,
        )


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddToCartRequest(CamelModel):
    product_id: str
    quantity: int = 1
    session_id: str | None = None
    user_id: str | None = None


class UpdateCartItemRequest(CamelModel):
    """Either an absolute ``quantity`` or a relative ``delta``."""

    quantity: int | None = None
    delta: int | None = None
    session_id: str | None = None

    @model_validator(mode="after")
    def exactly_one_change(self):
        if (self.quantity is None) == (self.delta is None):
            raise ValueError("Send either quantity or delta")
        return self


class MergeCartRequest(CamelModel):
    session_id: str


class CartItemResponse(CamelModel):
    id: str
    product_id: str
    quantity: int
    session_id: str | None = None
    user_id: str | None = None
    product: ProductResponse | None = None

    @classmethod
    def from_row(cls, row, product=None) -> "CartItemResponse":
        return cls(
            id=str(row.id),
            product_id=str(row.product_id),
            quantity=row.quantity,
            session_id=row.session_id,
            user_id=str(row.user_id) if row.user_id else None,
            product=ProductResponse.from_product(product) if product is not None else None,
        )


class RemovedCartItemResponse(CamelModel):
    id: str
    removed: bool = True


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class OrderItemRequest(CamelModel):
    product_id: str
    quantity: int = 1


class CreateOrderRequest(CamelModel):
    items: list[OrderItemRequest] | str
    customer_name: str
    email: str
    phone: str
    address: str
    city: str
    state: str
    pincode: str
    total_amount: Amount | None = None
    session_id: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": '[{"productId": "PROD-LXK2Q9ZA-7HQ2MB", "quantity": 1}]',
                    "customerName": "Ananya Rao",
                    "email": "ananya@example.com",
                    "phone": "+91 98450 00000",
                    "address": "12 Temple Street",
                    "city": "Bengaluru",
                    "state": "Karnataka",
                    "pincode": "560001",
                    "totalAmount": "12500.00",
                    "sessionId": "sess-3f9c",
                }
            ]
        }
    }


class UpdateOrderStatusRequest(CamelModel):
    status: str


class UpdateRefundRequest(CamelModel):
    refund_status: str
    return_notes: str | None = None


class OrderLineSchema(CamelModel):
    product_id: str
    tracking_id: str | None = None
    product_name: str
    quantity: int
    price: str
    schema_version: int


class OrderResponse(CamelModel):
    id: str
    tracking_id: str
    user_id: str | None = None
    store_id: str | None = None
    status: str
    items: list[OrderLineSchema]
    total_amount: str
    customer_name: str
    email: str
    phone: str
    address: str
    city: str
    state: str
    pincode: str
    channel: str | None = None
    return_notes: str | None = None
    refund_status: str
    created_at: datetime | None = None
    shipped_at: datetime | None = None
    delivered_at: datetime | None = None

    @classmethod
    def from_order(cls, order) -> "OrderResponse":
        shipping = order.shipping
        return cls(
            id=str(order.id),
            tracking_id=order.tracking_id,
            user_id=str(order.user_id) if order.user_id else None,
            store_id=str(order.store_id) if order.store_id else None,
            status=order.status,
            items=[
                OrderLineSchema(
                    product_id=line.product_id,
                    tracking_id=line.tracking_id,
                    product_name=line.product_name,
                    quantity=line.quantity,
                    price=line.unit_price,
                    schema_version=line.schema_version,
                )
                for line in order.items_snapshot()
            ],
            total_amount=order.total_amount,
            customer_name=shipping.customer_name,
            email=shipping.email,
            phone=shipping.phone,
            address=shipping.address,
            city=shipping.city,
            state=shipping.state,
            pincode=shipping.pincode,
            channel=order.channel,
            return_notes=order.return_notes,
            refund_status=order.refund_status,
            created_at=order.created_at,
            shipped_at=order.shipped_at,
            delivered_at=order.delivered_at,
        )


# ---------------------------------------------------------------------------
# Returns
# ---------------------------------------------------------------------------
class CreateReturnRequest(CamelModel):
    order_id: str
    product_id: str
    quantity: int
    reason: str
    refund_amount: Amount | None = None


class ReviewReturnRequest(CamelModel):
    status: str


class ReturnResponse(CamelModel):
    id: str
    order_id: str
    product_id: str
    user_id: str | None = None
    store_id: str | None = None
    quantity: int
    reason: str
    refund_amount: str
    status: str
    requested_at: datetime | None = None
    approved_at: datetime | None = None
    rejected_at: datetime | None = None

    @classmethod
    def from_return(cls, return_request) -> "ReturnResponse":
        return cls(
            id=str(return_request.id),
            order_id=str(return_request.order_id),
            product_id=str(return_request.product_id),
            user_id=str(return_request.user_id) if return_request.user_id else None,
            store_id=str(return_request.store_id) if return_request.store_id else None,
            quantity=return_request.quantity,
            reason=return_request.reason,
            refund_amount=return_request.refund_amount,
            status=return_request.status,
            requested_at=return_request.requested_at,
            approved_at=return_request.approved_at,
            rejected_at=return_request.rejected_at,
        )


# ---------------------------------------------------------------------------
# Addresses and wishlist
# ---------------------------------------------------------------------------
class AddressRequest(CamelModel):
    label: str = "Home"
    full_name: str
    phone: str
    address: str
    city: str
    state: str
    pincode: str
    is_default: bool = False


class UpdateAddressRequest(CamelModel):
    label: str | None = None
    full_name: str | None = None
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    pincode: str | None = None


class AddressResponse(CamelModel):
    id: str
    label: str | None = None
    full_name: str
    phone: str
    address: str
    city: str
    state: str
    pincode: str
    is_default: bool

    @classmethod
    def from_address(cls, address) -> "AddressResponse":
        return cls(
            id=str(address.id),
            label=address.label,
            full_name=address.full_name,
            phone=address.phone,
            address=address.address,
            city=address.city,
            state=address.state,
            pincode=address.pincode,
            is_default=bool(address.is_default),
        )


class WishlistRequest(CamelModel):
    product_id: str


class WishlistResponse(CamelModel):
    product_ids: list[str]
    products: list[ProductResponse]


# ---------------------------------------------------------------------------
# Stores
# ---------------------------------------------------------------------------
class CreateStoreRequest(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    email: str
    owner_id: str | None = None
    phone: str | None = None
    city: str | None = None


class StoreResponse(CamelModel):
    id: str
    name: str
    email: str
    phone: str | None = None
    city: str | None = None
    owner_id: str | None = None
    is_active: bool

    @classmethod
    def from_store(cls, store) -> "StoreResponse":
        return cls(
            id=str(store.id),
            name=store.name,
            email=store.email,
            phone=store.phone,
            city=store.city,
            owner_id=str(store.owner_id) if store.owner_id else None,
            is_active=bool(store.is_active),
        )
