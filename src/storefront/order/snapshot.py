"""Versioned schema for the line items an order captures at checkout.

Lines are validated when the order is written, not parsed ad hoc when it is
read. Each line records the schema version it was written with so that
older orders stay readable if the shape ever changes.
"""

import json
from collections.abc import Mapping
from dataclasses import asdict, dataclass

from protean.exceptions import ValidationError

from storefront.shared.money import line_total, normalize_amount

ITEMS_SCHEMA_VERSION = 1
SUPPORTED_VERSIONS = frozenset({1})


@dataclass(frozen=True)
class LineSnapshot:
    product_id: str
    product_name: str
    quantity: int
    unit_price: str
    tracking_id: str | None = None
    schema_version: int = ITEMS_SCHEMA_VERSION

    def __post_init__(self):
        if self.schema_version not in SUPPORTED_VERSIONS:
            raise ValidationError({"items": [f"Unsupported items schema version {self.schema_version}"]})
        if not self.product_id or not self.product_name:
            raise ValidationError({"items": ["Each line needs a product id and name"]})
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int) or self.quantity < 1:
            raise ValidationError({"items": [f"Invalid quantity {self.quantity!r} for {self.product_id}"]})
        object.__setattr__(self, "unit_price", normalize_amount(self.unit_price, "items"))

    @property
    def subtotal(self) -> str:
        return line_total(self.unit_price, self.quantity)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping) -> "LineSnapshot":
        return cls(
            product_id=str(data["product_id"]),
            product_name=data["product_name"],
            quantity=data["quantity"],
            unit_price=data["unit_price"],
            tracking_id=data.get("tracking_id"),
            schema_version=data.get("schema_version", ITEMS_SCHEMA_VERSION),
        )


def dump_lines(lines) -> str:
    return json.dumps([line.to_dict() for line in lines])


def load_lines(raw) -> list[LineSnapshot]:
    data = json.loads(raw) if isinstance(raw, str) else raw
    return [LineSnapshot.from_dict(entry) for entry in data]


def parse_requested_items(raw) -> list[tuple[str, int]]:
    """Decode the items a shopper asks to buy: ``[{productId, quantity}, ...]``.

    Accepts a JSON string or an already decoded list, camelCase or
    snake_case keys. Returns ``(product reference, quantity)`` pairs.
    """
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            raise ValidationError({"items": ["Items must be a JSON array"]})

    if not isinstance(raw, list) or not raw:
        raise ValidationError({"items": ["An order needs at least one item"]})

    requested = []
    for entry in raw:
        if not isinstance(entry, Mapping):
            raise ValidationError({"items": ["Each item must be an object"]})
        product_id = entry.get("product_id", entry.get("productId"))
        quantity = entry.get("quantity", 1)
        if not product_id:
            raise ValidationError({"items": ["Each item needs a productId"]})
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValidationError({"items": [f"Invalid quantity {quantity!r} for {product_id}"]})
        requested.append((str(product_id), quantity))
    return requested
