"""Product read paths shared by handlers and API routes."""

from decimal import Decimal

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.product.product import Product
from storefront.shared.money import parse_amount

_SEARCHABLE = ("name", "description", "category", "fabric", "color")


def find_product(reference) -> Product:
    """Load a product by internal id or by its ``PROD-`` tracking id."""
    repo = current_domain.repository_for(Product)
    reference = str(reference)
    if reference.upper().startswith("PROD-"):
        product = repo._dao.query.filter(tracking_id=reference.upper()).all().first
        if product is None:
            raise ObjectNotFoundError(f"Product with tracking id {reference} does not exist")
        return product
    return repo.get(reference)


def products_for_store(store_id) -> list[Product]:
    repo = current_domain.repository_for(Product)
    products = repo._dao.query.filter(store_id=str(store_id)).limit(None).all().items
    return sorted(products, key=lambda p: p.created_at, reverse=True)


def _matches(product: Product, term: str) -> bool:
    return any(term in (getattr(product, field) or "").lower() for field in _SEARCHABLE)


def _is_filter(value) -> bool:
    return bool(value) and value.lower() != "all"


def search_catalogue(search=None, fabric=None, occasion=None, min_price=None, max_price=None) -> list[Product]:
    """Products a shopper can buy online, filtered like the storefront's sidebar.

    ``fabric`` and ``occasion`` are ignored when empty or ``"All"``.
    """
    repo = current_domain.repository_for(Product)
    products = [p for p in repo._dao.query.limit(None).all().items if p.is_sold_online]

    if search and search.strip():
        term = search.strip().lower()
        products = [p for p in products if _matches(p, term)]
    if _is_filter(fabric):
        products = [p for p in products if (p.fabric or "").lower() == fabric.lower()]
    if _is_filter(occasion):
        products = [p for p in products if (p.occasion or "").lower() == occasion.lower()]

    low = parse_amount(min_price, "min_price") if min_price not in (None, "") else None
    high = parse_amount(max_price, "max_price") if max_price not in (None, "") else None
    if low is not None:
        products = [p for p in products if Decimal(p.price) >= low]
    if high is not None:
        products = [p for p in products if Decimal(p.price) <= high]

    return sorted(products, key=lambda p: p.created_at, reverse=True)
