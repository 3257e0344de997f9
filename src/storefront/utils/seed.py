"""Demo data: one flagship store and a handful of sarees.

Goes through the same commands the API uses, so seeded products carry
valid allocations and tracking ids.
"""

import json

from protean.domain import Domain

from storefront.product.creation import CreateProduct
from storefront.product.product import Product
from storefront.store.management import RegisterStore
from storefront.store.store import Store

FLAGSHIP = {
    "name": "Kanchi Weaves Flagship",
    "email": "flagship@kanchiweaves.example",
    "phone": "+91 44 2222 0000",
    "city": "Chennai",
}

SAREES = [
    {
        "name": "Royal Burgundy Silk Saree",
        "description": "Exquisite handwoven silk saree with intricate golden zari work. "
        "Perfect for weddings and special occasions.",
        "price": "12500.00",
        "images": ["https://placehold.co/600x800/8b0000/ffffff?text=Burgundy+Silk+Saree"],
        "fabric": "Silk",
        "color": "Burgundy",
        "occasion": "Wedding",
        "category": "Banarasi",
        "channel": "online",
        "total_stock": 5,
    },
    {
        "name": "Emerald Kanjivaram Saree",
        "description": "Traditional Kanjivaram silk saree in rich emerald green with temple border "
        "design and contrasting pallu.",
        "price": "18000.00",
        "images": ["https://placehold.co/600x800/059669/ffffff?text=Emerald+Kanjivaram"],
        "fabric": "Silk",
        "color": "Green",
        "occasion": "Wedding",
        "category": "Kanjivaram",
        "channel": "both",
        "total_stock": 6,
        "online_stock": 3,
        "flagship_stock": 3,
    },
    {
        "name": "Banarasi Blue Elegance",
        "description": "Banarasi silk saree in royal blue with silver zari weaving and floral patterns.",
        "price": "15200.00",
        "images": ["https://placehold.co/600x800/1e40af/ffffff?text=Royal+Blue+Banarasi"],
        "fabric": "Banarasi",
        "color": "Blue",
        "occasion": "Festive",
        "category": "Banarasi Collection",
        "channel": "online",
        "total_stock": 4,
    },
    {
        "name": "Ivory Chanderi Cotton",
        "description": "Lightweight Chanderi cotton with a delicate gold border for daytime wear.",
        "price": "4200.00",
        "images": ["https://placehold.co/600x800/f5f5dc/333333?text=Ivory+Chanderi"],
        "fabric": "Cotton",
        "color": "Ivory",
        "occasion": "Casual",
        "category": "Chanderi",
        "channel": "physical",
        "total_stock": 8,
        "flagship_stock": 8,
    },
]


def seed_catalogue(domain: Domain) -> int:
    """Create the flagship store and its sarees unless products already exist.

    Returns the number of products created.
    """
    with domain.domain_context():
        if domain.repository_for(Product)._dao.query.all().items:
            return 0

        existing = domain.repository_for(Store)._dao.query.filter(email=FLAGSHIP["email"]).all().first
        store_id = (
            str(existing.id) if existing else domain.process(RegisterStore(**FLAGSHIP), asynchronous=False)
        )

        for saree in SAREES:
            details = dict(saree)
            flagship_stock = details.pop("flagship_stock", 0)
            allocations = [{"store_id": store_id, "quantity": flagship_stock}] if flagship_stock else []
            domain.process(
                CreateProduct(
                    store_id=store_id,
                    images=json.dumps(details.pop("images")),
                    store_inventory=json.dumps(allocations),
                    **details,
                ),
                asynchronous=False,
            )
        return len(SAREES)
