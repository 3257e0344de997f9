"""Faker-based data generators for Locust load test scenarios.

Each generator produces camelCase payloads that match the API's Pydantic
request schemas and pass the domain's validation rules (positive prices,
allocations that add up to the total stock, non-empty shipping fields).
"""

import random
import uuid

from faker import Faker

fake = Faker("en_IN")

FABRICS = ["Silk", "Cotton", "Georgette", "Chiffon", "Linen", "Organza"]
COLORS = ["Red", "Maroon", "Ivory", "Mustard", "Teal", "Peacock Blue"]
OCCASIONS = ["Wedding", "Festive", "Casual", "Party", "Office"]
CATEGORIES = ["Kanjivaram", "Banarasi", "Chanderi", "Paithani", "Patola"]


def session_id() -> str:
    """Guest cart session ids like 'sess-lt-a1b2c3d4'."""
    return f"sess-lt-{uuid.uuid4().hex[:8]}"


def user_id() -> str:
    return f"user-lt-{uuid.uuid4().hex[:8]}"


def store_data() -> dict:
    """CreateStoreRequest payload. Emails carry a random suffix to stay unique."""
    name = f"{fake.last_name()} {random.choice(['Silks', 'Weaves', 'Handlooms'])}"
    return {
        "name": name,
        "email": f"store.{uuid.uuid4().hex[:8]}@example.com",
        "phone": fake.phone_number(),
        "city": fake.city()[:100],
    }


def saree_data(total_stock: int = 50) -> dict:
    """CreateProductRequest payload for an online-only listing."""
    category = random.choice(CATEGORIES)
    return {
        "name": f"{random.choice(COLORS)} {category} Saree",
        "description": fake.paragraph(nb_sentences=2),
        "price": f"{random.randint(1500, 40000)}.00",
        "images": [f"https://cdn.example.com/sarees/{uuid.uuid4().hex}.jpg"],
        "fabric": random.choice(FABRICS),
        "color": random.choice(COLORS),
        "occasion": random.choice(OCCASIONS),
        "category": category,
        "channel": "online",
        "totalStock": total_stock,
    }


def shipping_data() -> dict:
    """Shipping fields of CreateOrderRequest."""
    return {
        "customerName": fake.name()[:100],
        "email": f"{fake.user_name()[:20]}.{uuid.uuid4().hex[:4]}@example.com",
        "phone": fake.phone_number(),
        "address": fake.street_address()[:255],
        "city": fake.city()[:100],
        "state": fake.state(),
        "pincode": fake.postcode(),
    }


def return_reason() -> str:
    return random.choice(["Colour differs from photos", "Torn pallu", "Wrong saree delivered", "Zari is faded"])
