"""Externally stable identifiers shown to customers and sellers."""

import secrets
import string
import time

_ALPHABET = string.ascii_uppercase + string.digits


def _random_block(length: int) -> str:
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))


def _base36(number: int) -> str:
    digits = string.digits + string.ascii_uppercase
    encoded = ""
    while number:
        number, remainder = divmod(number, 36)
        encoded = digits[remainder] + encoded
    return encoded or "0"


def product_tracking_id() -> str:
    """``PROD-<base36 millis>-<6 random>``, e.g. ``PROD-LXK2Q9ZA-7HQ2MB``."""
    return f"PROD-{_base36(int(time.time() * 1000))}-{_random_block(6)}"


def order_tracking_id() -> str:
    """``ORD-XXXXX-XXXXX``."""
    return f"ORD-{_random_block(5)}-{_random_block(5)}"
