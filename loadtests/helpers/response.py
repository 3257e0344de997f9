"""Response error extraction for load test observability.

Parses storefront API error bodies into human-readable messages.
Every error is shaped ``{"error": ...}`` where the value is either a
message or a mapping of field name to a list of messages.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def extract_error_detail(response: Response) -> str:
    """Extract a human-readable error message from an API error response.

    Returns a compact string suitable for Locust failure messages and log lines.
    """
    try:
        body = response.json()
    except ValueError:
        # Not JSON, return raw text truncated
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if isinstance(body, dict) and "error" in body:
        error = body["error"]
        if isinstance(error, dict):
            parts = []
            for key, messages in error.items():
                if isinstance(messages, list):
                    messages = "; ".join(str(m) for m in messages)
                parts.append(f"{key}: {messages}")
            return " | ".join(parts)
        return str(error)

    return str(body)[:300]
