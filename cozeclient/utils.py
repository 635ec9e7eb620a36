"""Small helpers shared by the client."""

from __future__ import annotations

import json
import secrets
from typing import Any


def bytes_to_hex(data: bytes) -> str:
    """Return the lower-case hexadecimal form of ``data``."""
    return bytes(data).hex()


def generate_random_string(length: int) -> str:
    """Return a random hex string built from ``length // 2`` random bytes."""
    return bytes_to_hex(secrets.token_bytes(length // 2))


def must_to_json(obj: Any) -> str:
    """Serialise ``obj`` compactly, falling back to ``"{}"`` if it cannot be."""
    try:
        return json.dumps(obj, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError):
        return "{}"