from __future__ import annotations
from typing import Container
from uuid import uuid4


def generate_random_key(existing: Container[str] | None = None) -> str:
    """Generate a short unique key, avoiding any key already in `existing`."""
    while True:
        key = uuid4().hex[:8]
        if existing is None or key not in existing:
            return key
