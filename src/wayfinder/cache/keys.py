"""Redis key naming conventions for the wayfinder cache layer."""
from __future__ import annotations

import hashlib
from typing import Optional

_PREFIX = "wf"


# ── Nominatim ────────────────────────────────────────────────────────────

def nominatim_reverse(lat: float, lon: float, zoom: int, layer: Optional[str]) -> str:
    """Key for a reverse lookup at an exact (6-decimal) coordinate."""
    return f"{_PREFIX}:nominatim:reverse:{lat:.6f},{lon:.6f}:z{zoom}:{layer or '-'}"


def nominatim_search(query: str) -> str:
    """Key for a forward lookup (normalized query text)."""
    norm = " ".join(query.lower().split())
    h = hashlib.sha256(norm.encode()).hexdigest()[:16]
    return f"{_PREFIX}:nominatim:search:{h}"
