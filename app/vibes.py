"""Closed set of vibe categories a plan option may carry."""
from __future__ import annotations

from typing import Dict, FrozenSet

UNKNOWN_VIBE = ""

SUPPORTED_VIBES: FrozenSet[str] = frozenset(
    {
        "Relax & Unwind",
        "Food & Nightlife",
        "Sports & Games",
        "Active & Adventure",
        "Movies & Plays",
        "Romantic Date",
        "Picnic & Parks",
    }
)

# Artwork shown when a plan has no usable external image.
DEFAULT_IMAGES: Dict[str, str] = {
    "Relax & Unwind": "https://images.unsplash.com/photo-1544367567-0f2fcb009e0b?auto=format&fit=crop&w=800&q=80",
    "Food & Nightlife": "https://images.unsplash.com/photo-1555396273-367ea4eb4db5?auto=format&fit=crop&w=800&q=80",
    "Sports & Games": "https://images.unsplash.com/photo-1534438327276-14e5300c3a48?auto=format&fit=crop&w=800&q=80",
    "Active & Adventure": "https://images.unsplash.com/photo-1533692328991-08159ff19fca?auto=format&fit=crop&w=800&q=80",
    "Movies & Plays": "https://images.unsplash.com/photo-1517604931442-7e0c8ed2963c?auto=format&fit=crop&w=800&q=80",
    "Romantic Date": "https://images.unsplash.com/photo-1513584684374-8bab748fbf90?auto=format&fit=crop&w=800&q=80",
    "Picnic & Parks": "https://images.unsplash.com/photo-1561502444-2f22b8f84cb1?auto=format&fit=crop&w=800&q=80",
    UNKNOWN_VIBE: "https://images.unsplash.com/photo-1493032585255-aed2b4447477?auto=format&fit=crop&w=800&q=80",
}


def normalize_vibe(value: str | None) -> str:
    """Return ``value`` if it names a supported vibe, otherwise the unknown vibe."""
    if value and value in SUPPORTED_VIBES:
        return value
    return UNKNOWN_VIBE
