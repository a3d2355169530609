"""
School Directory — Listing Helpers
====================================

Search filter, card image resolution and the built-in sample set shown when
the API cannot be reached.
"""

from typing import Any, Dict, List, Optional

PLACEHOLDER_IMAGE = "/static/placeholder.svg"

SAMPLE_SCHOOLS: List[Dict[str, Any]] = [
    {
        "id": 1,
        "name": "Green Valley High School",
        "address": "123 Education Street, Learning District",
        "city": "Mumbai",
        "state": "Maharashtra",
        "contact": "9876543210",
        "email_id": "contact@greenvalley.edu",
        "students": 0,
        "image": None,
        "created_at": "2024-01-15T10:30:00Z",
    },
    {
        "id": 2,
        "name": "Sunrise Academy",
        "address": "456 Knowledge Avenue, Academic Zone",
        "city": "Delhi",
        "state": "Delhi",
        "contact": "9876543211",
        "email_id": "info@sunriseacademy.edu",
        "students": 0,
        "image": None,
        "created_at": "2024-01-16T11:30:00Z",
    },
    {
        "id": 3,
        "name": "Oak Tree International",
        "address": "789 Wisdom Boulevard, Education Hub",
        "city": "Bangalore",
        "state": "Karnataka",
        "contact": "9876543212",
        "email_id": "admissions@oaktree.edu",
        "students": 0,
        "image": None,
        "created_at": "2024-01-17T09:30:00Z",
    },
]


def matches_term(school: Dict[str, Any], term: Optional[str]) -> bool:
    """Case-insensitive substring match against name, city or state; blank matches all."""
    needle = (term or "").strip().lower()
    if not needle:
        return True
    return any(needle in str(school.get(key) or "").lower() for key in ("name", "city", "state"))


def card_image(school: Dict[str, Any], api_base_url: Optional[str] = None) -> str:
    """
    URL for a card's image.

    Absolute URLs are kept. Stored references (/uploads/...) stay relative
    unless an explicit API base URL is configured. No image gives the
    placeholder.
    """
    image = school.get("image")
    if not image:
        return PLACEHOLDER_IMAGE
    if image.startswith(("http://", "https://")):
        return image
    if not api_base_url:
        return image
    return f"{api_base_url.rstrip('/')}{image}"
