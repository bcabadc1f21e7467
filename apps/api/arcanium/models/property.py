"""Property listing record."""
from __future__ import annotations

from dataclasses import dataclass

PLACEHOLDER_IMAGE = "/placeholder.svg"


@dataclass(slots=True)
class Property:
    """A property offered for sale on the listings page."""

    id: str
    address: str
    price: int
    bedrooms: int
    bathrooms: int
    sqft: int
    description: str = ""
    image: str = PLACEHOLDER_IMAGE
