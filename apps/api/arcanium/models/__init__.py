"""Expose marketplace records."""
from .base import Collection, Record
from .mortgage_offer import MortgageOffer
from .property import PLACEHOLDER_IMAGE, Property

__all__ = [
    "Collection",
    "PLACEHOLDER_IMAGE",
    "MortgageOffer",
    "Property",
    "Record",
]
