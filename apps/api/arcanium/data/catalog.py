"""Demo catalogue loaded into a fresh record store."""
from __future__ import annotations

from ..models import PLACEHOLDER_IMAGE, Collection, MortgageOffer, Property

PROPERTIES: list[Property] = [
    Property(
        id="PROP001",
        address="123 Main St, Anytown, USA",
        price=250_000,
        bedrooms=3,
        bathrooms=2,
        sqft=1500,
        description="A beautiful family home in a quiet neighborhood.",
        image=PLACEHOLDER_IMAGE,
    ),
    Property(
        id="PROP002",
        address="456 Elm St, Somewhere, USA",
        price=350_000,
        bedrooms=4,
        bathrooms=3,
        sqft=2000,
        description="Spacious house with a large backyard and modern amenities.",
        image=PLACEHOLDER_IMAGE,
    ),
]


MORTGAGE_OFFERS: list[MortgageOffer] = [
    MortgageOffer(
        id="MORT001",
        provider="Arcanium Bank",
        max_amount=500_000,
        term=30,
        interest_rate=3.5,
        total_collateral=20,
        initial_collateral=10,
        wallet_address="0x1234567890123456789012345678901234567890",
    ),
    MortgageOffer(
        id="MORT002",
        provider="Mystic Lenders",
        max_amount=750_000,
        term=25,
        interest_rate=3.2,
        total_collateral=25,
        initial_collateral=15,
        wallet_address="0x0987654321098765432109876543210987654321",
    ),
]


CATALOG: dict[Collection, list] = {
    Collection.PROPERTIES: PROPERTIES,
    Collection.MORTGAGE_OFFERS: MORTGAGE_OFFERS,
}
