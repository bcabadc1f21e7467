"""Collection names and shared record helpers."""
from __future__ import annotations

import enum
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from .mortgage_offer import MortgageOffer
    from .property import Property


class Collection(str, enum.Enum):
    """Named collections held by the record store."""

    PROPERTIES = "properties"
    MORTGAGE_OFFERS = "mortgageOffers"

    @property
    def prefix(self) -> str:
        """Identifier prefix for records of this collection."""

        if self is Collection.PROPERTIES:
            return "PROP"
        return "MORT"


Record = Union["Property", "MortgageOffer"]
