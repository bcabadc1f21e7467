"""Schemas for page rendering and navigation."""
from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Page(str, enum.Enum):
    LISTINGS = "listings"
    CREATE_LISTING = "createListing"
    MORTGAGE_OFFERS = "mortgageOffers"


class NavigationAction(str, enum.Enum):
    LIST_PROPERTY = "listProperty"
    VIEW_MORTGAGES = "viewMortgages"
    BACK = "back"


class NoticeState(str, enum.Enum):
    SHOWN = "shown"
    DISMISSED = "dismissed"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class NavigateRequest(_CamelModel):
    action: NavigationAction


class PropertyCard(_CamelModel):
    id: str
    address: str
    price: int
    bedrooms: int
    bathrooms: int
    sqft: int
    description: str = ""
    image: str


class MortgageOfferCard(_CamelModel):
    id: str
    provider: str
    max_amount: int
    term: int
    interest_rate: float
    total_collateral: int
    initial_collateral: int
    wallet_address: str


class NoticeView(_CamelModel):
    visible: bool
    text: str | None = None


class ViewResponse(_CamelModel):
    page: Page
    notice: NoticeView
    properties: list[PropertyCard] = Field(default_factory=list)
    mortgage_offers: list[MortgageOfferCard] = Field(default_factory=list)


class ActionResponse(_CamelModel):
    kind: str
    acknowledged: bool = True
    message: str
    created_id: str | None = None
    removed_id: str | None = None
    view: ViewResponse


class ImageUploadResponse(_CamelModel):
    image: str
