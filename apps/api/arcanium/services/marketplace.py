"""View controller for a visitor session: page state, cached lists and submissions."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import assert_never

from ..core.config import Settings
from ..models import Collection, MortgageOffer, Property
from ..repositories.records import RecordStore
from ..schemas import forms
from ..schemas.marketplace import (
    MortgageOfferCard,
    NavigationAction,
    NoticeView,
    Page,
    PropertyCard,
    ViewResponse,
)
from .errors import ValidationError
from .images import max_data_url_length
from .navigation import Notice, next_page

logger = logging.getLogger(__name__)


@dataclass
class DispatchResult:
    """Outcome of a submission, before the page is re-rendered."""

    kind: str
    message: str
    created_id: str | None = None
    removed_id: str | None = None


class MarketplaceController:
    """Holds the page selector and the visitor's cached copy of each collection.

    Navigation only moves the page selector. Submissions go through the
    record store and the affected collection is re-read afterwards.
    """

    def __init__(self, store: RecordStore, settings: Settings, session_id: str = "") -> None:
        self.session_id = session_id
        self.page = Page.LISTINGS
        self.notice = Notice()
        self.properties: list[Property] = []
        self.mortgage_offers: list[MortgageOffer] = []
        self._store = store
        self._settings = settings

    async def load(self) -> None:
        """Refresh the cached copy of both collections from the store."""

        self.properties = await self._store.list(Collection.PROPERTIES)
        self.mortgage_offers = await self._store.list(Collection.MORTGAGE_OFFERS)

    def navigate(self, action: NavigationAction) -> Page:
        self.page = next_page(self.page, action)
        logger.debug("Session %s moved to %s", self.session_id, self.page.value)
        return self.page

    def dismiss_notice(self) -> None:
        self.notice.dismiss()

    async def property_detail(self, property_id: str) -> Property:
        """Return a single property for the detail dialog."""

        return await self._store.get(Collection.PROPERTIES, property_id)

    async def dispatch(self, submission: forms.Submission) -> DispatchResult:
        """Apply a submission and report what changed."""

        if isinstance(submission, forms.ListProperty):
            return await self._list_property(submission)
        if isinstance(submission, forms.ListMortgageOffer):
            return await self._list_mortgage_offer(submission)
        if isinstance(submission, forms.BuyNow):
            return await self._buy_now(submission)
        if isinstance(submission, forms.MakeOffer):
            logger.info(
                "Offer of %d received from %s for %s",
                submission.amount,
                submission.email,
                submission.property_id or "-",
            )
            return DispatchResult(kind=submission.kind, message="Your offer has been submitted.")
        if isinstance(submission, forms.BookViewing):
            logger.info(
                "Viewing requested for %s on %s %s by %s",
                submission.property_id,
                submission.date,
                submission.time,
                submission.email,
            )
            return DispatchResult(kind=submission.kind, message="Your viewing request has been received.")
        if isinstance(submission, forms.MakeMortgageOffer):
            logger.info(
                "Mortgage offer of %d for %s received from %s",
                submission.amount,
                submission.property_id,
                submission.email,
            )
            return DispatchResult(kind=submission.kind, message="Your mortgage offer has been submitted.")
        if isinstance(submission, forms.ContactProvider):
            logger.info("Message for provider %s received from %s", submission.offer_id or "-", submission.email)
            return DispatchResult(kind=submission.kind, message="Your message has been sent to the provider.")
        assert_never(submission)

    def render(self) -> ViewResponse:
        """Render the active page with the cached collections it shows."""

        notice = NoticeView(
            visible=self.notice.visible,
            text=self._settings.notice_text if self.notice.visible else None,
        )
        properties: list[PropertyCard] = []
        mortgage_offers: list[MortgageOfferCard] = []
        if self.page is Page.LISTINGS:
            properties = [PropertyCard.model_validate(item) for item in self.properties]
        elif self.page is Page.MORTGAGE_OFFERS:
            mortgage_offers = [MortgageOfferCard.model_validate(item) for item in self.mortgage_offers]

        return ViewResponse(
            page=self.page,
            notice=notice,
            properties=properties,
            mortgage_offers=mortgage_offers,
        )

    async def _list_property(self, submission: forms.ListProperty) -> DispatchResult:
        if submission.image and len(submission.image) > max_data_url_length(self._settings.max_image_bytes):
            raise ValidationError("image", "image: exceeds the upload size limit")

        record = Property(
            id=self._store.next_identifier(Collection.PROPERTIES),
            address=submission.address,
            price=submission.price,
            bedrooms=submission.bedrooms,
            bathrooms=submission.bathrooms,
            sqft=submission.sqft,
            description=submission.description,
            image=submission.image or self._settings.placeholder_image,
        )
        self.properties = await self._store.append(Collection.PROPERTIES, record)
        self.page = Page.LISTINGS
        logger.info("Listed property %s at %s", record.id, record.address)
        return DispatchResult(kind=submission.kind, message="Your property has been listed.", created_id=record.id)

    async def _list_mortgage_offer(self, submission: forms.ListMortgageOffer) -> DispatchResult:
        if self._settings.enforce_collateral_order and submission.initial_collateral > submission.total_collateral:
            raise ValidationError(
                "initialCollateral",
                "initialCollateral: must not exceed totalCollateral",
            )

        record = MortgageOffer(
            id=self._store.next_identifier(Collection.MORTGAGE_OFFERS),
            provider=submission.name,
            max_amount=submission.max_amount,
            term=submission.term,
            interest_rate=submission.interest_rate,
            total_collateral=submission.total_collateral,
            initial_collateral=submission.initial_collateral,
            wallet_address=submission.wallet_address,
        )
        self.mortgage_offers = await self._store.append(Collection.MORTGAGE_OFFERS, record)
        self.page = Page.MORTGAGE_OFFERS
        logger.info("Listed mortgage offer %s from %s", record.id, record.provider)
        return DispatchResult(kind=submission.kind, message="Your mortgage offer has been listed.", created_id=record.id)

    async def _buy_now(self, submission: forms.BuyNow) -> DispatchResult:
        listed = await self._store.list(Collection.PROPERTIES)
        existed = any(item.id == submission.property_id for item in listed)
        await self._store.remove(Collection.PROPERTIES, submission.property_id)
        self.properties = await self._store.list(Collection.PROPERTIES)

        if not existed:
            logger.info("Purchase of %s ignored; property no longer listed", submission.property_id)
            return DispatchResult(kind=submission.kind, message="This property is no longer available.")

        logger.info("Property %s purchased by %s", submission.property_id, submission.email)
        return DispatchResult(
            kind=submission.kind,
            message="Your purchase has been confirmed.",
            removed_id=submission.property_id,
        )
