"""Service-level tests for the view controller."""
from __future__ import annotations

import logging

import pytest

from arcanium.core.config import Settings
from arcanium.data.catalog import CATALOG
from arcanium.models import Collection
from arcanium.repositories.records import RecordStore
from arcanium.schemas import forms
from arcanium.schemas.marketplace import NavigationAction, NoticeState, Page
from arcanium.services.errors import InvalidTransitionError, ValidationError
from arcanium.services.marketplace import MarketplaceController
from arcanium.services.navigation import TRANSITIONS, next_page


def make_settings(**overrides: object) -> Settings:
    return Settings(**overrides)


async def make_controller(seed: bool = True, **overrides: object) -> tuple[MarketplaceController, RecordStore]:
    store = RecordStore()
    if seed:
        store.seed(CATALOG)
    controller = MarketplaceController(store, make_settings(**overrides), session_id="test")
    await controller.load()
    return controller, store


def list_property(**overrides: object) -> forms.Submission:
    payload: dict[str, object] = {
        "kind": "listProperty",
        "address": "1 Main St",
        "price": "100000",
        "bedrooms": "2",
        "bathrooms": "1",
        "sqft": "900",
    }
    payload.update(overrides)
    return forms.parse_submission(payload)


def list_offer(**overrides: object) -> forms.Submission:
    payload: dict[str, object] = {
        "kind": "listMortgageOffer",
        "name": "Harbor Credit",
        "walletAddress": "0xfeed",
        "maxAmount": "400000",
        "interestRate": "4.1",
        "term": "20",
        "totalCollateral": "30",
        "initialCollateral": "5",
    }
    payload.update(overrides)
    return forms.parse_submission(payload)


def test_transition_table_matches_page_flow():
    assert next_page(Page.LISTINGS, NavigationAction.LIST_PROPERTY) is Page.CREATE_LISTING
    assert next_page(Page.LISTINGS, NavigationAction.VIEW_MORTGAGES) is Page.MORTGAGE_OFFERS
    assert next_page(Page.CREATE_LISTING, NavigationAction.BACK) is Page.LISTINGS
    assert next_page(Page.MORTGAGE_OFFERS, NavigationAction.BACK) is Page.LISTINGS
    assert len(TRANSITIONS) == 4


@pytest.mark.parametrize(
    ("page", "action"),
    [
        (Page.LISTINGS, NavigationAction.BACK),
        (Page.CREATE_LISTING, NavigationAction.VIEW_MORTGAGES),
        (Page.MORTGAGE_OFFERS, NavigationAction.LIST_PROPERTY),
    ],
)
def test_unavailable_navigation_raises(page, action):
    with pytest.raises(InvalidTransitionError):
        next_page(page, action)


@pytest.mark.asyncio
async def test_controller_starts_on_listings_with_notice_and_loaded_lists():
    controller, _ = await make_controller()

    view = controller.render()

    assert view.page is Page.LISTINGS
    assert view.notice.visible is True
    assert view.notice.text
    assert [card.id for card in view.properties] == ["PROP001", "PROP002"]
    assert view.mortgage_offers == []


@pytest.mark.asyncio
async def test_navigation_does_not_touch_store(monkeypatch):
    controller, store = await make_controller()

    async def fail(*args, **kwargs):
        raise AssertionError("navigation must not reach the store")

    monkeypatch.setattr(store, "list", fail)

    assert controller.navigate(NavigationAction.VIEW_MORTGAGES) is Page.MORTGAGE_OFFERS
    view = controller.render()
    assert [card.provider for card in view.mortgage_offers] == ["Arcanium Bank", "Mystic Lenders"]
    assert controller.navigate(NavigationAction.BACK) is Page.LISTINGS


@pytest.mark.asyncio
async def test_failed_navigation_keeps_page():
    controller, _ = await make_controller()
    controller.navigate(NavigationAction.LIST_PROPERTY)

    with pytest.raises(InvalidTransitionError):
        controller.navigate(NavigationAction.VIEW_MORTGAGES)

    assert controller.page is Page.CREATE_LISTING


@pytest.mark.asyncio
async def test_list_property_appends_and_returns_to_listings():
    controller, store = await make_controller(seed=False)
    controller.navigate(NavigationAction.LIST_PROPERTY)

    result = await controller.dispatch(list_property())

    assert result.created_id == "PROP001"
    assert controller.page is Page.LISTINGS
    stored = await store.list(Collection.PROPERTIES)
    assert len(stored) == 1
    record = stored[0]
    assert (record.address, record.price, record.bedrooms, record.bathrooms, record.sqft) == (
        "1 Main St",
        100000,
        2,
        1,
        900,
    )
    assert record.image == controller._settings.placeholder_image
    assert [card.id for card in controller.render().properties] == ["PROP001"]


@pytest.mark.asyncio
async def test_list_property_keeps_uploaded_image():
    controller, store = await make_controller(seed=False)

    await controller.dispatch(list_property(image="data:image/png;base64,AAAA"))

    assert (await store.list(Collection.PROPERTIES))[0].image == "data:image/png;base64,AAAA"


@pytest.mark.asyncio
async def test_list_property_rejects_image_over_upload_limit():
    controller, store = await make_controller(seed=False, max_image_bytes=3)

    with pytest.raises(ValidationError) as exc:
        await controller.dispatch(list_property(image="data:image/png;base64," + "A" * 400))

    assert exc.value.field == "image"
    assert await store.list(Collection.PROPERTIES) == []


@pytest.mark.asyncio
async def test_list_property_after_purchase_gets_fresh_identifier():
    controller, store = await make_controller()

    await controller.dispatch(forms.parse_submission({"kind": "buyNow", "propertyId": "PROP002", "name": "A", "email": "a@x.io"}))
    result = await controller.dispatch(list_property())

    assert result.created_id == "PROP003"
    assert [record.id for record in await store.list(Collection.PROPERTIES)] == ["PROP001", "PROP003"]


@pytest.mark.asyncio
async def test_list_mortgage_offer_stays_on_mortgage_page():
    controller, store = await make_controller()
    controller.navigate(NavigationAction.VIEW_MORTGAGES)

    result = await controller.dispatch(list_offer())

    assert result.created_id == "MORT003"
    assert controller.page is Page.MORTGAGE_OFFERS
    offers = await store.list(Collection.MORTGAGE_OFFERS)
    assert [offer.id for offer in offers] == ["MORT001", "MORT002", "MORT003"]
    assert offers[-1].provider == "Harbor Credit"
    assert offers[-1].interest_rate == pytest.approx(4.1)
    assert [card.id for card in controller.render().mortgage_offers][-1] == "MORT003"


@pytest.mark.asyncio
async def test_collateral_order_enforced_by_default():
    controller, store = await make_controller(seed=False)

    with pytest.raises(ValidationError) as exc:
        await controller.dispatch(list_offer(totalCollateral="10", initialCollateral="15"))

    assert exc.value.field == "initialCollateral"
    assert await store.list(Collection.MORTGAGE_OFFERS) == []


@pytest.mark.asyncio
async def test_collateral_order_can_be_relaxed():
    controller, store = await make_controller(seed=False, enforce_collateral_order=False)

    await controller.dispatch(list_offer(totalCollateral="10", initialCollateral="15"))

    assert len(await store.list(Collection.MORTGAGE_OFFERS)) == 1


@pytest.mark.asyncio
async def test_buy_now_removes_only_that_property_and_keeps_page():
    controller, store = await make_controller()

    result = await controller.dispatch(
        forms.parse_submission({"kind": "buyNow", "propertyId": "PROP001", "name": "A", "email": "a@x.io"})
    )

    assert result.removed_id == "PROP001"
    assert controller.page is Page.LISTINGS
    assert [record.id for record in await store.list(Collection.PROPERTIES)] == ["PROP002"]
    assert [card.id for card in controller.render().properties] == ["PROP002"]
    assert len(await store.list(Collection.MORTGAGE_OFFERS)) == 2


@pytest.mark.asyncio
async def test_buy_now_on_missing_property_is_a_no_op():
    controller, store = await make_controller()

    result = await controller.dispatch(
        forms.parse_submission({"kind": "buyNow", "propertyId": "PROP404", "name": "A", "email": "a@x.io"})
    )

    assert result.removed_id is None
    assert len(await store.list(Collection.PROPERTIES)) == 2


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"kind": "makeOffer", "propertyId": "PROP001", "name": "A", "email": "a@x.io", "amount": "240000"},
        {
            "kind": "bookViewing",
            "propertyId": "PROP001",
            "name": "A",
            "email": "a@x.io",
            "date": "2026-11-02",
            "time": "10:30",
        },
        {"kind": "makeMortgageOffer", "offerId": "MORT001", "name": "A", "email": "a@x.io", "amount": "1", "propertyId": "PROP001"},
        {"kind": "contactProvider", "offerId": "MORT001", "name": "A", "email": "a@x.io", "message": "Hello"},
    ],
)
async def test_acknowledged_actions_leave_store_and_page_untouched(payload, caplog):
    controller, store = await make_controller()
    controller.navigate(NavigationAction.VIEW_MORTGAGES)
    before_properties = await store.list(Collection.PROPERTIES)
    before_offers = await store.list(Collection.MORTGAGE_OFFERS)

    with caplog.at_level(logging.INFO, logger="arcanium"):
        result = await controller.dispatch(forms.parse_submission(payload))

    assert result.kind == payload["kind"]
    assert result.created_id is None and result.removed_id is None
    assert controller.page is Page.MORTGAGE_OFFERS
    assert await store.list(Collection.PROPERTIES) == before_properties
    assert await store.list(Collection.MORTGAGE_OFFERS) == before_offers
    assert caplog.records


@pytest.mark.asyncio
async def test_dismissed_notice_never_returns():
    controller, _ = await make_controller()

    controller.dismiss_notice()
    controller.dismiss_notice()
    controller.navigate(NavigationAction.LIST_PROPERTY)
    await controller.dispatch(list_property())

    assert controller.notice.state is NoticeState.DISMISSED
    view = controller.render()
    assert view.notice.visible is False
    assert view.notice.text is None


@pytest.mark.asyncio
async def test_property_detail_reads_from_store():
    controller, _ = await make_controller()

    detail = await controller.property_detail("PROP002")

    assert detail.address.startswith("456 Elm St")
