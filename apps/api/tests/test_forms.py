"""Tests for submission parsing and field coercion."""
from __future__ import annotations

import pytest

from arcanium.schemas import forms
from arcanium.services.errors import ValidationError


def property_payload(**overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "kind": "listProperty",
        "name": "Jane",
        "email": "jane@example.com",
        "address": "1 Main St",
        "price": "100000",
        "description": "Corner lot",
        "bedrooms": "2",
        "bathrooms": "1",
        "sqft": "900",
    }
    payload.update(overrides)
    return payload


def offer_payload(**overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "kind": "listMortgageOffer",
        "name": "Arcanium Bank",
        "email": "loans@example.com",
        "walletAddress": "0x1234",
        "maxAmount": "500000",
        "interestRate": "3.25",
        "term": "30",
        "totalCollateral": "20",
        "initialCollateral": "10",
    }
    payload.update(overrides)
    return payload


def test_list_property_parses_text_fields():
    submission = forms.parse_submission(property_payload())

    assert isinstance(submission, forms.ListProperty)
    assert submission.address == "1 Main St"
    assert submission.price == 100000
    assert (submission.bedrooms, submission.bathrooms, submission.sqft) == (2, 1, 900)
    assert submission.image is None


def test_integer_fields_truncate_fractions():
    submission = forms.parse_submission(property_payload(price="2500.99", sqft=1200.7))

    assert submission.price == 2500
    assert submission.sqft == 1200


def test_interest_rate_keeps_fractional_precision():
    submission = forms.parse_submission(offer_payload())

    assert isinstance(submission, forms.ListMortgageOffer)
    assert submission.interest_rate == pytest.approx(3.25)
    assert submission.wallet_address == "0x1234"
    assert submission.max_amount == 500000


@pytest.mark.parametrize("value", ["", "   ", "abc", "12abc", "NaN", "Infinity", True])
def test_unparseable_number_names_the_field(value):
    with pytest.raises(ValidationError) as exc:
        forms.parse_submission(property_payload(price=value))

    assert exc.value.field == "price"


def test_missing_required_number_names_the_field():
    payload = property_payload()
    del payload["sqft"]

    with pytest.raises(ValidationError) as exc:
        forms.parse_submission(payload)

    assert exc.value.field == "sqft"


def test_negative_number_is_rejected():
    with pytest.raises(ValidationError) as exc:
        forms.parse_submission(property_payload(bedrooms="-1"))

    assert exc.value.field == "bedrooms"


def test_term_must_be_positive():
    with pytest.raises(ValidationError) as exc:
        forms.parse_submission(offer_payload(term="0"))

    assert exc.value.field == "term"


def test_blank_required_text_is_rejected():
    with pytest.raises(ValidationError) as exc:
        forms.parse_submission(property_payload(address="   "))

    assert exc.value.field == "address"


def test_wire_field_name_is_reported_for_camel_case_fields():
    with pytest.raises(ValidationError) as exc:
        forms.parse_submission(offer_payload(walletAddress=""))

    assert exc.value.field == "walletAddress"


def test_optional_text_defaults_to_empty():
    payload = property_payload()
    del payload["description"]

    submission = forms.parse_submission(payload)

    assert submission.description == ""


@pytest.mark.parametrize("payload", [{}, {"kind": "sellEverything"}])
def test_unknown_or_missing_kind_is_rejected(payload):
    with pytest.raises(ValidationError) as exc:
        forms.parse_submission(payload)

    assert exc.value.field == "kind"


def test_acknowledged_actions_parse_to_their_own_types():
    buy = forms.parse_submission({"kind": "buyNow", "propertyId": "PROP001", "name": "A", "email": "a@x.io"})
    viewing = forms.parse_submission(
        {
            "kind": "bookViewing",
            "propertyId": "PROP001",
            "name": "A",
            "email": "a@x.io",
            "date": "2026-11-02",
            "time": "10:30",
        }
    )
    contact = forms.parse_submission(
        {"kind": "contactProvider", "offerId": "MORT001", "name": "A", "email": "a@x.io", "message": "Hi"}
    )

    assert isinstance(buy, forms.BuyNow) and buy.property_id == "PROP001"
    assert isinstance(viewing, forms.BookViewing) and viewing.message == ""
    assert isinstance(contact, forms.ContactProvider) and contact.offer_id == "MORT001"


def test_mortgage_offer_bid_requires_property_id():
    with pytest.raises(ValidationError) as exc:
        forms.parse_submission({"kind": "makeMortgageOffer", "name": "A", "email": "a@x.io", "amount": "1000"})

    assert exc.value.field == "propertyId"


@pytest.mark.parametrize("value", ["1e999999999", "-1E+400", "1" + "0" * 40])
def test_out_of_range_number_is_rejected(value):
    with pytest.raises(ValidationError) as exc:
        forms.parse_submission({"kind": "makeOffer", "name": "A", "email": "a@x.io", "amount": value})

    assert exc.value.field == "amount"
    assert "too large" in exc.value.message


def test_out_of_range_rate_is_rejected():
    with pytest.raises(ValidationError) as exc:
        forms.parse_submission(offer_payload(interestRate="9e99999"))

    assert exc.value.field == "interestRate"


def test_largest_accepted_magnitude_still_parses():
    submission = forms.parse_submission(property_payload(price="9" * (forms.MAX_MAGNITUDE + 1)))

    assert submission.price == int("9" * (forms.MAX_MAGNITUDE + 1))
