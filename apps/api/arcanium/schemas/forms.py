"""Schemas for visitor form submissions.

Form fields arrive as text exactly as the browser posts them. Numeric fields
are parsed as decimal numbers; whole-number fields truncate toward zero and
the interest rate keeps its fractional part. Anything that does not parse is
reported against the wire field name.
"""
from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from ..services.errors import ValidationError

# Largest decimal exponent accepted for any numeric field.
MAX_MAGNITUDE = 15


def _parse_number(value: object) -> Decimal:
    if isinstance(value, bool):
        raise ValueError("must be a number")
    if isinstance(value, (int, float)):
        value = str(value)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError("is required")
    if not isinstance(value, str):
        raise ValueError("must be a number")

    try:
        number = Decimal(value.strip())
    except InvalidOperation as exc:
        raise ValueError("must be a number") from exc
    if not number.is_finite():
        raise ValueError("must be a number")
    if number and number.adjusted() > MAX_MAGNITUDE:
        raise ValueError("is too large")
    return number


def _truncate_integer(value: object) -> int:
    return int(_parse_number(value))


def _parse_decimal(value: object) -> float:
    return float(_parse_number(value))


def _strip_text(value: object) -> object:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return value


WholeNumber = Annotated[int, BeforeValidator(_truncate_integer), Field(ge=0)]
PositiveWholeNumber = Annotated[int, BeforeValidator(_truncate_integer), Field(gt=0)]
Rate = Annotated[float, BeforeValidator(_parse_decimal), Field(ge=0)]
RequiredText = Annotated[str, BeforeValidator(_strip_text), Field(min_length=1)]
OptionalText = Annotated[str, BeforeValidator(_strip_text)]


class _Submission(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ListProperty(_Submission):
    kind: Literal["listProperty"]
    name: OptionalText = ""
    email: OptionalText = ""
    address: RequiredText
    price: WholeNumber
    description: OptionalText = ""
    bedrooms: WholeNumber
    bathrooms: WholeNumber
    sqft: WholeNumber
    image: str | None = Field(default=None, description="Data URL returned by the image upload")


class ListMortgageOffer(_Submission):
    kind: Literal["listMortgageOffer"]
    name: RequiredText = Field(description="Provider name shown on the offer")
    email: OptionalText = ""
    address: OptionalText = ""
    wallet_address: RequiredText
    max_amount: WholeNumber
    interest_rate: Rate
    term: PositiveWholeNumber
    total_collateral: WholeNumber
    initial_collateral: WholeNumber


class BuyNow(_Submission):
    kind: Literal["buyNow"]
    property_id: RequiredText
    name: RequiredText
    email: RequiredText


class MakeOffer(_Submission):
    kind: Literal["makeOffer"]
    property_id: OptionalText = ""
    name: RequiredText
    email: RequiredText
    amount: WholeNumber


class BookViewing(_Submission):
    kind: Literal["bookViewing"]
    property_id: RequiredText
    name: RequiredText
    email: RequiredText
    date: RequiredText
    time: RequiredText
    message: OptionalText = ""


class MakeMortgageOffer(_Submission):
    kind: Literal["makeMortgageOffer"]
    offer_id: OptionalText = ""
    name: RequiredText
    email: RequiredText
    amount: WholeNumber
    property_id: RequiredText


class ContactProvider(_Submission):
    kind: Literal["contactProvider"]
    offer_id: OptionalText = ""
    name: RequiredText
    email: RequiredText
    message: RequiredText


Submission = Annotated[
    Union[
        ListProperty,
        ListMortgageOffer,
        BuyNow,
        MakeOffer,
        BookViewing,
        MakeMortgageOffer,
        ContactProvider,
    ],
    Field(discriminator="kind"),
]

_SUBMISSION_ADAPTER: TypeAdapter[Submission] = TypeAdapter(Submission)


def parse_submission(payload: dict[str, Any]) -> Submission:
    """Validate a raw form payload into its typed submission.

    Raises ``ValidationError`` naming the first offending field.
    """

    try:
        return _SUBMISSION_ADAPTER.validate_python(payload)
    except PydanticValidationError as exc:
        error = exc.errors()[0]
        loc = error.get("loc", ())
        field = str(loc[-1]) if len(loc) > 1 else "kind"
        message = str(error.get("msg", "Invalid value")).removeprefix("Value error, ")
        raise ValidationError(field, f"{field}: {message}") from exc
