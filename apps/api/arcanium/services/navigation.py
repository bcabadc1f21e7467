"""Page selector and startup notice state for a visitor session."""
from __future__ import annotations

from dataclasses import dataclass

from ..schemas.marketplace import NavigationAction, NoticeState, Page
from .errors import InvalidTransitionError

TRANSITIONS: dict[tuple[Page, NavigationAction], Page] = {
    (Page.LISTINGS, NavigationAction.LIST_PROPERTY): Page.CREATE_LISTING,
    (Page.LISTINGS, NavigationAction.VIEW_MORTGAGES): Page.MORTGAGE_OFFERS,
    (Page.CREATE_LISTING, NavigationAction.BACK): Page.LISTINGS,
    (Page.MORTGAGE_OFFERS, NavigationAction.BACK): Page.LISTINGS,
}


def next_page(current: Page, action: NavigationAction) -> Page:
    """Return the page reached by applying ``action`` on ``current``."""

    try:
        return TRANSITIONS[(current, action)]
    except KeyError:
        raise InvalidTransitionError(current.value, action.value) from None


@dataclass
class Notice:
    """One-shot notice shown when a session starts."""

    state: NoticeState = NoticeState.SHOWN

    @property
    def visible(self) -> bool:
        return self.state is NoticeState.SHOWN

    def dismiss(self) -> None:
        self.state = NoticeState.DISMISSED
