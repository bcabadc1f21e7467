"""Domain errors raised by the record store and the view controller."""
from __future__ import annotations


class MarketplaceError(Exception):
    """Base class for marketplace failures surfaced to the visitor."""


class ValidationError(MarketplaceError):
    """A required or typed form field failed to parse."""

    def __init__(self, field: str, message: str | None = None) -> None:
        self.field = field
        self.message = message or f"Invalid value for '{field}'"
        super().__init__(self.message)


class DuplicateIdentifierError(MarketplaceError):
    """An appended record collided with an existing identifier."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"Record '{identifier}' already exists")


class NotFoundError(MarketplaceError):
    """A lookup referenced an identifier that is not in the collection."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"Record '{identifier}' not found")


class InvalidTransitionError(MarketplaceError):
    """The navigation action is not available from the current page."""

    def __init__(self, page: str, action: str) -> None:
        self.page = page
        self.action = action
        super().__init__(f"Cannot apply '{action}' on page '{page}'")
