"""Request-scoped access to the record store and the visitor session."""
from __future__ import annotations

from uuid import uuid4

from fastapi import Header, Request, Response

from ..repositories.records import RecordStore
from ..services.marketplace import MarketplaceController
from ..services.session_store import SessionRegistry

SESSION_HEADER = "X-Session-Id"


def get_store(request: Request) -> RecordStore:
    """FastAPI dependency returning the application's record store."""

    return request.app.state.store


def get_registry(request: Request) -> SessionRegistry:
    """FastAPI dependency returning the visitor session registry."""

    return request.app.state.sessions


async def get_controller(
    request: Request,
    response: Response,
    x_session_id: str | None = Header(default=None),
) -> MarketplaceController:
    """FastAPI dependency resolving (or starting) the caller's visitor session."""

    session_id = x_session_id or str(uuid4())
    controller = await get_registry(request).get_or_create(session_id)
    response.headers[SESSION_HEADER] = session_id
    return controller
