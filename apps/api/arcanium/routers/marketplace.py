"""Page rendering, navigation and submission endpoints."""
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException

from ..db.session import get_controller, get_registry
from ..schemas import marketplace as schemas
from ..schemas.forms import parse_submission
from ..services.marketplace import MarketplaceController
from ..services.session_store import SessionRegistry

router = APIRouter()


@router.get("/view", response_model=schemas.ViewResponse)
async def view(controller: MarketplaceController = Depends(get_controller)) -> schemas.ViewResponse:
    """Render the active page for the visitor session."""

    return controller.render()


@router.post("/navigate", response_model=schemas.ViewResponse)
async def navigate(
    payload: schemas.NavigateRequest,
    controller: MarketplaceController = Depends(get_controller),
) -> schemas.ViewResponse:
    """Move the page selector and render the page reached."""

    controller.navigate(payload.action)
    return controller.render()


@router.post("/actions", response_model=schemas.ActionResponse)
async def submit_action(
    payload: dict[str, Any] = Body(...),
    controller: MarketplaceController = Depends(get_controller),
) -> schemas.ActionResponse:
    """Dispatch a form submission and render the resulting page."""

    submission = parse_submission(payload)
    result = await controller.dispatch(submission)
    return schemas.ActionResponse(
        kind=result.kind,
        message=result.message,
        created_id=result.created_id,
        removed_id=result.removed_id,
        view=controller.render(),
    )


@router.post("/notice/dismiss", response_model=schemas.ViewResponse)
async def dismiss_notice(controller: MarketplaceController = Depends(get_controller)) -> schemas.ViewResponse:
    """Dismiss the startup notice for the rest of the session."""

    controller.dismiss_notice()
    return controller.render()


@router.get("/properties/{property_id}", response_model=schemas.PropertyCard)
async def property_detail(
    property_id: str,
    controller: MarketplaceController = Depends(get_controller),
) -> schemas.PropertyCard:
    """Return the full details of a listed property."""

    record = await controller.property_detail(property_id)
    return schemas.PropertyCard.model_validate(record)


@router.post("/session/reset")
async def reset_session(
    payload: dict[str, str] = Body(...),
    registry: SessionRegistry = Depends(get_registry),
) -> dict[str, str]:
    """Forget a visitor session so the next request starts from the listings page."""

    session_id = payload.get("session_id")
    if not session_id:
        raise HTTPException(status_code=400, detail="session_id is required")

    registry.clear(session_id)
    return {"status": "cleared"}
