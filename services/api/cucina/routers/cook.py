"""
Cook Mode API.

Endpoints:
- POST  /cook/session/start
- GET   /cook/session/active?recipe_id=
- GET   /cook/session/{id}
- PATCH /cook/session/{id}
- GET   /cook/session/{id}/inventory-check
- POST  /cook/session/{id}/complete
- POST  /cook/session/{id}/cancel
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends

from ..deps import get_current_user_id, get_kitchen
from ..schemas import (
    CookCompleteResponse,
    InventoryCheckResponse,
    SessionPatchRequest,
    SessionResponse,
    SessionStartRequest,
)
from ..services.kitchen import Kitchen

router = APIRouter()
logger = logging.getLogger("cucina.cook")


@router.post("/session/start", response_model=SessionResponse)
def start_session(
    body: SessionStartRequest,
    user_id: str = Depends(get_current_user_id),
    kitchen: Kitchen = Depends(get_kitchen),
):
    """Resume the active session for this recipe or start a new one."""
    session, created = kitchen.start_cooking(body.recipe_id, user_id)
    return SessionResponse(session=session, created=created)


@router.get("/session/active", response_model=Optional[SessionResponse])
def get_active_session(
    recipe_id: str,
    user_id: str = Depends(get_current_user_id),
    kitchen: Kitchen = Depends(get_kitchen),
):
    session = kitchen.get_active_session(recipe_id, user_id)
    if session is None:
        return None
    return SessionResponse(session=session)


@router.get("/session/{session_id}", response_model=SessionResponse)
def get_session(
    session_id: str,
    user_id: str = Depends(get_current_user_id),
    kitchen: Kitchen = Depends(get_kitchen),
):
    return SessionResponse(session=kitchen.get_session(session_id, user_id))


@router.patch("/session/{session_id}", response_model=SessionResponse)
def patch_session(
    session_id: str,
    patch: SessionPatchRequest,
    user_id: str = Depends(get_current_user_id),
    kitchen: Kitchen = Depends(get_kitchen),
):
    session = kitchen.update_session(
        session_id,
        user_id,
        serving_size=patch.serving_size,
        ingredients_checked=patch.ingredients_checked,
        steps_checked=patch.steps_checked,
    )
    return SessionResponse(session=session)


@router.get("/session/{session_id}/inventory-check", response_model=InventoryCheckResponse)
def inventory_check(
    session_id: str,
    user_id: str = Depends(get_current_user_id),
    kitchen: Kitchen = Depends(get_kitchen),
):
    """Scaled requirements against the user's stock, with the missing ones listed apart."""
    scale, requirements = kitchen.inventory_check(session_id, user_id)
    return InventoryCheckResponse(
        session_id=session_id,
        scaling_factor=scale,
        requirements=requirements,
        missing=[r for r in requirements if not r.has_enough],
    )


@router.post("/session/{session_id}/complete", response_model=CookCompleteResponse)
def complete_session(
    session_id: str,
    user_id: str = Depends(get_current_user_id),
    kitchen: Kitchen = Depends(get_kitchen),
):
    result = kitchen.complete_cooking(session_id, user_id)
    logger.info(f"Completed session {session_id}; recipe {result.recipe.id} cooked {result.recipe.cook_count} time(s)")
    return CookCompleteResponse(
        session=result.session,
        recipe=result.recipe,
        deducted=result.deducted,
        inventory=[lot for lot in result.inventory if lot.user_id == user_id],
    )


@router.post("/session/{session_id}/cancel", response_model=SessionResponse)
def cancel_session(
    session_id: str,
    user_id: str = Depends(get_current_user_id),
    kitchen: Kitchen = Depends(get_kitchen),
):
    return SessionResponse(session=kitchen.cancel_cooking(session_id, user_id))
