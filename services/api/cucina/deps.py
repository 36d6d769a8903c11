"""FastAPI dependencies for the Cucina API.

Provides:
- The shared ``Kitchen`` (catalog command layer)
- Current user resolution (header → logged-in user)
"""

import threading
from typing import Optional

from fastapi import Depends, Header, HTTPException

from .errors import NotFoundError
from .services.catalog_store import build_store
from .services.kitchen import Kitchen

_kitchen: Optional[Kitchen] = None
_kitchen_lock = threading.Lock()


def get_kitchen() -> Kitchen:
    global _kitchen
    if _kitchen is None:
        # Sync endpoints run on a thread pool; build the kitchen once
        with _kitchen_lock:
            if _kitchen is None:
                _kitchen = Kitchen(build_store())
    return _kitchen


def get_current_user_id(
    kitchen: Kitchen = Depends(get_kitchen),
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
) -> str:
    """Resolve the acting user.

    Resolution order:
    1. X-User-Id header (must name an existing user, else 401)
    2. The user stored by the last login

    Raises:
        HTTPException 401 if no user can be resolved
    """
    if x_user_id:
        try:
            return kitchen.get_user(x_user_id).id
        except NotFoundError:
            pass
        raise HTTPException(status_code=401, detail=f"Unknown user '{x_user_id}'")

    user = kitchen.current_user()
    if user:
        return user.id

    raise HTTPException(status_code=401, detail="Not logged in. POST /api/auth/login first.")
