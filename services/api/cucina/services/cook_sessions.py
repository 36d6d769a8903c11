"""Cooking session state machine.

States: ``active -> completed`` and ``active -> cancelled``; both are final.
At most one active session exists per (recipe, user). The registry keeps that
pair as an explicit key so starting twice resumes instead of duplicating.

Completion scales the recipe to the session's serving size and runs the
inventory deduction ingredient by ingredient, each step working on the lots
returned by the previous one.
"""

import logging
from typing import Callable, Iterable, NamedTuple, Optional, Sequence

from ..errors import DuplicateActiveSessionError, NotFoundError, SessionClosedError, ValidationError
from ..schemas import CookingSession, DeductionEntry, InventoryItem, Recipe
from .catalog_store import generate_id
from .inventory_deduction import deduct, scaling_factor
from .unit_conversion import Measurements, as_graph

logger = logging.getLogger("cucina.cook")

SessionKey = tuple[str, str]


class CompletionResult(NamedTuple):
    session: CookingSession
    recipe: Recipe
    inventory: list[InventoryItem]
    deducted: dict[str, list[DeductionEntry]]


class CookSessionRegistry:
    def __init__(
        self,
        sessions: Iterable[CookingSession] = (),
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self._sessions: dict[str, CookingSession] = {}
        self._active: dict[SessionKey, str] = {}
        self._new_id = id_factory or generate_id

        for s in sessions:
            self._sessions[s.id] = s
            if s.status != "active":
                continue
            key = (s.recipe_id, s.user_id)
            if key in self._active:
                raise DuplicateActiveSessionError(
                    f"Recipe {s.recipe_id} has two active sessions for user {s.user_id}: "
                    f"{self._active[key]}, {s.id}"
                )
            self._active[key] = s.id

    def __len__(self) -> int:
        return len(self._sessions)

    def all(self) -> list[CookingSession]:
        return list(self._sessions.values())

    def get(self, session_id: str) -> CookingSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise NotFoundError(f"Session {session_id} not found")
        return session

    def active_for(self, recipe_id: str, user_id: str) -> Optional[CookingSession]:
        session_id = self._active.get((recipe_id, user_id))
        return self._sessions[session_id] if session_id else None

    def _require_active(self, session_id: str) -> CookingSession:
        session = self.get(session_id)
        if session.status != "active":
            raise SessionClosedError(f"Session {session_id} is already {session.status}")
        return session

    # --- Transitions ---

    def start(self, recipe: Recipe, user_id: str) -> tuple[CookingSession, bool]:
        """Resume the active session for (recipe, user) or create one.

        Returns the session and whether it was newly created.
        """
        existing = self.active_for(recipe.id, user_id)
        if existing:
            logger.info(f"Resuming session {existing.id} for recipe {recipe.id}")
            return existing, False

        session = CookingSession(
            id=self._new_id(),
            recipe_id=recipe.id,
            user_id=user_id,
            serving_size=recipe.servings,
        )
        self._sessions[session.id] = session
        self._active[(recipe.id, user_id)] = session.id
        logger.info(f"Created cook session {session.id} for recipe {recipe.id}")
        return session, True

    def update(self, session: CookingSession) -> CookingSession:
        """Overwrite an active session with the given state (last write wins)."""
        current = self._require_active(session.id)
        if (session.recipe_id, session.user_id) != (current.recipe_id, current.user_id):
            raise ValidationError(f"Session {session.id} cannot change recipe or user")
        if session.status != "active":
            raise SessionClosedError("Use complete() or cancel() to end a session")
        self._sessions[session.id] = session
        return session

    def complete(
        self,
        session_id: str,
        recipe: Recipe,
        inventory: Sequence[InventoryItem],
        measurements: Measurements,
    ) -> CompletionResult:
        """Finish a session: deduct scaled ingredients and bump the cook count.

        Nothing is committed to the registry until every deduction has run, so
        callers observe either the old state or the full new one.
        """
        session = self._require_active(session_id)
        if session.recipe_id != recipe.id:
            raise ValidationError(f"Session {session_id} does not belong to recipe {recipe.id}")

        graph = as_graph(measurements)
        scale = scaling_factor(session.serving_size, recipe.servings)

        lots = list(inventory)
        deducted: dict[str, list[DeductionEntry]] = {}
        for ing in recipe.ingredients:
            required = ing.quantity * scale
            result = deduct(
                ing.ingredient_id,
                ing.measurement_id,
                required,
                lots,
                graph,
                session.user_id,
            )
            lots = result.updated_lots
            deducted.setdefault(ing.ingredient_id, []).extend(result.ledger)
            if result.remaining > 0:
                logger.warning(
                    f"Session {session_id}: {result.remaining:.3f} of ingredient "
                    f"{ing.ingredient_id} ({ing.measurement_id}) not covered by inventory"
                )

        done = session.model_copy(update={"status": "completed"})
        cooked = recipe.model_copy(update={"cook_count": recipe.cook_count + 1})

        self._sessions[session_id] = done
        self._active.pop((session.recipe_id, session.user_id), None)
        logger.info(f"Session {session_id} completed (scale {scale:.3g})")
        return CompletionResult(session=done, recipe=cooked, inventory=lots, deducted=deducted)

    def cancel(self, session_id: str) -> CookingSession:
        session = self._require_active(session_id)
        cancelled = session.model_copy(update={"status": "cancelled"})
        self._sessions[session_id] = cancelled
        self._active.pop((session.recipe_id, session.user_id), None)
        logger.info(f"Session {session_id} cancelled")
        return cancelled

    def drop_recipe(self, recipe_id: str) -> int:
        """Remove every session of a deleted recipe. Returns how many were dropped."""
        doomed = [sid for sid, s in self._sessions.items() if s.recipe_id == recipe_id]
        for sid in doomed:
            del self._sessions[sid]
        self._active = {k: v for k, v in self._active.items() if k[0] != recipe_id}
        return len(doomed)


def is_ready_to_complete(session: CookingSession, recipe: Recipe) -> bool:
    """All ingredients and all steps have been checked off."""
    ingredients = set(session.ingredients_checked)
    steps = set(session.steps_checked)
    return (
        all(i in ingredients for i in range(len(recipe.ingredients)))
        and all(i in steps for i in range(len(recipe.instructions)))
    )


def close_duplicate_sessions(sessions: Iterable[CookingSession]) -> list[CookingSession]:
    """Keep the first active session per (recipe, user); cancel any later ones.

    Applied to stored sessions before they reach the registry.
    """
    seen: set[SessionKey] = set()
    result = []
    for s in sessions:
        key = (s.recipe_id, s.user_id)
        if s.status == "active":
            if key in seen:
                logger.warning(
                    f"Recipe {s.recipe_id} already has an active session for user {s.user_id}; "
                    f"cancelling duplicate {s.id}"
                )
                s = s.model_copy(update={"status": "cancelled"})
            else:
                seen.add(key)
        result.append(s)
    return result
