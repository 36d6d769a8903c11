"""Catalog command layer.

``Kitchen`` owns one ``AppData`` snapshot. Every command takes the lock,
validates its input, applies a small in-place change and then saves the
aggregate through the catalog store, so readers only ever see whole states.
"""

import logging
import threading
import time
from typing import Callable, Iterable, Optional, Sequence, TypeVar

import pydantic

from ..errors import NotFoundError, SessionStateError, ValidationError
from ..schemas import (
    AppData,
    CookingSession,
    Ingredient,
    IngredientRequirement,
    InventoryItem,
    Measurement,
    MeasurementConversion,
    Recipe,
    RecipeIngredient,
    User,
)
from ..security import hash_password, verify_password
from .catalog_store import CatalogStore, generate_id
from .cook_sessions import (
    CompletionResult,
    CookSessionRegistry,
    close_duplicate_sessions,
    is_ready_to_complete,
)
from .inventory_deduction import preview_deductions, scaling_factor
from .unit_conversion import MeasurementGraph, Sufficiency, check_sufficiency

logger = logging.getLogger("cucina.kitchen")

T = TypeVar("T")

DASHBOARD_TOP_N = 5


def filter_by_name(query: str, candidates: Iterable[T], key: Callable[[T], str] = lambda c: c.name) -> list[T]:
    """Case-insensitive substring match; an empty query keeps everything."""
    q = (query or "").strip().lower()
    if not q:
        return list(candidates)
    return [c for c in candidates if q in key(c).lower()]


def _require_name(name: str, what: str) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError(f"{what} name cannot be empty")
    return name


def _require_positive(value: float, what: str) -> float:
    if value is None or value <= 0:
        raise ValidationError(f"{what} must be greater than zero")
    return value


class Kitchen:
    def __init__(self, store: CatalogStore, data: Optional[AppData] = None):
        self._store = store
        self._lock = threading.RLock()
        self._data = data if data is not None else store.load()
        self._data.cooking_sessions = close_duplicate_sessions(self._data.cooking_sessions)
        self._sessions = CookSessionRegistry(self._data.cooking_sessions)

    def _commit(self) -> None:
        self._data.cooking_sessions = self._sessions.all()
        self._store.save(self._data)

    def snapshot(self) -> AppData:
        with self._lock:
            self._data.cooking_sessions = self._sessions.all()
            return self._data.model_copy(deep=True)

    @property
    def measurement_graph(self) -> MeasurementGraph:
        return MeasurementGraph(self._data.measurements)

    # --- Users ---

    def signup(self, username: str, password: str) -> User:
        with self._lock:
            username = _require_name(username, "User")
            if not password:
                raise ValidationError("Password cannot be empty")
            if any(u.username == username for u in self._data.users):
                raise ValidationError(f"Username '{username}' is already taken")
            user = User(id=generate_id(), username=username, password_hash=hash_password(password))
            self._data.users.append(user)
            self._commit()
            logger.info(f"Registered user {user.id}")
            return user

    def login(self, username: str, password: str) -> Optional[User]:
        with self._lock:
            user = next((u for u in self._data.users if u.username == username), None)
            if user is None or not verify_password(password, user.password_hash):
                return None
            self._data.current_user_id = user.id
            self._commit()
            return user

    def logout(self) -> None:
        with self._lock:
            self._data.current_user_id = None
            self._commit()

    def current_user(self) -> Optional[User]:
        with self._lock:
            uid = self._data.current_user_id
            return next((u for u in self._data.users if u.id == uid), None) if uid else None

    def get_user(self, user_id: str) -> User:
        with self._lock:
            user = next((u for u in self._data.users if u.id == user_id), None)
            if user is None:
                raise NotFoundError(f"User {user_id} not found")
            return user

    # --- Lookups ---

    def _recipe_index(self, recipe_id: str, user_id: Optional[str] = None) -> int:
        for i, r in enumerate(self._data.recipes):
            if r.id == recipe_id and (user_id is None or r.user_id == user_id):
                return i
        raise NotFoundError(f"Recipe {recipe_id} not found")

    def _ingredient_index(self, ingredient_id: str) -> int:
        for i, ing in enumerate(self._data.ingredients):
            if ing.id == ingredient_id:
                return i
        raise NotFoundError(f"Ingredient {ingredient_id} not found")

    def _measurement_index(self, measurement_id: str) -> int:
        for i, m in enumerate(self._data.measurements):
            if m.id == measurement_id:
                return i
        raise NotFoundError(f"Measurement {measurement_id} not found")

    def _validate_recipe_ingredients(self, ingredients: Sequence[RecipeIngredient]) -> list[RecipeIngredient]:
        ingredient_ids = {i.id for i in self._data.ingredients}
        measurement_ids = {m.id for m in self._data.measurements}
        for ing in ingredients:
            if ing.ingredient_id not in ingredient_ids:
                raise ValidationError(f"Unknown ingredient {ing.ingredient_id}")
            if ing.measurement_id not in measurement_ids:
                raise ValidationError(f"Unknown measurement {ing.measurement_id}")
            _require_positive(ing.quantity, "Ingredient quantity")
        return list(ingredients)

    # --- Recipes ---

    def list_recipes(self, user_id: str, query: str = "") -> list[Recipe]:
        with self._lock:
            owned = [r for r in self._data.recipes if r.user_id == user_id]
            return filter_by_name(query, owned)

    def get_recipe(self, recipe_id: str, user_id: Optional[str] = None) -> Recipe:
        with self._lock:
            return self._data.recipes[self._recipe_index(recipe_id, user_id)]

    def view_recipe(self, recipe_id: str, user_id: str) -> Recipe:
        with self._lock:
            i = self._recipe_index(recipe_id, user_id)
            recipe = self._data.recipes[i]
            recipe = recipe.model_copy(update={"view_count": recipe.view_count + 1})
            self._data.recipes[i] = recipe
            self._commit()
            return recipe

    def create_recipe(
        self,
        user_id: str,
        *,
        name: str,
        servings: float,
        description: str = "",
        ingredients: Sequence[RecipeIngredient] = (),
        instructions: Sequence[str] = (),
    ) -> Recipe:
        with self._lock:
            recipe = Recipe(
                id=generate_id(),
                user_id=user_id,
                name=_require_name(name, "Recipe"),
                description=description,
                servings=_require_positive(servings, "Servings"),
                ingredients=self._validate_recipe_ingredients(ingredients),
                instructions=[s for s in instructions if s.strip()],
                created_at=int(time.time() * 1000),
            )
            self._data.recipes.append(recipe)
            self._commit()
            logger.info(f"Created recipe {recipe.id} for user {user_id}")
            return recipe

    def update_recipe(self, recipe_id: str, user_id: str, **changes) -> Recipe:
        with self._lock:
            i = self._recipe_index(recipe_id, user_id)
            allowed = {"name", "description", "servings", "ingredients", "instructions"}
            changes = {k: v for k, v in changes.items() if k in allowed}
            cleared = sorted(k for k, v in changes.items() if v is None)
            if cleared:
                raise ValidationError(f"Recipe fields cannot be null: {', '.join(cleared)}")
            if "name" in changes:
                changes["name"] = _require_name(changes["name"], "Recipe")
            if "servings" in changes:
                _require_positive(changes["servings"], "Servings")
            if "ingredients" in changes:
                changes["ingredients"] = self._validate_recipe_ingredients(changes["ingredients"])
            if "instructions" in changes:
                changes["instructions"] = [s for s in changes["instructions"] if s.strip()]

            try:
                recipe = Recipe.model_validate({**self._data.recipes[i].model_dump(), **changes})
            except pydantic.ValidationError as e:
                raise ValidationError(f"Invalid recipe update: {e}") from e
            self._data.recipes[i] = recipe
            self._commit()
            return recipe

    def delete_recipe(self, recipe_id: str, user_id: str) -> None:
        with self._lock:
            i = self._recipe_index(recipe_id, user_id)
            del self._data.recipes[i]
            dropped = self._sessions.drop_recipe(recipe_id)
            self._commit()
            logger.info(f"Deleted recipe {recipe_id} and {dropped} cooking session(s)")

    def dashboard(self, user_id: str) -> dict:
        with self._lock:
            owned = [r for r in self._data.recipes if r.user_id == user_id]
            return {
                "total_recipes": len(owned),
                "total_cooks": sum(r.cook_count for r in owned),
                "most_cooked": sorted(owned, key=lambda r: r.cook_count, reverse=True)[:DASHBOARD_TOP_N],
                "most_viewed": sorted(owned, key=lambda r: r.view_count, reverse=True)[:DASHBOARD_TOP_N],
            }

    # --- Ingredients ---

    def list_ingredients(self, query: str = "") -> list[Ingredient]:
        with self._lock:
            return filter_by_name(query, self._data.ingredients)

    def add_ingredient(self, name: str) -> Ingredient:
        with self._lock:
            ingredient = Ingredient(id=generate_id(), name=_require_name(name, "Ingredient"), is_custom=True)
            self._data.ingredients.append(ingredient)
            self._commit()
            return ingredient

    def rename_ingredient(self, ingredient_id: str, name: str) -> Ingredient:
        with self._lock:
            i = self._ingredient_index(ingredient_id)
            ingredient = self._data.ingredients[i].model_copy(update={"name": _require_name(name, "Ingredient")})
            self._data.ingredients[i] = ingredient
            self._commit()
            return ingredient

    def delete_ingredient(self, ingredient_id: str) -> None:
        # Recipes and inventory keep their references
        with self._lock:
            del self._data.ingredients[self._ingredient_index(ingredient_id)]
            self._commit()

    # --- Measurements ---

    def list_measurements(self, query: str = "") -> list[Measurement]:
        with self._lock:
            return filter_by_name(query, self._data.measurements)

    def get_measurement(self, measurement_id: str) -> Measurement:
        with self._lock:
            return self._data.measurements[self._measurement_index(measurement_id)]

    def add_measurement(self, name: str) -> Measurement:
        with self._lock:
            measurement = Measurement(id=generate_id(), name=_require_name(name, "Measurement"))
            self._data.measurements.append(measurement)
            self._commit()
            return measurement

    def rename_measurement(self, measurement_id: str, name: str) -> Measurement:
        with self._lock:
            i = self._measurement_index(measurement_id)
            measurement = self._data.measurements[i].model_copy(update={"name": _require_name(name, "Measurement")})
            self._data.measurements[i] = measurement
            self._commit()
            return measurement

    def delete_measurement(self, measurement_id: str) -> None:
        # Edges pointing at the deleted unit stay; they resolve to nothing
        with self._lock:
            del self._data.measurements[self._measurement_index(measurement_id)]
            self._commit()

    def set_conversion(self, from_id: str, to_id: str, factor: float) -> Measurement:
        """Add the edge ``from -> to`` or overwrite its factor. The reverse edge is untouched."""
        with self._lock:
            i = self._measurement_index(from_id)
            self._measurement_index(to_id)
            if from_id == to_id:
                raise ValidationError("A measurement cannot convert to itself")
            _require_positive(factor, "Conversion factor")

            source = self._data.measurements[i]
            conversions = list(source.conversions)
            for j, c in enumerate(conversions):
                if c.to_measurement_id == to_id:
                    conversions[j] = MeasurementConversion(to_measurement_id=to_id, factor=factor)
                    break
            else:
                conversions.append(MeasurementConversion(to_measurement_id=to_id, factor=factor))

            measurement = source.model_copy(update={"conversions": conversions})
            self._data.measurements[i] = measurement
            self._commit()
            return measurement

    def remove_conversion(self, from_id: str, to_id: str) -> Measurement:
        with self._lock:
            i = self._measurement_index(from_id)
            source = self._data.measurements[i]
            measurement = source.model_copy(update={
                "conversions": [c for c in source.conversions if c.to_measurement_id != to_id]
            })
            self._data.measurements[i] = measurement
            self._commit()
            return measurement

    # --- Inventory ---

    def _user_lots(self, user_id: str) -> list[InventoryItem]:
        return [lot for lot in self._data.inventory if lot.user_id == user_id]

    def _lot_index(self, user_id: str, ingredient_id: str, measurement_id: str) -> Optional[int]:
        key = (user_id, ingredient_id, measurement_id)
        return next((i for i, lot in enumerate(self._data.inventory) if lot.key == key), None)

    def list_inventory(self, user_id: str, query: str = "") -> list[InventoryItem]:
        with self._lock:
            names = {i.id: i.name for i in self._data.ingredients}
            return filter_by_name(query, self._user_lots(user_id), key=lambda lot: names.get(lot.ingredient_id, ""))

    def add_inventory(self, user_id: str, ingredient_id: str, measurement_id: str, quantity: float) -> InventoryItem:
        """Add stock; an existing lot in the same unit is topped up instead of duplicated."""
        with self._lock:
            self._ingredient_index(ingredient_id)
            self._measurement_index(measurement_id)
            _require_positive(quantity, "Quantity")

            i = self._lot_index(user_id, ingredient_id, measurement_id)
            if i is None:
                lot = InventoryItem(
                    user_id=user_id,
                    ingredient_id=ingredient_id,
                    measurement_id=measurement_id,
                    quantity=quantity,
                )
                self._data.inventory.append(lot)
            else:
                current = self._data.inventory[i]
                lot = current.model_copy(update={"quantity": current.quantity + quantity})
                self._data.inventory[i] = lot
            self._commit()
            return lot

    def edit_inventory(
        self,
        user_id: str,
        ingredient_id: str,
        old_measurement_id: str,
        new_measurement_id: str,
        quantity: float,
    ) -> InventoryItem:
        """Set a lot's quantity, optionally moving it to another unit.

        Moving onto a unit the user already stocks merges the quantities.
        """
        with self._lock:
            _require_positive(quantity, "Quantity")
            i = self._lot_index(user_id, ingredient_id, old_measurement_id)
            if i is None:
                raise NotFoundError(f"No {ingredient_id} stocked in {old_measurement_id}")

            if old_measurement_id == new_measurement_id:
                lot = self._data.inventory[i].model_copy(update={"quantity": quantity})
                self._data.inventory[i] = lot
                self._commit()
                return lot

            self._measurement_index(new_measurement_id)
            del self._data.inventory[i]
            j = self._lot_index(user_id, ingredient_id, new_measurement_id)
            if j is None:
                lot = InventoryItem(
                    user_id=user_id,
                    ingredient_id=ingredient_id,
                    measurement_id=new_measurement_id,
                    quantity=quantity,
                )
                self._data.inventory.append(lot)
            else:
                existing = self._data.inventory[j]
                lot = existing.model_copy(update={"quantity": existing.quantity + quantity})
                self._data.inventory[j] = lot
            self._commit()
            return lot

    def delete_inventory(self, user_id: str, ingredient_id: str, measurement_id: str) -> None:
        with self._lock:
            i = self._lot_index(user_id, ingredient_id, measurement_id)
            if i is None:
                raise NotFoundError(f"No {ingredient_id} stocked in {measurement_id}")
            del self._data.inventory[i]
            self._commit()

    def check_inventory(self, user_id: str, ingredient_id: str, measurement_id: str, required_qty: float) -> Sufficiency:
        with self._lock:
            return check_sufficiency(
                ingredient_id, measurement_id, required_qty, self._user_lots(user_id), self.measurement_graph
            )

    # --- Cooking ---

    def _own_session(self, session_id: str, user_id: str) -> CookingSession:
        session = self._sessions.get(session_id)
        if session.user_id != user_id:
            raise NotFoundError(f"Session {session_id} not found")
        return session

    def start_cooking(self, recipe_id: str, user_id: str) -> tuple[CookingSession, bool]:
        with self._lock:
            recipe = self.get_recipe(recipe_id, user_id)
            session, created = self._sessions.start(recipe, user_id)
            if created:
                self._commit()
            return session, created

    def get_active_session(self, recipe_id: str, user_id: str) -> Optional[CookingSession]:
        with self._lock:
            return self._sessions.active_for(recipe_id, user_id)

    def get_session(self, session_id: str, user_id: str) -> CookingSession:
        with self._lock:
            return self._own_session(session_id, user_id)

    def update_session(
        self,
        session_id: str,
        user_id: str,
        *,
        serving_size: Optional[float] = None,
        ingredients_checked: Optional[list[int]] = None,
        steps_checked: Optional[list[int]] = None,
    ) -> CookingSession:
        with self._lock:
            session = self._own_session(session_id, user_id)
            recipe = self.get_recipe(session.recipe_id)
            changes: dict = {}
            if serving_size is not None:
                changes["serving_size"] = _require_positive(serving_size, "Serving size")
            if ingredients_checked is not None:
                changes["ingredients_checked"] = self._checked(ingredients_checked, len(recipe.ingredients), "ingredient")
            if steps_checked is not None:
                changes["steps_checked"] = self._checked(steps_checked, len(recipe.instructions), "step")
            updated = self._sessions.update(session.model_copy(update=changes))
            self._commit()
            return updated

    @staticmethod
    def _checked(indices: list[int], size: int, what: str) -> list[int]:
        out: list[int] = []
        for i in indices:
            if not 0 <= i < size:
                raise ValidationError(f"No {what} at index {i}")
            if i not in out:
                out.append(i)
        return out

    def inventory_check(self, session_id: str, user_id: str) -> tuple[float, list[IngredientRequirement]]:
        """Scaling factor and per-ingredient availability for a session's serving size."""
        with self._lock:
            session = self._own_session(session_id, user_id)
            recipe = self.get_recipe(session.recipe_id)
            requirements = preview_deductions(
                recipe, session.serving_size, self._user_lots(user_id), self.measurement_graph
            )
            return scaling_factor(session.serving_size, recipe.servings), requirements

    def complete_cooking(self, session_id: str, user_id: str, *, require_all_checked: bool = True) -> CompletionResult:
        with self._lock:
            session = self._own_session(session_id, user_id)
            i = self._recipe_index(session.recipe_id)
            recipe = self._data.recipes[i]
            if require_all_checked and session.status == "active" and not is_ready_to_complete(session, recipe):
                raise SessionStateError("Check off all ingredients and steps before completing")

            result = self._sessions.complete(session_id, recipe, self._data.inventory, self.measurement_graph)
            self._data.recipes[i] = result.recipe
            self._data.inventory = result.inventory
            self._commit()
            return result

    def cancel_cooking(self, session_id: str, user_id: str) -> CookingSession:
        with self._lock:
            self._own_session(session_id, user_id)
            session = self._sessions.cancel(session_id)
            self._commit()
            return session
