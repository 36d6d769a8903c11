import logging
from typing import NamedTuple, Sequence

from ..schemas import DeductionEntry, IngredientRequirement, InventoryItem, Recipe
from .unit_conversion import Measurements, as_graph, check_sufficiency, convert, shortfall

logger = logging.getLogger("cucina.inventory")

# Lots left at or below this quantity are removed instead of kept as a zero row
DEDUCTION_EPSILON = 1e-3


class DeductionResult(NamedTuple):
    updated_lots: list[InventoryItem]
    ledger: list[DeductionEntry]
    remaining: float


def scaling_factor(serving_size: float, servings: float) -> float:
    return serving_size / servings


def deduct(
    ingredient_id: str,
    required_unit: str,
    required_qty: float,
    lots: Sequence[InventoryItem],
    measurements: Measurements,
    user_id: str,
) -> DeductionResult:
    """Deplete a user's lots of one ingredient by ``required_qty`` of ``required_unit``.

    Lots already in ``required_unit`` are drawn first; other lots keep their
    relative order. A lot with no conversion path from the required unit is
    skipped. When the amount taken from a lot cannot be converted back into the
    required unit, ``remaining`` is not reduced for it.

    Insufficient stock is not an error: the returned ``remaining`` is simply
    left above zero. ``lots`` is never modified.
    """
    graph = as_graph(measurements)
    updated: list[InventoryItem | None] = list(lots)
    ledger: list[DeductionEntry] = []
    remaining = required_qty

    candidates = [
        i for i, lot in enumerate(updated)
        if lot.user_id == user_id and lot.ingredient_id == ingredient_id
    ]
    # Stable partition: exact unit first
    candidates.sort(key=lambda i: updated[i].measurement_id != required_unit)

    for i in candidates:
        if remaining <= 0:
            break
        lot = updated[i]

        wanted = convert(required_unit, lot.measurement_id, remaining, graph)
        if wanted is None:
            continue

        to_deduct = min(lot.quantity, wanted)
        new_qty = lot.quantity - to_deduct
        updated[i] = lot.model_copy(update={"quantity": new_qty}) if new_qty > DEDUCTION_EPSILON else None

        ledger.append(DeductionEntry(measurement_id=lot.measurement_id, quantity=to_deduct))

        taken = convert(lot.measurement_id, required_unit, to_deduct, graph)
        if taken is not None:
            remaining -= taken
        else:
            logger.debug(
                f"No edge {lot.measurement_id} -> {required_unit}; "
                f"remaining for {ingredient_id} not reduced"
            )

    return DeductionResult(
        updated_lots=[lot for lot in updated if lot is not None],
        ledger=ledger,
        remaining=max(remaining, 0.0),
    )


def preview_deductions(
    recipe: Recipe,
    serving_size: float,
    lots: Sequence[InventoryItem],
    measurements: Measurements,
) -> list[IngredientRequirement]:
    """Scaled requirement and availability for every ingredient of a recipe."""
    graph = as_graph(measurements)
    scale = scaling_factor(serving_size, recipe.servings)

    results = []
    for ing in recipe.ingredients:
        required = ing.quantity * scale
        has_enough, available = check_sufficiency(
            ing.ingredient_id, ing.measurement_id, required, lots, graph
        )
        results.append(IngredientRequirement(
            ingredient_id=ing.ingredient_id,
            measurement_id=ing.measurement_id,
            required_qty=required,
            available=available,
            has_enough=has_enough,
            shortfall=shortfall(required, available),
        ))
    return results
