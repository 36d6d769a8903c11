import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ..deps import get_current_user_id, get_kitchen
from ..schemas import InventoryCreate, InventoryEdit, InventoryItem, SufficiencyOut
from ..services.kitchen import Kitchen

router = APIRouter()
logger = logging.getLogger("cucina.inventory")


@router.get("/", response_model=list[InventoryItem])
def list_inventory(
    q: Optional[str] = None,
    user_id: str = Depends(get_current_user_id),
    kitchen: Kitchen = Depends(get_kitchen),
):
    """List the user's lots, optionally filtered by ingredient name."""
    return kitchen.list_inventory(user_id, q or "")


@router.post("/", response_model=InventoryItem, status_code=status.HTTP_201_CREATED)
def add_inventory(
    item_in: InventoryCreate,
    user_id: str = Depends(get_current_user_id),
    kitchen: Kitchen = Depends(get_kitchen),
):
    """Add stock. Adding to an ingredient already stocked in that unit tops the lot up."""
    return kitchen.add_inventory(user_id, item_in.ingredient_id, item_in.measurement_id, item_in.quantity)


@router.put("/", response_model=InventoryItem)
def edit_inventory(
    edit: InventoryEdit,
    user_id: str = Depends(get_current_user_id),
    kitchen: Kitchen = Depends(get_kitchen),
):
    return kitchen.edit_inventory(
        user_id,
        edit.ingredient_id,
        edit.old_measurement_id,
        edit.new_measurement_id,
        edit.quantity,
    )


@router.delete("/{ingredient_id}/{measurement_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_inventory(
    ingredient_id: str,
    measurement_id: str,
    user_id: str = Depends(get_current_user_id),
    kitchen: Kitchen = Depends(get_kitchen),
):
    kitchen.delete_inventory(user_id, ingredient_id, measurement_id)


@router.get("/check", response_model=SufficiencyOut)
def check_inventory(
    ingredient_id: str,
    measurement_id: str,
    qty: float = Query(..., ge=0),
    user_id: str = Depends(get_current_user_id),
    kitchen: Kitchen = Depends(get_kitchen),
):
    """Whether the user's lots cover ``qty`` of an ingredient in the given unit."""
    has_enough, available = kitchen.check_inventory(user_id, ingredient_id, measurement_id, qty)
    return SufficiencyOut(
        ingredient_id=ingredient_id,
        measurement_id=measurement_id,
        required_qty=qty,
        has_enough=has_enough,
        available=available,
    )
