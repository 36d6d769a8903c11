from typing import Optional

from fastapi import APIRouter, Depends, status

from ..deps import get_kitchen
from ..schemas import Ingredient, NameIn
from ..services.kitchen import Kitchen

router = APIRouter()


@router.get("/", response_model=list[Ingredient])
def list_ingredients(q: Optional[str] = None, kitchen: Kitchen = Depends(get_kitchen)):
    return kitchen.list_ingredients(q or "")


@router.post("/", response_model=Ingredient, status_code=status.HTTP_201_CREATED)
def add_ingredient(body: NameIn, kitchen: Kitchen = Depends(get_kitchen)):
    return kitchen.add_ingredient(body.name)


@router.patch("/{ingredient_id}", response_model=Ingredient)
def rename_ingredient(ingredient_id: str, body: NameIn, kitchen: Kitchen = Depends(get_kitchen)):
    return kitchen.rename_ingredient(ingredient_id, body.name)


@router.delete("/{ingredient_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_ingredient(ingredient_id: str, kitchen: Kitchen = Depends(get_kitchen)):
    kitchen.delete_ingredient(ingredient_id)
