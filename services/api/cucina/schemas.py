"""Pydantic schemas for Cucina.

Domain entities persisted in the catalog aggregate:
- Users, Ingredients, Measurements (with directed conversion edges)
- Recipes, Inventory lots, Cooking sessions
- AppData (the aggregate itself)

Request/response models for the HTTP layer follow below.
"""

from typing import Optional, Literal

from pydantic import BaseModel, Field


SessionStatus = Literal["active", "completed", "cancelled"]


# --- Users ---

class User(BaseModel):
    id: str
    username: str
    password_hash: str


class UserOut(BaseModel):
    id: str
    username: str


# --- Ingredients ---

class Ingredient(BaseModel):
    id: str
    name: str
    is_custom: bool = False


# --- Measurements ---

class MeasurementConversion(BaseModel):
    """Directed edge: 1 unit of the owning measurement = factor units of target."""
    to_measurement_id: str
    factor: float


class Measurement(BaseModel):
    id: str
    name: str
    conversions: list[MeasurementConversion] = Field(default_factory=list)


# --- Recipes ---

class RecipeIngredient(BaseModel):
    ingredient_id: str
    quantity: float
    measurement_id: str


class Recipe(BaseModel):
    id: str
    user_id: str
    name: str
    description: str = ""
    servings: float
    ingredients: list[RecipeIngredient] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)
    view_count: int = 0
    cook_count: int = 0
    created_at: int = 0  # epoch millis


# --- Inventory ---

class InventoryItem(BaseModel):
    """A lot: one (user, ingredient, unit) stock record."""
    user_id: str
    ingredient_id: str
    measurement_id: str
    quantity: float

    @property
    def key(self) -> tuple[str, str, str]:
        return (self.user_id, self.ingredient_id, self.measurement_id)


# --- Cooking sessions ---

class CookingSession(BaseModel):
    id: str
    recipe_id: str
    user_id: str
    ingredients_checked: list[int] = Field(default_factory=list)
    steps_checked: list[int] = Field(default_factory=list)
    serving_size: float
    status: SessionStatus = "active"


# --- Aggregate ---

class AppData(BaseModel):
    users: list[User] = Field(default_factory=list)
    recipes: list[Recipe] = Field(default_factory=list)
    ingredients: list[Ingredient] = Field(default_factory=list)
    measurements: list[Measurement] = Field(default_factory=list)
    inventory: list[InventoryItem] = Field(default_factory=list)
    cooking_sessions: list[CookingSession] = Field(default_factory=list)
    current_user_id: Optional[str] = None
    version: Optional[int] = None


# --- Engine results ---

class DeductionEntry(BaseModel):
    measurement_id: str
    quantity: float


class IngredientRequirement(BaseModel):
    ingredient_id: str
    measurement_id: str
    required_qty: float
    available: float
    has_enough: bool
    shortfall: float


# --- Auth API ---

class Credentials(BaseModel):
    username: str = Field(..., min_length=1, max_length=80)
    password: str = Field(..., min_length=1)


# --- Recipe API ---

class RecipeIngredientIn(BaseModel):
    ingredient_id: str
    quantity: float = Field(..., gt=0)
    measurement_id: str


class RecipeCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    servings: float = Field(..., gt=0)
    ingredients: list[RecipeIngredientIn] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)


class RecipePatch(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    servings: Optional[float] = Field(None, gt=0)
    ingredients: Optional[list[RecipeIngredientIn]] = None
    instructions: Optional[list[str]] = None


class DashboardOut(BaseModel):
    total_recipes: int
    total_cooks: int
    most_cooked: list[Recipe]
    most_viewed: list[Recipe]


# --- Ingredient / Measurement API ---

class NameIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)


class ConversionIn(BaseModel):
    to_measurement_id: str
    factor: float = Field(..., gt=0)


# --- Unit conversion API ---

class UnitConvertRequest(BaseModel):
    qty: float
    from_measurement_id: str
    to_measurement_id: str


class UnitConvertResponse(BaseModel):
    qty: Optional[float]
    measurement_id: str
    convertible: bool


# --- Inventory API ---

class InventoryCreate(BaseModel):
    ingredient_id: str
    measurement_id: str
    quantity: float = Field(..., gt=0)


class InventoryEdit(BaseModel):
    ingredient_id: str
    old_measurement_id: str
    new_measurement_id: str
    quantity: float = Field(..., gt=0)


class SufficiencyOut(BaseModel):
    ingredient_id: str
    measurement_id: str
    required_qty: float
    has_enough: bool
    available: float


# --- Cook session API ---

class SessionStartRequest(BaseModel):
    recipe_id: str


class SessionPatchRequest(BaseModel):
    serving_size: Optional[float] = Field(None, gt=0)
    ingredients_checked: Optional[list[int]] = None
    steps_checked: Optional[list[int]] = None


class SessionResponse(BaseModel):
    session: CookingSession
    created: bool = False


class InventoryCheckResponse(BaseModel):
    session_id: str
    scaling_factor: float
    requirements: list[IngredientRequirement]
    missing: list[IngredientRequirement]


class CookCompleteResponse(BaseModel):
    session: CookingSession
    recipe: Recipe
    deducted: dict[str, list[DeductionEntry]]
    inventory: list[InventoryItem]
