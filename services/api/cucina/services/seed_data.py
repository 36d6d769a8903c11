"""Default catalog used to bootstrap a new store and to backfill on migration.

Conversion edges are authored per direction, exactly as listed; nothing here
is derived from the reverse edge.
"""

import time

from ..security import hash_password
from ..schemas import AppData, Ingredient, Measurement, MeasurementConversion, Recipe, RecipeIngredient, User

DATA_VERSION = 3

DEMO_USER_ID = "demo"

# (id, name, [(to_id, factor), ...]) with 1 unit(id) = factor unit(to_id)
_MEASUREMENTS = [
    # Volume, US customary
    ("1", "cup", [("2", 16), ("3", 48), ("4", 8), ("5", 0.5), ("6", 0.25), ("7", 0.0625), ("8", 0.236588), ("9", 236.588)]),
    ("2", "tablespoon", [("1", 0.0625), ("3", 3), ("4", 0.5), ("5", 0.03125), ("6", 0.015625), ("7", 0.00390625), ("8", 0.0147868), ("9", 14.7868)]),
    ("3", "teaspoon", [("1", 0.0208333), ("2", 0.333333), ("4", 0.166667), ("5", 0.0104167), ("6", 0.00520833), ("7", 0.00130208), ("8", 0.00492892), ("9", 4.92892)]),
    ("4", "fluid ounce", [("1", 0.125), ("2", 2), ("3", 6), ("5", 0.0625), ("6", 0.03125), ("7", 0.0078125), ("8", 0.0295735), ("9", 29.5735)]),
    ("5", "pint", [("1", 2), ("2", 32), ("3", 96), ("4", 16), ("6", 0.5), ("7", 0.125), ("8", 0.473176), ("9", 473.176)]),
    ("6", "quart", [("1", 4), ("2", 64), ("3", 192), ("4", 32), ("5", 2), ("7", 0.25), ("8", 0.946353), ("9", 946.353)]),
    ("7", "gallon", [("1", 16), ("2", 256), ("3", 768), ("4", 128), ("5", 8), ("6", 4), ("8", 3.78541), ("9", 3785.41)]),
    # Volume, metric
    ("8", "liter", [("9", 1000), ("1", 4.22675), ("2", 67.628), ("3", 202.884), ("4", 33.814), ("5", 2.11338), ("6", 1.05669), ("7", 0.264172)]),
    ("9", "milliliter", [("8", 0.001), ("1", 0.00422675), ("2", 0.067628), ("3", 0.202884), ("4", 0.033814), ("5", 0.00211338), ("6", 0.00105669), ("7", 0.000264172)]),
    # Weight
    ("10", "ounce", [("12", 0.0625), ("11", 28.3495), ("13", 0.0283495), ("14", 28349.5)]),
    ("12", "pound", [("10", 16), ("11", 453.592), ("13", 0.453592), ("14", 453592)]),
    ("14", "milligram", [("11", 0.001), ("13", 0.000001), ("10", 0.000035274), ("12", 0.0000022046)]),
    ("11", "gram", [("14", 1000), ("13", 0.001), ("10", 0.035274), ("12", 0.00220462)]),
    ("13", "kilogram", [("14", 1000000), ("11", 1000), ("10", 35.274), ("12", 2.20462)]),
    # Countable units, no conversions
    ("15", "piece", []),
    ("16", "slice", []),
    ("17", "clove", []),
    ("18", "bunch", []),
    ("19", "can", []),
    ("20", "package", []),
    ("21", "handful", []),
    ("22", "pinch", []),
    ("23", "dash", []),
    ("24", "sprig", []),
    ("25", "leaf", []),
]

_INGREDIENTS = [
    # Seasonings & Spices
    ("1", "Salt"),
    ("2", "Black Pepper"),
    ("3", "White Pepper"),
    ("4", "Red Pepper Flakes"),
    ("5", "Paprika"),
    ("6", "Cayenne Pepper"),
    ("7", "Cumin"),
    ("8", "Coriander"),
    ("9", "Turmeric"),
    ("10", "Cinnamon"),
    ("11", "Nutmeg"),
    ("12", "Ginger"),
    ("13", "Garlic Powder"),
    ("14", "Onion Powder"),
    ("15", "Chili Powder"),
    # Fresh Herbs
    ("16", "Basil"),
    ("17", "Oregano"),
    ("18", "Thyme"),
    ("19", "Rosemary"),
    ("20", "Parsley"),
    ("21", "Cilantro"),
    ("22", "Mint"),
    ("23", "Dill"),
    ("24", "Sage"),
    ("25", "Bay Leaf"),
    # Oils & Fats
    ("26", "Olive Oil"),
    ("27", "Vegetable Oil"),
    ("28", "Coconut Oil"),
    ("29", "Sesame Oil"),
    ("30", "Butter"),
    ("31", "Margarine"),
    # Fresh Vegetables
    ("32", "Onion"),
    ("33", "Garlic"),
    ("34", "Tomato"),
    ("35", "Bell Pepper"),
    ("36", "Carrot"),
    ("37", "Celery"),
    ("38", "Potato"),
    ("39", "Sweet Potato"),
    ("40", "Broccoli"),
    ("41", "Cauliflower"),
    ("42", "Spinach"),
    ("43", "Kale"),
    ("44", "Lettuce"),
    ("45", "Cucumber"),
    ("46", "Zucchini"),
    ("47", "Eggplant"),
    ("48", "Mushroom"),
    ("49", "Corn"),
    ("50", "Green Beans"),
    # Proteins
    ("51", "Chicken Breast"),
    ("52", "Chicken Thigh"),
    ("53", "Ground Beef"),
    ("54", "Beef Steak"),
    ("55", "Pork Chop"),
    ("56", "Ground Pork"),
    ("57", "Bacon"),
    ("58", "Sausage"),
    ("59", "Salmon"),
    ("60", "Tuna"),
    ("61", "Shrimp"),
    ("62", "Tofu"),
    ("63", "Egg"),
    # Dairy
    ("64", "Milk"),
    ("65", "Heavy Cream"),
    ("66", "Sour Cream"),
    ("67", "Yogurt"),
    ("68", "Cheese"),
    ("69", "Parmesan Cheese"),
    ("70", "Mozzarella Cheese"),
    ("71", "Cheddar Cheese"),
    ("72", "Cream Cheese"),
    # Grains & Pasta
    ("73", "Rice"),
    ("74", "Brown Rice"),
    ("75", "Pasta"),
    ("76", "Spaghetti"),
    ("77", "Bread"),
    ("78", "Flour"),
    ("79", "All-Purpose Flour"),
    ("80", "Bread Flour"),
    ("81", "Whole Wheat Flour"),
    ("82", "Cornstarch"),
    ("83", "Breadcrumbs"),
    ("84", "Oats"),
    ("85", "Quinoa"),
    # Legumes & Beans
    ("86", "Black Beans"),
    ("87", "Kidney Beans"),
    ("88", "Chickpeas"),
    ("89", "Lentils"),
    ("90", "Peanuts"),
    # Sweeteners
    ("91", "Sugar"),
    ("92", "Brown Sugar"),
    ("93", "Honey"),
    ("94", "Maple Syrup"),
    ("95", "Vanilla Extract"),
    # Condiments & Sauces
    ("96", "Soy Sauce"),
    ("97", "Worcestershire Sauce"),
    ("98", "Hot Sauce"),
    ("99", "Ketchup"),
    ("100", "Mustard"),
    ("101", "Mayonnaise"),
    ("102", "Vinegar"),
    ("103", "Balsamic Vinegar"),
    ("104", "Apple Cider Vinegar"),
    ("105", "Lemon Juice"),
    ("106", "Lime Juice"),
    # Canned & Preserved
    ("107", "Tomato Paste"),
    ("108", "Tomato Sauce"),
    ("109", "Canned Tomatoes"),
    ("110", "Chicken Broth"),
    ("111", "Beef Broth"),
    ("112", "Vegetable Broth"),
    ("113", "Coconut Milk"),
    # Baking
    ("114", "Baking Powder"),
    ("115", "Baking Soda"),
    ("116", "Yeast"),
    ("117", "Chocolate Chips"),
    ("118", "Cocoa Powder"),
    # Nuts & Seeds
    ("119", "Almonds"),
    ("120", "Walnuts"),
    ("121", "Cashews"),
    ("122", "Pine Nuts"),
    ("123", "Sesame Seeds"),
    ("124", "Sunflower Seeds"),
    # Fruits
    ("125", "Lemon"),
    ("126", "Lime"),
    ("127", "Apple"),
    ("128", "Banana"),
    ("129", "Orange"),
    ("130", "Strawberry"),
    ("131", "Blueberry"),
    ("132", "Avocado"),
]

_DAY_MS = 86_400_000


def default_measurements() -> list[Measurement]:
    return [
        Measurement(
            id=mid,
            name=name,
            conversions=[MeasurementConversion(to_measurement_id=to, factor=f) for to, f in edges],
        )
        for mid, name, edges in _MEASUREMENTS
    ]


def default_ingredients() -> list[Ingredient]:
    return [Ingredient(id=iid, name=name) for iid, name in _INGREDIENTS]


def default_recipes(now_ms: int | None = None) -> list[Recipe]:
    now_ms = int(time.time() * 1000) if now_ms is None else now_ms
    return [
        Recipe(
            id="1",
            user_id=DEMO_USER_ID,
            name="Spaghetti Carbonara",
            description="Classic Italian pasta dish with eggs, cheese, and pancetta",
            servings=4,
            ingredients=[
                RecipeIngredient(ingredient_id="75", quantity=400, measurement_id="11"),
                RecipeIngredient(ingredient_id="63", quantity=4, measurement_id="15"),
                RecipeIngredient(ingredient_id="68", quantity=100, measurement_id="11"),
                RecipeIngredient(ingredient_id="2", quantity=1, measurement_id="3"),
                RecipeIngredient(ingredient_id="1", quantity=1, measurement_id="22"),
            ],
            instructions=[
                "Bring a large pot of salted water to boil and cook pasta according to package directions",
                "While pasta cooks, whisk eggs and grated cheese together in a bowl",
                "Cook pancetta in a large skillet until crispy",
                "Drain pasta, reserving 1 cup of pasta water",
                "Add hot pasta to the skillet with pancetta",
                "Remove from heat and quickly mix in egg mixture, adding pasta water to create a creamy sauce",
                "Season with black pepper and serve immediately",
            ],
            view_count=24,
            cook_count=8,
            created_at=now_ms - _DAY_MS * 30,
        ),
        Recipe(
            id="2",
            user_id=DEMO_USER_ID,
            name="Garlic Butter Chicken",
            description="Juicy chicken breasts in a rich garlic butter sauce",
            servings=2,
            ingredients=[
                RecipeIngredient(ingredient_id="51", quantity=2, measurement_id="15"),
                RecipeIngredient(ingredient_id="30", quantity=3, measurement_id="2"),
                RecipeIngredient(ingredient_id="33", quantity=4, measurement_id="17"),
                RecipeIngredient(ingredient_id="1", quantity=1, measurement_id="3"),
                RecipeIngredient(ingredient_id="2", quantity=0.5, measurement_id="3"),
                RecipeIngredient(ingredient_id="5", quantity=1, measurement_id="3"),
            ],
            instructions=[
                "Season chicken breasts with salt, pepper, and paprika",
                "Heat 1 tablespoon butter in a skillet over medium-high heat",
                "Cook chicken for 6-7 minutes per side until golden and cooked through",
                "Remove chicken and set aside",
                "Add remaining butter and minced garlic to the pan",
                "Cook garlic for 1 minute until fragrant",
                "Return chicken to pan and coat with garlic butter",
                "Serve hot with your favorite sides",
            ],
            view_count=18,
            cook_count=12,
            created_at=now_ms - _DAY_MS * 15,
        ),
    ]


def default_app_data() -> AppData:
    return AppData(
        users=[User(id=DEMO_USER_ID, username="demo", password_hash=hash_password("demo"))],
        recipes=default_recipes(),
        ingredients=default_ingredients(),
        measurements=default_measurements(),
        inventory=[],
        cooking_sessions=[],
        current_user_id=None,
        version=DATA_VERSION,
    )
