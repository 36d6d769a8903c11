import pytest

CUP, TABLESPOON, PIECE = "1", "2", "15"
FLOUR = "78"


def test_ready(client):
    res = client.get("/api/ready")
    assert res.status_code == 200
    assert res.json()["ok"] is True


# --- Auth ---

def test_signup_and_login(client):
    res = client.post("/api/auth/signup", json={"username": "alice", "password": "pw"})
    assert res.status_code == 201
    assert "password_hash" not in res.json()

    assert client.post("/api/auth/login", json={"username": "alice", "password": "nope"}).status_code == 401

    res = client.post("/api/auth/login", json={"username": "alice", "password": "pw"})
    assert res.status_code == 200
    # Logged-in user is used when no header is sent
    assert client.get("/api/auth/me").json()["username"] == "alice"

    assert client.post("/api/auth/logout").status_code == 204
    assert client.get("/api/auth/me").status_code == 401


def test_duplicate_signup_is_400(client):
    res = client.post("/api/auth/signup", json={"username": "demo", "password": "pw"})
    assert res.status_code == 400


def test_unknown_user_header_is_401(client):
    assert client.get("/api/recipes", headers={"X-User-Id": "ghost"}).status_code == 401


# --- Recipes ---

def test_recipe_crud(client, demo_headers):
    res = client.post("/api/recipes", headers=demo_headers, json={
        "name": "Toast",
        "servings": 1,
        "ingredients": [{"ingredient_id": FLOUR, "quantity": 1, "measurement_id": CUP}],
        "instructions": ["Toast it", "  "],
    })
    assert res.status_code == 201
    recipe = res.json()
    assert recipe["instructions"] == ["Toast it"]

    res = client.patch(f"/api/recipes/{recipe['id']}", headers=demo_headers, json={"name": "Better Toast"})
    assert res.json()["name"] == "Better Toast"

    res = client.post(f"/api/recipes/{recipe['id']}/view", headers=demo_headers)
    assert res.json()["view_count"] == 1

    names = [r["name"] for r in client.get("/api/recipes", headers=demo_headers, params={"q": "toast"}).json()]
    assert names == ["Better Toast"]

    assert client.delete(f"/api/recipes/{recipe['id']}", headers=demo_headers).status_code == 204
    assert client.get(f"/api/recipes/{recipe['id']}", headers=demo_headers).status_code == 404


@pytest.mark.parametrize("body", [
    {"name": "No servings", "servings": 0},
    {"name": "", "servings": 2},
    {"name": "Neg", "servings": 2, "ingredients": [{"ingredient_id": FLOUR, "quantity": -1, "measurement_id": CUP}]},
])
def test_invalid_recipe_is_422(client, demo_headers, body):
    assert client.post("/api/recipes", headers=demo_headers, json=body).status_code == 422


def test_unknown_ingredient_reference_is_400(client, demo_headers):
    res = client.post("/api/recipes", headers=demo_headers, json={
        "name": "Mystery",
        "servings": 1,
        "ingredients": [{"ingredient_id": "nope", "quantity": 1, "measurement_id": CUP}],
    })
    assert res.status_code == 400


def test_dashboard(client, demo_headers):
    board = client.get("/api/recipes/dashboard", headers=demo_headers).json()
    assert board["total_recipes"] == 2
    assert [r["name"] for r in board["most_cooked"]] == ["Garlic Butter Chicken", "Spaghetti Carbonara"]


# --- Ingredients & measurements ---

def test_ingredient_endpoints(client):
    created = client.post("/api/ingredients/", json={"name": "Sumac"}).json()
    assert created["is_custom"] is True
    assert client.patch(f"/api/ingredients/{created['id']}", json={"name": "Ground Sumac"}).status_code == 200
    assert [i["name"] for i in client.get("/api/ingredients/", params={"q": "sumac"}).json()] == ["Ground Sumac"]
    assert client.delete(f"/api/ingredients/{created['id']}").status_code == 204
    assert client.delete(f"/api/ingredients/{created['id']}").status_code == 404


def test_measurement_conversion_endpoints(client):
    scoop = client.post("/api/measurements/", json={"name": "scoop"}).json()

    res = client.put(f"/api/measurements/{scoop['id']}/conversions", json={"to_measurement_id": CUP, "factor": 0.25})
    assert res.status_code == 200
    assert res.json()["conversions"] == [{"to_measurement_id": CUP, "factor": 0.25}]

    convertible = client.get(f"/api/measurements/{scoop['id']}/convertible").json()
    assert [m["name"] for m in convertible] == ["cup"]

    res = client.delete(f"/api/measurements/{scoop['id']}/conversions/{CUP}")
    assert res.json()["conversions"] == []


def test_unit_convert(client):
    res = client.post("/api/units/convert", json={"qty": 1, "from_measurement_id": CUP, "to_measurement_id": TABLESPOON})
    assert res.json() == {"qty": 16.0, "measurement_id": TABLESPOON, "convertible": True}

    res = client.post("/api/units/convert", json={"qty": 1, "from_measurement_id": PIECE, "to_measurement_id": CUP})
    assert res.status_code == 200
    assert res.json()["qty"] is None
    assert res.json()["convertible"] is False


# --- Inventory ---

def test_inventory_endpoints(client, demo_headers):
    client.post("/api/inventory/", headers=demo_headers, json={"ingredient_id": FLOUR, "measurement_id": CUP, "quantity": 1})
    res = client.post("/api/inventory/", headers=demo_headers, json={"ingredient_id": FLOUR, "measurement_id": CUP, "quantity": 1})
    assert res.json()["quantity"] == 2

    res = client.put("/api/inventory/", headers=demo_headers, json={
        "ingredient_id": FLOUR, "old_measurement_id": CUP, "new_measurement_id": TABLESPOON, "quantity": 32,
    })
    assert res.json()["measurement_id"] == TABLESPOON

    check = client.get("/api/inventory/check", headers=demo_headers, params={
        "ingredient_id": FLOUR, "measurement_id": CUP, "qty": 2,
    }).json()
    assert check["has_enough"] is True
    assert check["available"] == 2

    assert client.delete(f"/api/inventory/{FLOUR}/{TABLESPOON}", headers=demo_headers).status_code == 204
    assert client.get("/api/inventory/", headers=demo_headers).json() == []


def test_inventory_requires_user(client):
    assert client.get("/api/inventory/").status_code == 401


def test_patch_with_null_fields_leaves_recipe_unchanged(client, demo_headers, store):
    recipe = client.post("/api/recipes", headers=demo_headers, json={
        "name": "Toast",
        "description": "Crisp",
        "servings": 1,
        "ingredients": [{"ingredient_id": FLOUR, "quantity": 1, "measurement_id": CUP}],
        "instructions": ["Toast it"],
    }).json()

    res = client.patch(f"/api/recipes/{recipe['id']}", headers=demo_headers, json={
        "description": None, "instructions": None, "ingredients": None,
    })
    assert res.status_code == 200
    assert res.json()["description"] == "Crisp"
    assert res.json()["instructions"] == ["Toast it"]
    assert len(res.json()["ingredients"]) == 1

    stored = store.load()
    assert [r.description for r in stored.recipes if r.id == recipe["id"]] == ["Crisp"]
