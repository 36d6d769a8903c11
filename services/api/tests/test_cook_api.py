FLOUR, CUP = "78", "1"


def create_flour_recipe(client, headers):
    res = client.post("/api/recipes", headers=headers, json={
        "name": "Flatbread",
        "servings": 4,
        "ingredients": [{"ingredient_id": FLOUR, "quantity": 2, "measurement_id": CUP}],
        "instructions": ["Mix", "Bake"],
    })
    assert res.status_code == 201
    return res.json()


def test_start_session_is_idempotent(client, demo_headers):
    recipe = create_flour_recipe(client, demo_headers)

    first = client.post("/api/cook/session/start", headers=demo_headers, json={"recipe_id": recipe["id"]})
    assert first.status_code == 200
    assert first.json()["created"] is True
    session_id = first.json()["session"]["id"]

    client.patch(f"/api/cook/session/{session_id}", headers=demo_headers, json={"ingredients_checked": [0]})

    second = client.post("/api/cook/session/start", headers=demo_headers, json={"recipe_id": recipe["id"]})
    assert second.json()["created"] is False
    assert second.json()["session"]["id"] == session_id
    assert second.json()["session"]["ingredients_checked"] == [0]


def test_active_session_lookup(client, demo_headers):
    res = client.get("/api/cook/session/active", headers=demo_headers, params={"recipe_id": "1"})
    assert res.status_code == 200
    assert res.json() is None

    started = client.post("/api/cook/session/start", headers=demo_headers, json={"recipe_id": "1"}).json()
    res = client.get("/api/cook/session/active", headers=demo_headers, params={"recipe_id": "1"})
    assert res.json()["session"]["id"] == started["session"]["id"]


def test_full_cook_flow_deducts_inventory(client, demo_headers):
    recipe = create_flour_recipe(client, demo_headers)
    client.post("/api/inventory/", headers=demo_headers, json={
        "ingredient_id": FLOUR, "measurement_id": CUP, "quantity": 1,
    })

    session = client.post("/api/cook/session/start", headers=demo_headers, json={"recipe_id": recipe["id"]}).json()["session"]
    sid = session["id"]
    res = client.patch(f"/api/cook/session/{sid}", headers=demo_headers, json={
        "serving_size": 2, "ingredients_checked": [0], "steps_checked": [0, 1],
    })
    assert res.status_code == 200

    check = client.get(f"/api/cook/session/{sid}/inventory-check", headers=demo_headers).json()
    assert check["scaling_factor"] == 0.5
    assert check["missing"] == []

    done = client.post(f"/api/cook/session/{sid}/complete", headers=demo_headers)
    assert done.status_code == 200
    body = done.json()
    assert body["session"]["status"] == "completed"
    assert body["recipe"]["cook_count"] == 1
    assert body["deducted"] == {FLOUR: [{"measurement_id": CUP, "quantity": 1.0}]}
    assert body["inventory"] == []

    again = client.post(f"/api/cook/session/{sid}/complete", headers=demo_headers)
    assert again.status_code == 409


def test_complete_with_unchecked_items_conflicts(client, demo_headers):
    sid = client.post("/api/cook/session/start", headers=demo_headers, json={"recipe_id": "2"}).json()["session"]["id"]
    res = client.post(f"/api/cook/session/{sid}/complete", headers=demo_headers)
    assert res.status_code == 409


def test_inventory_check_lists_missing(client, demo_headers):
    sid = client.post("/api/cook/session/start", headers=demo_headers, json={"recipe_id": "2"}).json()["session"]["id"]
    check = client.get(f"/api/cook/session/{sid}/inventory-check", headers=demo_headers).json()
    assert check["scaling_factor"] == 1
    assert len(check["missing"]) == len(check["requirements"]) == 6


def test_cancel_session(client, demo_headers):
    sid = client.post("/api/cook/session/start", headers=demo_headers, json={"recipe_id": "1"}).json()["session"]["id"]
    res = client.post(f"/api/cook/session/{sid}/cancel", headers=demo_headers)
    assert res.json()["session"]["status"] == "cancelled"

    assert client.patch(f"/api/cook/session/{sid}", headers=demo_headers, json={"serving_size": 3}).status_code == 409


def test_bad_serving_size_is_rejected(client, demo_headers):
    sid = client.post("/api/cook/session/start", headers=demo_headers, json={"recipe_id": "1"}).json()["session"]["id"]
    res = client.patch(f"/api/cook/session/{sid}", headers=demo_headers, json={"serving_size": 0})
    assert res.status_code == 422


def test_unknown_recipe_is_404(client, demo_headers):
    res = client.post("/api/cook/session/start", headers=demo_headers, json={"recipe_id": "missing"})
    assert res.status_code == 404


def test_sessions_are_private(client, demo_headers):
    sid = client.post("/api/cook/session/start", headers=demo_headers, json={"recipe_id": "1"}).json()["session"]["id"]
    other = client.post("/api/auth/signup", json={"username": "eve", "password": "pw"}).json()
    res = client.get(f"/api/cook/session/{sid}", headers={"X-User-Id": other["id"]})
    assert res.status_code == 404
