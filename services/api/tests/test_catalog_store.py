import json

import pytest

from cucina.db import session_scope
from cucina.models import KeyValueRecord
from cucina.schemas import AppData, Ingredient, Measurement
from cucina.services.catalog_store import (
    RedisCatalogStore,
    SqlCatalogStore,
    generate_id,
    merge_default_items,
    migrate,
)
from cucina.services.seed_data import DATA_VERSION, DEMO_USER_ID, default_app_data


def test_missing_record_yields_defaults(store):
    data = store.load()
    assert data.version == DATA_VERSION
    assert len(data.measurements) == 25
    assert len(data.ingredients) == 132
    assert [r.name for r in data.recipes] == ["Spaghetti Carbonara", "Garlic Butter Chicken"]
    assert data.users[0].id == DEMO_USER_ID


def test_save_then_load(store):
    data = default_app_data()
    data.ingredients.append(Ingredient(id="x1", name="Saffron", is_custom=True))
    store.save(data)

    loaded = store.load()
    assert loaded.ingredients[-1].name == "Saffron"
    assert loaded.ingredients[-1].is_custom is True


def test_corrupt_record_falls_back_to_defaults(store):
    store._write("{not json")
    data = store.load()
    assert data.version == DATA_VERSION
    assert len(data.recipes) == 2


def test_old_version_is_migrated_and_saved(store):
    old = AppData(
        ingredients=[Ingredient(id="900", name="salt")],
        measurements=[Measurement(id="1", name="My Cup")],
        version=2,
    )
    store._write(old.model_dump_json())

    data = store.load()

    assert data.version == DATA_VERSION
    # "Salt" collides by name, measurement "1" by id
    assert not any(i.id == "1" for i in data.ingredients)
    assert [m.name for m in data.measurements if m.id == "1"] == ["My Cup"]
    assert len(data.measurements) == 25
    assert json.loads(store._read())["version"] == DATA_VERSION


def test_current_version_is_not_remerged():
    data = AppData(ingredients=[], version=DATA_VERSION)
    assert migrate(data) is False
    assert data.ingredients == []


def test_merge_default_items_keeps_existing_first():
    existing = [Ingredient(id="a", name="Thing")]
    merged = merge_default_items(existing, [Ingredient(id="b", name="thing"), Ingredient(id="c", name="Other")])
    assert [i.id for i in merged] == ["a", "c"]


def test_sql_store_is_keyed(session_factory):
    one = SqlCatalogStore(session_factory=session_factory, key="one")
    two = SqlCatalogStore(session_factory=session_factory, key="two")
    data = default_app_data()
    data.recipes = []
    one.save(data)

    assert one.load().recipes == []
    assert len(two.load().recipes) == 2


def test_redis_store_roundtrip(mock_redis):
    redis_store = RedisCatalogStore(client=mock_redis, key="test-data")
    assert redis_store.load().version == DATA_VERSION

    data = default_app_data()
    data.current_user_id = DEMO_USER_ID
    redis_store.save(data)

    assert mock_redis.get("test-data") is not None
    assert redis_store.load().current_user_id == DEMO_USER_ID


def test_redis_store_uses_shared_client(mock_redis):
    RedisCatalogStore(key="shared").save(default_app_data())
    assert mock_redis.exists("shared") == 1


def test_generate_id_is_unique():
    ids = {generate_id() for _ in range(200)}
    assert len(ids) == 200
    assert all(i.isalnum() and i == i.lower() for i in ids)


def test_session_scope_rolls_back_on_error(session_factory):
    with pytest.raises(RuntimeError):
        with session_scope(session_factory) as db:
            db.add(KeyValueRecord(key="half-written", payload="{}"))
            db.flush()
            raise RuntimeError("boom")

    with session_scope(session_factory) as db:
        assert db.get(KeyValueRecord, "half-written") is None
