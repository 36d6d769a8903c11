import pytest
import fakeredis
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from cucina.main import app
from cucina.db import Base
from cucina.deps import get_kitchen
from cucina.infra import redis_client
from cucina.schemas import Measurement, MeasurementConversion
from cucina.services.catalog_store import SqlCatalogStore
from cucina.services.kitchen import Kitchen
from cucina.services.seed_data import DEMO_USER_ID

# --- Test Database Setup ---

SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,  # share the in-memory db across sessions
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test, drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def mock_redis():
    server = fakeredis.FakeServer()
    redis_client._redis_sync = fakeredis.FakeRedis(server=server, decode_responses=True)
    yield redis_client._redis_sync
    redis_client._redis_sync = None


@pytest.fixture
def session_factory():
    return TestingSessionLocal


@pytest.fixture
def store(session_factory):
    return SqlCatalogStore(session_factory=session_factory)


@pytest.fixture
def kitchen(store):
    return Kitchen(store)


@pytest.fixture
def client(kitchen):
    """Test client bound to a fresh kitchen on the in-memory db."""
    app.dependency_overrides[get_kitchen] = lambda: kitchen
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def demo_headers():
    return {"X-User-Id": DEMO_USER_ID}


@pytest.fixture
def measurements():
    """Small graph: cup/tablespoon/ml with authored edges, piece with none."""
    return [
        Measurement(id="cup", name="cup", conversions=[
            MeasurementConversion(to_measurement_id="tablespoon", factor=16),
            MeasurementConversion(to_measurement_id="ml", factor=236.588),
        ]),
        Measurement(id="tablespoon", name="tablespoon", conversions=[
            MeasurementConversion(to_measurement_id="cup", factor=0.0625),
        ]),
        Measurement(id="ml", name="milliliter", conversions=[
            MeasurementConversion(to_measurement_id="cup", factor=0.00422675),
        ]),
        Measurement(id="piece", name="piece"),
    ]
