import os

import pytest

# in-memory database for the whole test session; set before app modules are imported
os.environ["DATABASE_URL"] = "sqlite://"

from fastapi.testclient import TestClient  # noqa: E402

from app.database import Base, engine  # noqa: E402
from app.main import app  # noqa: E402
from app import models  # noqa: E402,F401


@pytest.fixture
def client():
    """Test client over a freshly created schema"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    with TestClient(app) as test_client:
        yield test_client
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def seeded_client(client):
    """Test client with a handful of analysed strings already stored"""
    for value in ["racecar", "hello world", "a", "noon", "zebra crossing ahead", "Level", "python"]:
        response = client.post("/strings", json={"value": value})
        assert response.status_code == 201
    return client
