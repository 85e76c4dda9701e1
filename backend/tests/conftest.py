import pytest
from fastapi.testclient import TestClient #fake http client that calls FastAPI routes without a real server.

from examforge.main import app


@pytest.fixture() #test client
def client():
    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear() #tests may swap the exam policy dependency
