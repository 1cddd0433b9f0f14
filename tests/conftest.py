from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from taste_engine.main import app


@pytest.fixture(autouse=True)
def clear_dependency_overrides() -> Iterator[None]:
    app.dependency_overrides.clear()
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client() -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def catalog() -> dict:
    return {
        "books": {
            "b1": {"id": "b1", "title": "Dune", "genres": ["Sci-Fi", "Adventure"]},
            "b2": {"id": "b2", "title": "Emma", "genres": ["Romance", "Comedy"]},
        },
        "anime": {
            "a1": {"id": "a1", "title": "Planetes", "genres": ["Sci-Fi", "Drama"]},
        },
        "movies": {
            "m1": {"id": "m1", "title": "Arrival", "genres": ["Sci-Fi", "Drama"]},
        },
    }
