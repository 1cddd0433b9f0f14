from fastapi.testclient import TestClient


def _make_record(media_type: str | None, media_id: str, rating: int | None = None) -> dict:
    return {
        "media_type": media_type,
        "media_id": media_id,
        "rating": rating,
        "timestamp": "2026-04-01T00:00:00Z",
    }


def test_score_compatibility(client: TestClient, catalog: dict) -> None:
    response = client.post(
        "/compatibility",
        json={
            "library_a": [_make_record("book", "b1", 9)],
            "library_b": [_make_record("book", "b1", 8)],
            "catalog": catalog,
        },
    )

    assert response.status_code == 200
    data = response.json()
    compatibility = data["compatibility"]
    assert compatibility["shared_items_count"] == 1
    assert abs(compatibility["overall_score"] - 69.0) < 1e-9
    assert abs(compatibility["rating_correlation"] - 0.9) < 1e-9
    assert compatibility["genre_overlap_score"] == 100.0
    assert set(compatibility["per_type_compatibility"]) == {
        "book",
        "anime",
        "manga",
        "movie",
        "music",
    }
    assert data["taste_highlights"]["shared_genres"] == ["Adventure", "Sci-Fi"]
    assert data["taste_highlights"]["similar_favorites"][0]["title"] == "Dune"
    assert data["insight"]["summary"].startswith("Great compatibility! 69%")


def test_score_compatibility_empty_library(client: TestClient) -> None:
    response = client.post(
        "/compatibility",
        json={"library_a": [], "library_b": [_make_record("movie", "m1", 7)]},
    )

    assert response.status_code == 200
    compatibility = response.json()["compatibility"]
    assert compatibility["overall_score"] == 0.0
    assert compatibility["shared_items_count"] == 0


def test_score_compatibility_rejects_unknown_media_type(client: TestClient) -> None:
    response = client.post(
        "/compatibility",
        json={"library_a": [_make_record("podcast", "p1")], "library_b": []},
    )

    assert response.status_code == 422
    assert "unknown media_type" in response.json()["detail"]


def test_score_compatibility_rejects_out_of_scale_rating(client: TestClient) -> None:
    response = client.post(
        "/compatibility",
        json={"library_a": [], "library_b": [_make_record("book", "b1", 11)]},
    )

    assert response.status_code == 422
    assert "outside the 1-10 scale" in response.json()["detail"]


def test_score_compatibility_rejects_conflicting_metadata(client: TestClient) -> None:
    response = client.post(
        "/compatibility",
        json={
            "library_a": [_make_record("book", "b1", 9)],
            "library_b": [],
            "catalog": {"books": {"b1": {"id": "b1", "media_type": "movie"}}},
        },
    )

    assert response.status_code == 422


def test_score_compatibility_echoes_request_id(client: TestClient) -> None:
    response = client.post(
        "/compatibility",
        json={"library_a": [], "library_b": []},
        headers={"X-Request-Id": "req-abc"},
    )

    assert response.status_code == 200
    assert response.headers["X-Request-Id"] == "req-abc"


def test_find_candidates(client: TestClient, catalog: dict) -> None:
    subject_records = [_make_record("book", "b1", 9), _make_record("anime", "a1", 8)]
    response = client.post(
        "/compatibility/candidates",
        json={
            "subject": {"user_id": "me", "records": subject_records},
            "population": [
                {"user_id": "me", "records": subject_records},
                {"user_id": "casual", "records": [_make_record("movie", "m1", 6)]},
                {"user_id": "twin", "records": subject_records},
                {"user_id": "ghost", "records": []},
            ],
            "catalog": catalog,
        },
    )

    assert response.status_code == 200
    candidates = response.json()["candidates"]
    assert [candidate["subject_id"] for candidate in candidates] == ["twin", "casual"]
    assert candidates[0]["compatibility"]["shared_items_count"] == 2


def test_find_candidates_require_shared_item(client: TestClient, catalog: dict) -> None:
    response = client.post(
        "/compatibility/candidates",
        json={
            "subject": {"user_id": "me", "records": [_make_record("book", "b1", 9)]},
            "population": [
                {"user_id": "casual", "records": [_make_record("movie", "m1", 6)]},
                {"user_id": "reader", "records": [_make_record("book", "b1", 7)]},
            ],
            "catalog": catalog,
            "require_shared_item": True,
        },
    )

    assert response.status_code == 200
    assert [c["subject_id"] for c in response.json()["candidates"]] == ["reader"]
