from unittest.mock import Mock

import pytest
import requests
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from playlist_manager.core import itunes
from playlist_manager.core.db import get_db
from playlist_manager.main import app


@pytest.fixture()
def client(engine):
    session_factory = sessionmaker(bind=engine, autoflush=False)

    def _override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _register(client: TestClient, name: str, email: str) -> dict:
    response = client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": "secret1"},
    )
    assert response.status_code == 201, response.text
    body = response.json()
    return {"Authorization": f"Bearer {body['token']}"}


def _song(track_id: str = "42") -> dict:
    return {
        "track_id": track_id,
        "track_name": "So What",
        "artist_name": "Miles Davis",
        "preview_url": "https://audio.example/preview.m4a",
    }


def test_register_then_login(client: TestClient) -> None:
    _register(client, "Ada", "ada@example.com")

    response = client.post("/api/auth/login", json={"email": "ada@example.com", "password": "secret1"})
    assert response.status_code == 200
    assert response.json()["user"]["email"] == "ada@example.com"

    response = client.post("/api/auth/login", json={"email": "ada@example.com", "password": "nope123"})
    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_duplicate_registration_conflicts(client: TestClient) -> None:
    _register(client, "Ada", "ada@example.com")

    response = client.post(
        "/api/auth/register",
        json={"name": "Ada", "email": "ADA@example.com", "password": "secret1"},
    )

    assert response.status_code == 409


def test_owner_routes_require_a_token(client: TestClient) -> None:
    assert client.get("/api/playlists").status_code == 401
    assert client.post("/api/playlists", json={"name": "x"}).status_code == 401
    response = client.get("/api/playlists", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 401


def test_create_playlist_validates_name(client: TestClient) -> None:
    headers = _register(client, "Ada", "ada@example.com")

    response = client.post("/api/playlists", json={"name": "   "}, headers=headers)

    assert response.status_code == 400
    assert response.json()["detail"] == "Playlist name is required."


def test_private_playlist_hidden_from_others(client: TestClient) -> None:
    owner = _register(client, "Ada", "ada@example.com")
    stranger = _register(client, "Bob", "bob@example.com")
    playlist = client.post("/api/playlists", json={"name": "Mine"}, headers=owner).json()
    playlist_id = playlist["id"]

    assert playlist["share_token"] is None
    assert client.get(f"/api/playlists/{playlist_id}", headers=owner).json()["is_owner"] is True
    assert client.get(f"/api/playlists/{playlist_id}").status_code == 403
    assert client.get(f"/api/playlists/{playlist_id}", headers=stranger).status_code == 403
    assert client.get("/api/playlists/9999").status_code == 404

    response = client.put(
        f"/api/playlists/{playlist_id}/visibility",
        json={"is_public": True},
        headers=stranger,
    )
    assert response.status_code == 403
    response = client.post(f"/api/playlists/{playlist_id}/songs", json=_song(), headers=stranger)
    assert response.status_code == 403


def test_share_flow(client: TestClient) -> None:
    owner = _register(client, "Ada", "ada@example.com")
    playlist_id = client.post("/api/playlists", json={"name": "Kind of Blue"}, headers=owner).json()["id"]
    assert client.post(f"/api/playlists/{playlist_id}/songs", json=_song(), headers=owner).status_code == 201

    published = client.put(
        f"/api/playlists/{playlist_id}/visibility",
        json={"is_public": True},
        headers=owner,
    ).json()
    token = published["share_token"]
    assert published["is_public"] is True
    assert len(token) == 32

    shared = client.get(f"/api/shared/{token}")
    assert shared.status_code == 200
    body = shared.json()
    assert body["owner_name"] == "Ada"
    assert [song["track_id"] for song in body["songs"]] == ["42"]
    assert "share_token" not in body
    assert "user_id" not in body

    # Anonymous callers can now read it by id too.
    assert client.get(f"/api/playlists/{playlist_id}").status_code == 200

    hits = client.get("/api/playlists/public/search", params={"term": "blue"}).json()
    assert [hit["share_token"] for hit in hits] == [token]

    client.put(f"/api/playlists/{playlist_id}/visibility", json={"is_public": False}, headers=owner)
    assert client.get(f"/api/shared/{token}").status_code == 404
    assert client.get("/api/playlists/public/search").json() == []


def test_song_conflicts_and_removal(client: TestClient) -> None:
    owner = _register(client, "Ada", "ada@example.com")
    playlist_id = client.post("/api/playlists", json={"name": "Mine"}, headers=owner).json()["id"]

    assert client.post(f"/api/playlists/{playlist_id}/songs", json=_song(), headers=owner).status_code == 201
    response = client.post(f"/api/playlists/{playlist_id}/songs", json=_song(), headers=owner)
    assert response.status_code == 409
    response = client.post(
        f"/api/playlists/{playlist_id}/songs",
        json={"track_id": "7"},
        headers=owner,
    )
    assert response.status_code == 400

    assert client.delete(f"/api/playlists/{playlist_id}/songs/42", headers=owner).status_code == 200
    assert client.delete(f"/api/playlists/{playlist_id}/songs/42", headers=owner).status_code == 404

    listed = client.get("/api/playlists", headers=owner).json()
    assert listed[0]["song_count"] == 0


def test_delete_playlist(client: TestClient) -> None:
    owner = _register(client, "Ada", "ada@example.com")
    playlist_id = client.post("/api/playlists", json={"name": "Mine"}, headers=owner).json()["id"]

    assert client.delete(f"/api/playlists/{playlist_id}", headers=owner).status_code == 200
    assert client.get(f"/api/playlists/{playlist_id}", headers=owner).status_code == 404


def test_song_search_requires_term(client: TestClient) -> None:
    assert client.get("/api/songs/search").status_code == 400


def test_song_search_maps_catalog_failures(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    def _boom(term, limit=None):
        raise requests.ConnectionError("catalog down")

    monkeypatch.setattr("playlist_manager.api.routes.songs.search_songs", _boom)

    response = client.get("/api/songs/search", params={"term": "jazz"})

    assert response.status_code == 502
    assert response.json()["detail"] == "Error searching songs."


def test_legacy_search_route(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    song = itunes.map_song(
        {"trackId": 1, "trackName": "So What", "artistName": "Miles Davis", "previewUrl": "p"}
    )
    monkeypatch.setattr("playlist_manager.api.routes.songs.search_songs", lambda term, limit=None: [song])

    response = client.get("/api/search", params={"term": "miles"})

    assert response.status_code == 200
    assert response.json()["count"] == 1


def test_favorites_and_history_routes(client: TestClient) -> None:
    headers = _register(client, "Ada", "ada@example.com")

    assert client.post("/api/favorites", json=_song(), headers=headers).status_code == 201
    assert client.post("/api/favorites", json=_song(), headers=headers).status_code == 409
    assert client.get("/api/favorites/check/42", headers=headers).json() == {"is_favorite": True}
    assert client.post("/api/history", json=_song(), headers=headers).status_code == 201

    dashboard = client.get("/api/user/dashboard", headers=headers).json()
    assert dashboard["stats"]["total_favorites"] == 1
    assert dashboard["stats"]["total_plays"] == 1

    profile = client.get("/api/user/profile", headers=headers).json()
    assert profile["stats"]["favorites_count"] == 1

    assert client.delete("/api/history", headers=headers).json() == {"ok": True, "removed": 1}


def test_health(client: TestClient) -> None:
    assert client.get("/health").json() == {"ok": True}


def test_root_reports_build_info(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GIT_SHA", raising=False)
    monkeypatch.setenv("COMMIT_SHA", "abc1234")

    body = client.get("/").json()

    assert body["name"] == "Music Playlist Manager API"
    assert body["git_sha"] == "abc1234"


def test_launcher_serves_the_app(monkeypatch: pytest.MonkeyPatch) -> None:
    from playlist_manager import __main__ as launcher

    run_mock = Mock()
    monkeypatch.setattr(launcher.uvicorn, "run", run_mock)

    launcher.main()

    run_mock.assert_called_once_with("playlist_manager.main:app", host=launcher.HOST, port=launcher.PORT)
