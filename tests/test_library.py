from datetime import datetime, timedelta, timezone

import pytest

from playlist_manager.core.errors import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from playlist_manager.models.library import ListeningHistory
from playlist_manager.services import accounts, library, playlist_sharing


def _track(track_id: str, name: str | None = None) -> dict:
    return {
        "track_id": track_id,
        "track_name": name or f"Track {track_id}",
        "artist_name": "Miles Davis",
        "artwork_url": "https://img.example/100.jpg",
        "preview_url": "https://audio.example/preview.m4a",
    }


def test_favorites_add_check_remove(db, make_user) -> None:
    user = make_user()

    library.add_favorite(db, user.id, _track("1"))

    assert library.is_favorite(db, user.id, "1")
    with pytest.raises(ConflictError):
        library.add_favorite(db, user.id, _track("1"))

    library.remove_favorite(db, user.id, "1")
    assert not library.is_favorite(db, user.id, "1")
    with pytest.raises(NotFoundError):
        library.remove_favorite(db, user.id, "1")


def test_favorites_are_per_user(db, make_user) -> None:
    alice = make_user()
    bob = make_user()

    library.add_favorite(db, alice.id, _track("1"))
    library.add_favorite(db, bob.id, _track("1"))

    assert library.is_favorite(db, bob.id, "1")


def test_history_paging_and_clear(db, make_user) -> None:
    user = make_user()
    for index in range(5):
        library.record_play(db, user.id, _track(str(index)))

    page = library.get_history_page(db, user.id, limit=2, offset=1)

    assert page["total"] == 5
    assert page["limit"] == 2
    assert page["offset"] == 1
    assert len(page["history"]) == 2

    assert library.clear_history(db, user.id) == 5
    assert library.get_history_page(db, user.id)["total"] == 0


def test_history_paging_falls_back_to_defaults(db, make_user) -> None:
    user = make_user()

    page = library.get_history_page(db, user.id, limit=-3, offset=-1)

    assert page["limit"] == 50
    assert page["offset"] == 0


def test_recently_played_collapses_repeat_plays(db, make_user) -> None:
    user = make_user()
    base = datetime(2026, 1, 1, tzinfo=timezone.utc)
    plays = [("1", 0), ("2", 1), ("1", 2)]
    for track_id, minutes in plays:
        db.add(
            ListeningHistory(
                user_id=user.id,
                track_id=track_id,
                track_name=f"Track {track_id}",
                artist_name="Miles Davis",
                played_at=base + timedelta(minutes=minutes),
            )
        )
    db.commit()

    recent = library.get_recently_played(db, user.id)

    assert [item["track_id"] for item in recent] == ["1", "2"]


def test_dashboard_counts_activity(db, make_user) -> None:
    user = make_user()
    playlist_sharing.create_playlist(db, user.id, "Morning")
    library.add_favorite(db, user.id, _track("1"))
    for track_id in ("1", "1", "2"):
        library.record_play(db, user.id, _track(track_id))

    dashboard = library.build_dashboard(db, user.id)

    assert dashboard["stats"] == {
        "total_playlists": 1,
        "total_favorites": 1,
        "total_plays": 3,
        "unique_songs_played": 2,
    }
    assert dashboard["most_played"][0]["track_id"] == "1"
    assert dashboard["most_played"][0]["play_count"] == 2
    assert len(dashboard["recent_activity"]) == 3


def test_register_and_authenticate(db) -> None:
    user = accounts.register_user(db, " Ada ", "Ada@Example.com", "secret1")

    assert user.email == "ada@example.com"
    assert accounts.authenticate_user(db, "ADA@example.com", "secret1").id == user.id
    with pytest.raises(AuthenticationError):
        accounts.authenticate_user(db, "ada@example.com", "wrong-password")
    with pytest.raises(ConflictError):
        accounts.register_user(db, "Ada", "ada@example.com", "secret1")


@pytest.mark.parametrize(
    ("name", "email", "password"),
    [
        ("", "a@example.com", "secret1"),
        ("Ada", "not-an-email", "secret1"),
        ("Ada", "a@example.com", "short"),
    ],
)
def test_register_rejects_invalid_input(db, name, email, password) -> None:
    with pytest.raises(ValidationError):
        accounts.register_user(db, name, email, password)


def test_profile_reports_counts(db, make_user) -> None:
    user = make_user()
    playlist_sharing.create_playlist(db, user.id, "Evening")

    profile = accounts.get_profile(db, user.id)

    assert profile["stats"] == {"playlist_count": 1, "favorites_count": 0}
    with pytest.raises(NotFoundError):
        accounts.get_profile(db, user.id + 100)
