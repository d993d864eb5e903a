"""Ownership, visibility and share-token rules for playlists.

Every operation receives the caller's user id explicitly (``None`` for an
anonymous caller) and raises a :mod:`playlist_manager.core.errors` failure
instead of producing HTTP responses.
"""

import logging
import secrets
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from playlist_manager.core.config import (
    PUBLIC_SEARCH_DEFAULT_LIMIT,
    PUBLIC_SEARCH_MAX_LIMIT,
    SHARE_TOKEN_BYTES,
)
from playlist_manager.core.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from playlist_manager.models.playlist import Playlist, PlaylistEntry
from playlist_manager.repositories import playlists as playlist_repo
from playlist_manager.repositories.playlists import ShareTokenCollision
from playlist_manager.repositories.users import get_user_by_id
from playlist_manager.schemas.track import TrackIn
from playlist_manager.services.tracks import normalize_track

logger = logging.getLogger(__name__)

# One fresh token, then one retry after a uniqueness violation.
SHARE_TOKEN_ATTEMPTS = 2

TokenFactory = Callable[[], str]


def generate_share_token() -> str:
    return secrets.token_hex(SHARE_TOKEN_BYTES)


@dataclass(frozen=True)
class PlaylistAccess:
    can_read: bool
    is_owner: bool


@dataclass(frozen=True)
class PlaylistVisibility:
    playlist_id: int
    is_public: bool
    share_token: str | None


@dataclass
class PlaylistView:
    playlist: Playlist
    owner_name: str
    is_owner: bool
    entries: list[PlaylistEntry]


@dataclass
class SharedPlaylistView:
    id: int
    name: str
    description: str | None
    owner_name: str
    entries: list[PlaylistEntry]
    created_at: datetime


@dataclass
class PublicPlaylistHit:
    id: int
    name: str
    description: str | None
    share_token: str
    owner_name: str
    song_count: int
    created_at: datetime


def _clean_name(name: str | None) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("Playlist name is required.")
    return cleaned


def _clean_description(description: str | None) -> str | None:
    return (description or "").strip() or None


def _get_existing_playlist(db: Session, playlist_id: int) -> Playlist:
    playlist = playlist_repo.get_playlist(db, playlist_id)
    if playlist is None:
        raise NotFoundError("Playlist not found.")
    return playlist


def create_playlist(
    db: Session,
    owner_id: int,
    name: str | None,
    description: str | None = None,
    is_public: bool = False,
    *,
    token_factory: TokenFactory = generate_share_token,
) -> Playlist:
    cleaned_name = _clean_name(name)
    cleaned_description = _clean_description(description)
    if get_user_by_id(db, owner_id) is None:
        raise NotFoundError("User not found.")

    for attempt in range(1, SHARE_TOKEN_ATTEMPTS + 1):
        share_token = token_factory() if is_public else None
        try:
            playlist = playlist_repo.insert_playlist(
                db,
                owner_id=owner_id,
                name=cleaned_name,
                description=cleaned_description,
                is_public=is_public,
                share_token=share_token,
            )
        except ShareTokenCollision:
            logger.warning(
                "Share token collision creating playlist owner_id=%s attempt=%s",
                owner_id,
                attempt,
            )
            continue
        logger.info(
            "Playlist created playlist_id=%s owner_id=%s is_public=%s",
            playlist.id,
            owner_id,
            playlist.is_public,
        )
        return playlist

    raise ConflictError("Could not allocate a unique share token. Please try again.")


def _read_access(db: Session, playlist_id: int, caller_id: int | None) -> tuple[Playlist, PlaylistAccess]:
    playlist = _get_existing_playlist(db, playlist_id)
    is_owner = caller_id is not None and caller_id == playlist.user_id
    if not is_owner and not playlist.is_public:
        # Existence is revealed on purpose: private reads answer 403, not 404.
        raise ForbiddenError("Access denied. This playlist is private.")
    return playlist, PlaylistAccess(can_read=True, is_owner=is_owner)


def authorize_read(db: Session, playlist_id: int, caller_id: int | None) -> PlaylistAccess:
    return _read_access(db, playlist_id, caller_id)[1]


def authorize_write(db: Session, playlist_id: int, caller_id: int | None) -> Playlist:
    playlist = _get_existing_playlist(db, playlist_id)
    if caller_id is None or caller_id != playlist.user_id:
        raise ForbiddenError("Access denied. You can only modify your own playlists.")
    return playlist


def _commit_visibility(
    db: Session,
    playlist: Playlist,
    caller_id: int,
    make_public: bool,
    token_factory: TokenFactory,
    details: dict | None = None,
) -> PlaylistVisibility:
    """Write optional detail changes and the visibility UPDATE as one commit.

    A token collision rolls everything back, then the whole write is replayed
    once with a fresh candidate token.
    """
    playlist_id = playlist.id
    for attempt in range(1, SHARE_TOKEN_ATTEMPTS + 1):
        candidate_token = token_factory() if make_public else None
        try:
            if details:
                playlist_repo.update_playlist_details(db, playlist, **details)
            row = playlist_repo.update_playlist_visibility(
                db,
                playlist_id,
                owner_id=caller_id,
                make_public=make_public,
                candidate_token=candidate_token,
            )
            if row is None:
                # Deleted between the ownership check and the update.
                db.rollback()
                raise NotFoundError("Playlist not found.")
            db.commit()
        except ShareTokenCollision:
            db.rollback()
            logger.warning(
                "Share token collision publishing playlist_id=%s attempt=%s",
                playlist_id,
                attempt,
            )
            continue
        except IntegrityError:
            db.rollback()
            raise
        logger.info(
            "Playlist visibility set playlist_id=%s is_public=%s by user_id=%s",
            row.id,
            row.is_public,
            caller_id,
        )
        return PlaylistVisibility(
            playlist_id=row.id,
            is_public=row.is_public,
            share_token=row.share_token,
        )

    raise ConflictError("Could not allocate a unique share token. Please try again.")


def set_visibility(
    db: Session,
    playlist_id: int,
    caller_id: int | None,
    make_public: bool,
    *,
    token_factory: TokenFactory = generate_share_token,
) -> PlaylistVisibility:
    """Move a playlist between private and public.

    private -> public mints a token, public -> public keeps the current one,
    public -> private clears it, private -> private changes nothing. The
    decision is made by the database inside a single conditional UPDATE so
    concurrent toggles cannot leave a public playlist without a token or
    publish two different tokens.
    """
    playlist = authorize_write(db, playlist_id, caller_id)
    return _commit_visibility(db, playlist, caller_id, make_public, token_factory)


def update_playlist(
    db: Session,
    playlist_id: int,
    caller_id: int | None,
    *,
    name: str | None = None,
    description: str | None = None,
    is_public: bool | None = None,
    token_factory: TokenFactory = generate_share_token,
) -> Playlist:
    """Apply name, description and visibility changes all-or-nothing."""
    playlist = authorize_write(db, playlist_id, caller_id)
    details = {}
    if name is not None:
        details["name"] = _clean_name(name)
    if description is not None:
        details["description"] = _clean_description(description)
        details["clear_description"] = True

    if is_public is not None:
        _commit_visibility(db, playlist, caller_id, is_public, token_factory, details)
    elif details:
        playlist_repo.update_playlist_details(db, playlist, **details)
        db.commit()
    db.refresh(playlist)
    return playlist


def delete_playlist(db: Session, playlist_id: int, caller_id: int | None) -> None:
    playlist = authorize_write(db, playlist_id, caller_id)
    playlist_repo.delete_playlist(db, playlist)
    logger.info("Playlist deleted playlist_id=%s by user_id=%s", playlist_id, caller_id)


def get_playlist_detail(db: Session, playlist_id: int, caller_id: int | None) -> PlaylistView:
    playlist, access = _read_access(db, playlist_id, caller_id)
    return PlaylistView(
        playlist=playlist,
        owner_name=playlist.owner.name,
        is_owner=access.is_owner,
        entries=playlist_repo.list_entries(db, playlist_id),
    )


def list_owned_playlists(db: Session, owner_id: int) -> list[tuple[Playlist, int]]:
    return [
        (row[0], int(row.song_count))
        for row in playlist_repo.list_playlists_for_owner(db, owner_id)
    ]


def resolve_by_share_token(db: Session, token: str | None) -> SharedPlaylistView:
    cleaned = (token or "").strip()
    playlist = playlist_repo.get_public_playlist_by_share_token(db, cleaned) if cleaned else None
    if playlist is None:
        raise NotFoundError("Shared playlist not found or is no longer public.")
    return SharedPlaylistView(
        id=playlist.id,
        name=playlist.name,
        description=playlist.description,
        owner_name=playlist.owner.name,
        entries=playlist_repo.list_entries(db, playlist.id),
        created_at=playlist.created_at,
    )


def add_entry(
    db: Session,
    playlist_id: int,
    caller_id: int | None,
    track: TrackIn | Mapping,
) -> PlaylistEntry:
    authorize_write(db, playlist_id, caller_id)
    values = normalize_track(track)
    if playlist_repo.find_entry(db, playlist_id, values["track_id"]) is not None:
        raise ConflictError("Song already exists in this playlist.")
    try:
        entry = playlist_repo.insert_entry(db, playlist_id, **values)
    except IntegrityError:
        if playlist_repo.find_entry(db, playlist_id, values["track_id"]) is not None:
            raise ConflictError("Song already exists in this playlist.") from None
        raise
    logger.info("Song added playlist_id=%s track_id=%s", playlist_id, values["track_id"])
    return entry


def remove_entry(db: Session, playlist_id: int, caller_id: int | None, track_id: str) -> None:
    authorize_write(db, playlist_id, caller_id)
    if not playlist_repo.delete_entry(db, playlist_id, str(track_id)):
        raise NotFoundError("Song not found in playlist.")
    logger.info("Song removed playlist_id=%s track_id=%s", playlist_id, track_id)


def clamp_public_search_limit(limit: int | None) -> int:
    if not limit or limit < 1:
        return PUBLIC_SEARCH_DEFAULT_LIMIT
    return min(limit, PUBLIC_SEARCH_MAX_LIMIT)


def search_public(db: Session, term: str | None, limit: int | None = None) -> list[PublicPlaylistHit]:
    rows = playlist_repo.search_public_playlists(db, term, clamp_public_search_limit(limit))
    return [
        PublicPlaylistHit(
            id=playlist.id,
            name=playlist.name,
            description=playlist.description,
            share_token=playlist.share_token,
            owner_name=owner_name,
            song_count=int(song_count),
            created_at=playlist.created_at,
        )
        for playlist, owner_name, song_count in rows
    ]
