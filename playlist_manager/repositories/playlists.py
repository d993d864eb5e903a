from sqlalchemy import Row, delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from playlist_manager.models.playlist import Playlist, PlaylistEntry
from playlist_manager.models.user import User


class ShareTokenCollision(Exception):
    """The candidate share token is already held by another playlist."""


def is_share_token_violation(exc: IntegrityError) -> bool:
    message = str(getattr(exc, "orig", exc))
    return "share_token" in message


def get_playlist(db: Session, playlist_id: int) -> Playlist | None:
    return db.get(Playlist, playlist_id)


def get_public_playlist_by_share_token(db: Session, share_token: str) -> Playlist | None:
    # Visibility is the gate; a leftover token on a private row never matches.
    return db.execute(
        select(Playlist).where(
            Playlist.share_token == share_token,
            Playlist.is_public.is_(True),
        )
    ).scalar_one_or_none()


def insert_playlist(
    db: Session,
    *,
    owner_id: int,
    name: str,
    description: str | None,
    is_public: bool,
    share_token: str | None,
) -> Playlist:
    playlist = Playlist(
        user_id=owner_id,
        name=name,
        description=description,
        is_public=is_public,
        share_token=share_token,
    )
    db.add(playlist)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if share_token is not None and is_share_token_violation(exc):
            raise ShareTokenCollision(share_token) from exc
        raise
    db.refresh(playlist)
    return playlist


def update_playlist_visibility(
    db: Session,
    playlist_id: int,
    *,
    owner_id: int,
    make_public: bool,
    candidate_token: str | None,
) -> Row | None:
    """Apply a visibility transition in one conditional UPDATE.

    Publishing keeps whatever token the row already holds and only falls back
    to ``candidate_token`` when there is none. Going private clears the token.
    Returns ``(id, is_public, share_token)`` or ``None`` when no row matched
    the id/owner pair. The caller owns the transaction and must roll back
    after a :class:`ShareTokenCollision`.
    """
    if make_public:
        token_value = func.coalesce(Playlist.share_token, candidate_token)
    else:
        token_value = None
    stmt = (
        update(Playlist)
        .where(Playlist.id == playlist_id, Playlist.user_id == owner_id)
        .values(is_public=make_public, share_token=token_value)
        .returning(Playlist.id, Playlist.is_public, Playlist.share_token)
        .execution_options(synchronize_session=False)
    )
    try:
        return db.execute(stmt).one_or_none()
    except IntegrityError as exc:
        if candidate_token is not None and is_share_token_violation(exc):
            raise ShareTokenCollision(candidate_token) from exc
        raise


def update_playlist_details(
    db: Session,
    playlist: Playlist,
    *,
    name: str | None = None,
    description: str | None = None,
    clear_description: bool = False,
) -> None:
    """Stage name/description changes; committed by the caller."""
    if name is not None:
        playlist.name = name
    if description is not None or clear_description:
        playlist.description = description
    db.add(playlist)
    db.flush()


def delete_playlist(db: Session, playlist: Playlist) -> None:
    db.delete(playlist)
    db.commit()


def touch_playlist(db: Session, playlist_id: int) -> None:
    db.execute(
        update(Playlist)
        .where(Playlist.id == playlist_id)
        .values(updated_at=func.now())
        .execution_options(synchronize_session=False)
    )


def find_entry(db: Session, playlist_id: int, track_id: str) -> PlaylistEntry | None:
    return db.execute(
        select(PlaylistEntry).where(
            PlaylistEntry.playlist_id == playlist_id,
            PlaylistEntry.track_id == track_id,
        )
    ).scalar_one_or_none()


def list_entries(db: Session, playlist_id: int) -> list[PlaylistEntry]:
    return db.execute(
        select(PlaylistEntry)
        .where(PlaylistEntry.playlist_id == playlist_id)
        .order_by(PlaylistEntry.added_at.desc(), PlaylistEntry.id.desc())
    ).scalars().all()


def insert_entry(
    db: Session,
    playlist_id: int,
    *,
    track_id: str,
    track_name: str,
    artist_name: str,
    artwork_url: str | None = None,
    preview_url: str | None = None,
) -> PlaylistEntry:
    entry = PlaylistEntry(
        playlist_id=playlist_id,
        track_id=track_id,
        track_name=track_name,
        artist_name=artist_name,
        artwork_url=artwork_url,
        preview_url=preview_url,
    )
    db.add(entry)
    try:
        db.flush()
        touch_playlist(db, playlist_id)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise
    db.refresh(entry)
    return entry


def delete_entry(db: Session, playlist_id: int, track_id: str) -> bool:
    result = db.execute(
        delete(PlaylistEntry)
        .where(
            PlaylistEntry.playlist_id == playlist_id,
            PlaylistEntry.track_id == track_id,
        )
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        db.rollback()
        return False
    touch_playlist(db, playlist_id)
    db.commit()
    return True


def list_playlists_for_owner(db: Session, owner_id: int) -> list[Row]:
    song_count = func.count(PlaylistEntry.id).label("song_count")
    return db.execute(
        select(Playlist, song_count)
        .outerjoin(PlaylistEntry, PlaylistEntry.playlist_id == Playlist.id)
        .where(Playlist.user_id == owner_id)
        .group_by(Playlist.id)
        .order_by(Playlist.updated_at.desc(), Playlist.id.desc())
    ).all()


def count_playlists_for_owner(db: Session, owner_id: int) -> int:
    return db.execute(
        select(func.count(Playlist.id)).where(Playlist.user_id == owner_id)
    ).scalar_one()


def search_public_playlists(db: Session, term: str | None, limit: int) -> list[Row]:
    """Public playlists ranked by song count, then newest first.

    Rows are ``(Playlist, owner_name, song_count)``.
    """
    song_count = func.count(PlaylistEntry.id)
    stmt = (
        select(Playlist, User.name.label("owner_name"), song_count.label("song_count"))
        .join(User, Playlist.user_id == User.id)
        .outerjoin(PlaylistEntry, PlaylistEntry.playlist_id == Playlist.id)
        .where(Playlist.is_public.is_(True))
    )
    needle = (term or "").strip().lower()
    if needle:
        stmt = stmt.where(
            or_(
                func.lower(Playlist.name).contains(needle, autoescape=True),
                func.lower(Playlist.description).contains(needle, autoescape=True),
                func.lower(User.name).contains(needle, autoescape=True),
            )
        )
    stmt = (
        stmt.group_by(Playlist.id, User.name)
        .order_by(song_count.desc(), Playlist.created_at.desc(), Playlist.id.desc())
        .limit(limit)
    )
    return db.execute(stmt).all()
