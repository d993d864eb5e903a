from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from playlist_manager.models.library import Favorite, ListeningHistory


def list_favorites(db: Session, user_id: int) -> list[Favorite]:
    return db.execute(
        select(Favorite)
        .where(Favorite.user_id == user_id)
        .order_by(Favorite.added_at.desc(), Favorite.id.desc())
    ).scalars().all()


def find_favorite(db: Session, user_id: int, track_id: str) -> Favorite | None:
    return db.execute(
        select(Favorite).where(Favorite.user_id == user_id, Favorite.track_id == track_id)
    ).scalar_one_or_none()


def create_favorite(db: Session, user_id: int, **track: str | None) -> Favorite:
    favorite = Favorite(user_id=user_id, **track)
    db.add(favorite)
    db.commit()
    db.refresh(favorite)
    return favorite


def delete_favorite(db: Session, user_id: int, track_id: str) -> bool:
    result = db.execute(
        delete(Favorite)
        .where(Favorite.user_id == user_id, Favorite.track_id == track_id)
        .execution_options(synchronize_session=False)
    )
    db.commit()
    return result.rowcount > 0


def count_favorites(db: Session, user_id: int) -> int:
    return db.execute(
        select(func.count(Favorite.id)).where(Favorite.user_id == user_id)
    ).scalar_one()


def list_history(db: Session, user_id: int, *, limit: int, offset: int = 0) -> list[ListeningHistory]:
    return db.execute(
        select(ListeningHistory)
        .where(ListeningHistory.user_id == user_id)
        .order_by(ListeningHistory.played_at.desc(), ListeningHistory.id.desc())
        .limit(limit)
        .offset(offset)
    ).scalars().all()


def count_history(db: Session, user_id: int) -> int:
    return db.execute(
        select(func.count(ListeningHistory.id)).where(ListeningHistory.user_id == user_id)
    ).scalar_one()


def count_unique_tracks_played(db: Session, user_id: int) -> int:
    return db.execute(
        select(func.count(func.distinct(ListeningHistory.track_id))).where(
            ListeningHistory.user_id == user_id
        )
    ).scalar_one()


def create_history_item(db: Session, user_id: int, **track: str | None) -> ListeningHistory:
    item = ListeningHistory(user_id=user_id, **track)
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


def clear_history(db: Session, user_id: int) -> int:
    result = db.execute(
        delete(ListeningHistory)
        .where(ListeningHistory.user_id == user_id)
        .execution_options(synchronize_session=False)
    )
    db.commit()
    return result.rowcount


def list_recently_played(db: Session, user_id: int, *, limit: int) -> list:
    """Latest play per track, newest first.

    Rows are ``(track_id, last_played_at)``; metadata is read from the most
    recent play of each track by the caller.
    """
    last_played = func.max(ListeningHistory.played_at).label("last_played_at")
    return db.execute(
        select(ListeningHistory.track_id, last_played)
        .where(ListeningHistory.user_id == user_id)
        .group_by(ListeningHistory.track_id)
        .order_by(last_played.desc())
        .limit(limit)
    ).all()


def get_latest_play(db: Session, user_id: int, track_id: str) -> ListeningHistory | None:
    return db.execute(
        select(ListeningHistory)
        .where(ListeningHistory.user_id == user_id, ListeningHistory.track_id == track_id)
        .order_by(ListeningHistory.played_at.desc(), ListeningHistory.id.desc())
        .limit(1)
    ).scalar_one_or_none()


def list_most_played(db: Session, user_id: int, *, limit: int = 5) -> list:
    play_count = func.count(ListeningHistory.id).label("play_count")
    return db.execute(
        select(
            ListeningHistory.track_id,
            ListeningHistory.track_name,
            ListeningHistory.artist_name,
            ListeningHistory.artwork_url,
            ListeningHistory.preview_url,
            play_count,
        )
        .where(ListeningHistory.user_id == user_id)
        .group_by(
            ListeningHistory.track_id,
            ListeningHistory.track_name,
            ListeningHistory.artist_name,
            ListeningHistory.artwork_url,
            ListeningHistory.preview_url,
        )
        .order_by(play_count.desc(), ListeningHistory.track_id)
        .limit(limit)
    ).all()
