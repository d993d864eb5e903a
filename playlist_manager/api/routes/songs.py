import logging

import requests
from fastapi import APIRouter, HTTPException

from playlist_manager.core.errors import ValidationError
from playlist_manager.core.itunes import CatalogResponseError, get_trending_songs, search_songs
from playlist_manager.schemas.track import CatalogSearchOut

router = APIRouter(tags=["songs"])
logger = logging.getLogger(__name__)


def _extract_catalog_error_details(exc: Exception) -> tuple[int | None, str]:
    response = getattr(exc, "response", None)
    if response is None:
        return None, ""
    status_code = getattr(response, "status_code", None)
    body_text = (getattr(response, "text", "") or "").strip()
    if len(body_text) > 300:
        body_text = body_text[:300]
    return status_code, body_text


def raise_catalog_request_error(operation: str, exc: Exception) -> None:
    status_code, body_snippet = _extract_catalog_error_details(exc)
    status_label = status_code if status_code is not None else "unknown"
    logger.warning(
        "iTunes %s failed: status=%s, error=%s, body=%s",
        operation,
        status_label,
        exc,
        body_snippet or "<empty>",
    )
    raise HTTPException(status_code=502, detail=f"Error {operation} songs.") from exc


@router.get("/search", response_model=CatalogSearchOut)
def search(term: str | None = None, limit: int | None = None):
    if not term or not term.strip():
        raise ValidationError("Search term is required.")
    try:
        songs = search_songs(term, limit)
    except (requests.RequestException, CatalogResponseError) as exc:
        raise_catalog_request_error("searching", exc)
    return {"songs": songs, "count": len(songs)}


@router.get("/trending", response_model=CatalogSearchOut)
def trending(limit: int | None = None):
    try:
        songs = get_trending_songs(limit)
    except (requests.RequestException, CatalogResponseError) as exc:
        raise_catalog_request_error("fetching trending", exc)
    return {"songs": songs, "count": len(songs)}
