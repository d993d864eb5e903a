import json
import logging
import random
import time
import uuid
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from threading import Semaphore
from urllib.parse import urlparse

import requests

from playlist_manager.core.config import (
    ITUNES_LOOKUP_URL,
    ITUNES_MAX_CONCURRENCY,
    ITUNES_MAX_RETRY_AFTER,
    ITUNES_REQUEST_TIMEOUT,
    ITUNES_SEARCH_URL,
    ITUNES_TOP_SONGS_URL,
    SEARCH_DEFAULT_LIMIT,
    SEARCH_MAX_LIMIT,
    TRENDING_DEFAULT_LIMIT,
    TRENDING_MAX_LIMIT,
)

logger = logging.getLogger(__name__)
_itunes_semaphore = Semaphore(ITUNES_MAX_CONCURRENCY)

MAX_429_RETRIES = 3
MAX_TRANSIENT_RETRIES = 2


class CatalogResponseError(Exception):
    """The catalog answered, but not with the payload shape we expect."""


def _log_event(event: str, **fields: object) -> None:
    payload = {"event": event, **fields}
    logger.info(json.dumps(payload, sort_keys=True, default=str))


def _endpoint_path(url: str) -> str:
    parsed = urlparse(url)
    return parsed.path or "/"


def _compute_backoff(attempt: int, base_seconds: float, cap_seconds: float) -> float:
    exponent = max(attempt - 1, 0)
    backoff = base_seconds * (2**exponent)
    jitter = random.uniform(0, base_seconds)
    return min(backoff + jitter, cap_seconds)


def _parse_retry_after(value: str | None, default: int = 2) -> int:
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def itunes_get(url: str, params: dict | None = None) -> dict:
    request_id = uuid.uuid4().hex[:8]
    path = _endpoint_path(url)
    attempt = 0

    while True:
        attempt += 1
        start_monotonic = time.monotonic()
        _log_event(
            "itunes_api_request",
            request_id=request_id,
            path=path,
            attempt=attempt,
            started_at=datetime.now(timezone.utc).isoformat(),
        )
        try:
            with _itunes_semaphore:
                response = requests.request(
                    "GET",
                    url,
                    params=params,
                    timeout=ITUNES_REQUEST_TIMEOUT,
                )
        except requests.RequestException as exc:
            duration_ms = round((time.monotonic() - start_monotonic) * 1000, 2)
            _log_event(
                "itunes_api_error",
                request_id=request_id,
                path=path,
                attempt=attempt,
                duration_ms=duration_ms,
                error=str(exc),
            )
            if attempt <= MAX_TRANSIENT_RETRIES:
                wait_seconds = _compute_backoff(attempt, 0.5, 8.0)
                _log_event(
                    "itunes_api_retry",
                    request_id=request_id,
                    path=path,
                    attempt=attempt,
                    wait_seconds=wait_seconds,
                    reason="exception",
                )
                time.sleep(wait_seconds)
                continue
            raise

        duration_ms = round((time.monotonic() - start_monotonic) * 1000, 2)
        _log_event(
            "itunes_api_response",
            request_id=request_id,
            path=path,
            attempt=attempt,
            status_code=response.status_code,
            duration_ms=duration_ms,
            response_size_bytes=len(response.content or b""),
        )

        if response.status_code == 429:
            if attempt > MAX_429_RETRIES:
                response.raise_for_status()
            retry_after = min(
                _parse_retry_after(response.headers.get("Retry-After")),
                ITUNES_MAX_RETRY_AFTER,
            )
            wait_seconds = min(retry_after + _compute_backoff(attempt, 0.5, 10.0), ITUNES_MAX_RETRY_AFTER)
            _log_event(
                "itunes_api_retry",
                request_id=request_id,
                path=path,
                attempt=attempt,
                wait_seconds=wait_seconds,
                reason="rate_limited",
            )
            time.sleep(wait_seconds)
            continue

        if response.status_code >= 500 and attempt <= MAX_TRANSIENT_RETRIES:
            wait_seconds = _compute_backoff(attempt, 0.5, 8.0)
            _log_event(
                "itunes_api_retry",
                request_id=request_id,
                path=path,
                attempt=attempt,
                wait_seconds=wait_seconds,
                reason="server_error",
            )
            time.sleep(wait_seconds)
            continue

        response.raise_for_status()
        # The search endpoint answers with text/javascript, so parse manually.
        try:
            return json.loads(response.text or "{}")
        except json.JSONDecodeError as exc:
            raise CatalogResponseError("Invalid JSON from iTunes API") from exc


def map_song(raw: dict) -> dict:
    return {
        "track_id": str(raw.get("trackId")),
        "track_name": raw.get("trackName"),
        "artist_name": raw.get("artistName"),
        "collection_name": raw.get("collectionName"),
        "artwork_url": raw.get("artworkUrl100"),
        "artwork_url_60": raw.get("artworkUrl60"),
        "preview_url": raw.get("previewUrl"),
        "track_time_millis": raw.get("trackTimeMillis"),
        "release_date": raw.get("releaseDate"),
        "primary_genre_name": raw.get("primaryGenreName"),
    }


def _playable_songs(results: list[dict]) -> list[dict]:
    # Songs without a preview cannot be played in the client.
    return [
        map_song(item)
        for item in results
        if item.get("previewUrl") and item.get("trackId") is not None
    ]


def clamp_limit(value: int | None, default: int, maximum: int) -> int:
    if not value or value < 1:
        return default
    return min(value, maximum)


def search_songs(term: str, limit: int | None = None) -> list[dict]:
    params = {
        "term": term.strip(),
        "media": "music",
        "entity": "song",
        "limit": clamp_limit(limit, SEARCH_DEFAULT_LIMIT, SEARCH_MAX_LIMIT),
    }
    payload = itunes_get(ITUNES_SEARCH_URL, params=params)
    results = payload.get("results")
    if not isinstance(results, list):
        raise CatalogResponseError("Invalid response from iTunes API")
    return _playable_songs(results)


def _lookup_album_songs(collection_id: str) -> list[dict]:
    try:
        payload = itunes_get(ITUNES_LOOKUP_URL, params={"id": collection_id, "entity": "song"})
    except (requests.RequestException, CatalogResponseError) as exc:
        logger.warning("iTunes lookup failed for collection %s: %s", collection_id, exc)
        return []
    return _playable_songs(payload.get("results") or [])


def get_trending_songs(limit: int | None = None) -> list[dict]:
    """Top songs feed, expanded through an album lookup per feed entry."""
    resolved_limit = clamp_limit(limit, TRENDING_DEFAULT_LIMIT, TRENDING_MAX_LIMIT)
    payload = itunes_get(ITUNES_TOP_SONGS_URL.format(resolved_limit))
    entries = (payload.get("feed") or {}).get("entry")
    if not isinstance(entries, list):
        raise CatalogResponseError("Invalid response from iTunes API")

    collection_ids = []
    for entry in entries:
        collection_id = ((entry.get("id") or {}).get("attributes") or {}).get("im:id")
        if collection_id:
            collection_ids.append(collection_id)

    songs: list[dict] = []
    if not collection_ids:
        return songs
    with ThreadPoolExecutor(max_workers=ITUNES_MAX_CONCURRENCY) as executor:
        for album_songs in executor.map(_lookup_album_songs, collection_ids):
            songs.extend(album_songs)
    return songs[:resolved_limit]
