"""OMDb payload parsing and numeric coercion helpers."""

from __future__ import annotations

import logging
import math
from typing import Any

from popcorn_browser.models import OMDB_NOT_FOUND_MESSAGE, CandidateRecord, DetailRecord

logger = logging.getLogger(__name__)

# OMDb detail payload keys -> DetailRecord fields
_DETAIL_FIELDS: dict[str, str] = {
    "Title": "title",
    "Poster": "poster",
    "Runtime": "runtime",
    "imdbRating": "imdb_rating",
    "Plot": "plot",
    "Released": "released",
    "Actors": "actors",
    "Director": "director",
    "Writer": "writer",
    "Genre": "genre",
    "Language": "language",
    "Year": "year",
}


def _payload_text(payload: dict[str, Any], key: str) -> str:
    """Extract a whitespace-normalized string field from a catalog payload."""
    value = payload.get(key)
    if value is None:
        return ""
    return " ".join(str(value).split())


def soft_error_message(payload: Any) -> str | None:
    """Return the catalog's soft error text, or None for a successful payload.

    OMDb signals "zero matches" (and unknown ids) with ``"Response": "False"``
    and an ``Error`` string instead of an HTTP error status.

    >>> soft_error_message({"Response": "False", "Error": "Movie not found!"})
    'Movie not found!'
    >>> soft_error_message({"Response": "True", "Search": []}) is None
    True
    """
    if not isinstance(payload, dict):
        return None
    if str(payload.get("Response", "True")).strip().lower() != "false":
        return None
    message = _payload_text(payload, "Error")
    return message or OMDB_NOT_FOUND_MESSAGE


def parse_search_payload(payload: Any) -> list[CandidateRecord]:
    """Parse an OMDb ``?s=`` response into candidate records.

    Entries without an ``imdbID`` are dropped; duplicate ids keep the first hit.

    Raises:
        ValueError: If the payload does not have the expected shape.
    """
    if not isinstance(payload, dict):
        raise ValueError("Invalid OMDb search response")
    raw_results = payload.get("Search", [])
    if not isinstance(raw_results, list):
        raise ValueError("Invalid OMDb search response")

    records: list[CandidateRecord] = []
    seen_ids: set[str] = set()
    for item in raw_results:
        if not isinstance(item, dict):
            continue
        imdb_id = _payload_text(item, "imdbID")
        if not imdb_id or imdb_id in seen_ids:
            continue
        seen_ids.add(imdb_id)
        records.append(
            CandidateRecord(
                imdb_id=imdb_id,
                title=_payload_text(item, "Title"),
                year=_payload_text(item, "Year"),
                poster=_payload_text(item, "Poster"),
            )
        )
    return records


def parse_detail_payload(payload: Any, imdb_id: str) -> DetailRecord:
    """Parse an OMDb ``?i=`` response into a detail record.

    The requested ``imdb_id`` is used when the payload omits its own id.

    Raises:
        ValueError: If the payload is not a JSON object.
    """
    if not isinstance(payload, dict):
        raise ValueError("Invalid OMDb detail response")
    values = {attr: _payload_text(payload, key) for key, attr in _DETAIL_FIELDS.items()}
    return DetailRecord(imdb_id=_payload_text(payload, "imdbID") or imdb_id, **values)


def parse_runtime_minutes(runtime: str) -> int:
    """Return the leading integer token of a free-text runtime.

    >>> parse_runtime_minutes("142 min")
    142
    >>> parse_runtime_minutes("N/A")
    0
    """
    tokens = runtime.split()
    if not tokens:
        return 0
    try:
        return int(tokens[0])
    except ValueError:
        logger.debug("Unparseable runtime %r, using 0", runtime)
        return 0


def parse_catalog_rating(raw: str) -> float:
    """Coerce the catalog's numeric-string rating to a float (``N/A`` -> 0.0)."""
    try:
        value = float(raw.strip())
    except ValueError:
        return 0.0
    if not math.isfinite(value):
        return 0.0
    return value


__all__ = [
    "parse_catalog_rating",
    "parse_detail_payload",
    "parse_runtime_minutes",
    "parse_search_payload",
    "soft_error_message",
]
