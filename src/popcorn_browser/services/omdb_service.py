"""Internal OMDb catalog service helpers for title search and detail lookups."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from popcorn_browser.models import OMDB_DEFAULT_BASE_URL, CandidateRecord, DetailRecord
from popcorn_browser.parsing import parse_detail_payload, parse_search_payload, soft_error_message

logger = logging.getLogger(__name__)

OMDB_USER_AGENT = "popcorn-browser/1.0"


class NoResultsError(LookupError):
    """The catalog answered a search with its soft "zero matches" error."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


async def _get_json(
    *,
    client: httpx.AsyncClient | None,
    base_url: str,
    params: dict[str, str],
    timeout_seconds: int,
) -> Any:
    """Issue one GET against the catalog and decode the JSON body."""
    headers = {"User-Agent": OMDB_USER_AGENT}
    if client is not None:
        response = await client.get(
            base_url,
            params=params,
            headers=headers,
            timeout=timeout_seconds,
        )
    else:
        async with httpx.AsyncClient() as tmp_client:
            response = await tmp_client.get(
                base_url,
                params=params,
                headers=headers,
                timeout=timeout_seconds,
            )

    response.raise_for_status()
    try:
        return response.json()
    except ValueError as exc:
        raise ValueError("Invalid OMDb JSON response") from exc


async def search_titles(
    *,
    client: httpx.AsyncClient | None,
    query: str,
    api_key: str,
    timeout_seconds: int,
    base_url: str = OMDB_DEFAULT_BASE_URL,
) -> list[CandidateRecord]:
    """Search the catalog by free text.

    Raises:
        NoResultsError: The catalog reported zero matches.
        httpx.HTTPError: Transport or HTTP status failure.
        ValueError: The response body was not a valid search payload.
    """
    payload = await _get_json(
        client=client,
        base_url=base_url,
        params={"apikey": api_key, "s": query.strip()},
        timeout_seconds=timeout_seconds,
    )
    error = soft_error_message(payload)
    if error is not None:
        raise NoResultsError(error)
    records = parse_search_payload(payload)
    logger.debug("OMDb search %r returned %d candidates", query, len(records))
    return records


async def fetch_title(
    *,
    client: httpx.AsyncClient | None,
    imdb_id: str,
    api_key: str,
    timeout_seconds: int,
    base_url: str = OMDB_DEFAULT_BASE_URL,
) -> DetailRecord:
    """Fetch the full catalog record for one identifier.

    Raises:
        httpx.HTTPError: Transport or HTTP status failure.
        ValueError: Invalid payload, or the catalog rejected the identifier.
    """
    payload = await _get_json(
        client=client,
        base_url=base_url,
        params={"apikey": api_key, "i": imdb_id},
        timeout_seconds=timeout_seconds,
    )
    error = soft_error_message(payload)
    if error is not None:
        raise ValueError(f"OMDb lookup failed for {imdb_id}: {error}")
    return parse_detail_payload(payload, imdb_id)


__all__ = [
    "OMDB_USER_AGENT",
    "NoResultsError",
    "fetch_title",
    "search_titles",
]
