"""Tests for the OMDb catalog service helpers and the service interfaces."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from popcorn_browser.models import OMDB_DEFAULT_BASE_URL
from popcorn_browser.services.interfaces import (
    AppServices,
    CatalogService,
    DefaultCatalogService,
    build_default_app_services,
)
from popcorn_browser.services.omdb_service import (
    OMDB_USER_AGENT,
    NoResultsError,
    fetch_title,
    search_titles,
)


def _client_returning(payload=None, *, json_error: Exception | None = None):
    response = MagicMock()
    if json_error is not None:
        response.json = MagicMock(side_effect=json_error)
    else:
        response.json = MagicMock(return_value=payload)
    response.raise_for_status = MagicMock()
    return SimpleNamespace(get=AsyncMock(return_value=response)), response


async def test_search_titles_uses_shared_client_and_params() -> None:
    client, _ = _client_returning(
        {"Search": [{"imdbID": "tt1375666", "Title": "Inception", "Year": "2010"}]}
    )

    records = await search_titles(
        client=client,
        query="  inception ",
        api_key="k3y",
        timeout_seconds=7,
    )

    assert [r.imdb_id for r in records] == ["tt1375666"]
    client.get.assert_awaited_once()
    args, kwargs = client.get.await_args
    assert args == (OMDB_DEFAULT_BASE_URL,)
    assert kwargs["params"] == {"apikey": "k3y", "s": "inception"}
    assert kwargs["timeout"] == 7
    assert kwargs["headers"]["User-Agent"] == OMDB_USER_AGENT


async def test_search_titles_soft_error_raises_no_results() -> None:
    client, _ = _client_returning({"Response": "False", "Error": "Movie not found!"})

    with pytest.raises(NoResultsError) as excinfo:
        await search_titles(client=client, query="zzzz", api_key="k", timeout_seconds=5)

    assert excinfo.value.message == "Movie not found!"


async def test_search_titles_invalid_json_raises_value_error() -> None:
    client, _ = _client_returning(json_error=ValueError("not json"))

    with pytest.raises(ValueError, match="Invalid OMDb JSON"):
        await search_titles(client=client, query="x", api_key="k", timeout_seconds=5)


async def test_search_titles_http_status_error_propagates() -> None:
    client, response = _client_returning({})
    request = httpx.Request("GET", OMDB_DEFAULT_BASE_URL)
    response.raise_for_status.side_effect = httpx.HTTPStatusError(
        "401 Unauthorized",
        request=request,
        response=httpx.Response(401, request=request),
    )

    with pytest.raises(httpx.HTTPStatusError):
        await search_titles(client=client, query="x", api_key="bad", timeout_seconds=5)


async def test_search_titles_without_client_uses_temporary_client() -> None:
    response = MagicMock()
    response.json = MagicMock(return_value={"Search": []})
    response.raise_for_status = MagicMock()
    tmp_client = MagicMock()
    tmp_client.get = AsyncMock(return_value=response)
    context = MagicMock()
    context.__aenter__ = AsyncMock(return_value=tmp_client)
    context.__aexit__ = AsyncMock(return_value=False)

    with patch(
        "popcorn_browser.services.omdb_service.httpx.AsyncClient", return_value=context
    ) as factory:
        records = await search_titles(client=None, query="x", api_key="k", timeout_seconds=3)

    assert records == []
    factory.assert_called_once_with()
    tmp_client.get.assert_awaited_once()


async def test_fetch_title_parses_detail() -> None:
    client, _ = _client_returning(
        {"imdbID": "tt1375666", "Title": "Inception", "Runtime": "148 min", "imdbRating": "8.8"}
    )

    detail = await fetch_title(
        client=client,
        imdb_id="tt1375666",
        api_key="k",
        timeout_seconds=5,
        base_url="https://omdb.test/",
    )

    assert detail.title == "Inception"
    assert detail.runtime == "148 min"
    args, kwargs = client.get.await_args
    assert args == ("https://omdb.test/",)
    assert kwargs["params"] == {"apikey": "k", "i": "tt1375666"}


async def test_fetch_title_soft_error_raises_value_error() -> None:
    client, _ = _client_returning({"Response": "False", "Error": "Incorrect IMDb ID."})

    with pytest.raises(ValueError, match="Incorrect IMDb ID"):
        await fetch_title(client=client, imdb_id="tt0", api_key="k", timeout_seconds=5)


def test_no_results_error_is_lookup_error() -> None:
    assert issubclass(NoResultsError, LookupError)


def test_default_services_satisfy_protocol() -> None:
    services = build_default_app_services()
    assert isinstance(services, AppServices)
    assert isinstance(services.catalog, DefaultCatalogService)
    assert isinstance(services.catalog, CatalogService)


async def test_default_catalog_delegates_to_module_functions() -> None:
    catalog = DefaultCatalogService()
    with (
        patch(
            "popcorn_browser.services.omdb_service.search_titles",
            new=AsyncMock(return_value=["hit"]),
        ) as search,
        patch(
            "popcorn_browser.services.omdb_service.fetch_title",
            new=AsyncMock(return_value="detail"),
        ) as fetch,
    ):
        hits = await catalog.search_titles(client=None, query="q", api_key="k", timeout_seconds=1)
        detail = await catalog.fetch_title(
            client=None, imdb_id="tt1", api_key="k", timeout_seconds=1
        )

    assert hits == ["hit"]
    assert detail == "detail"
    search.assert_awaited_once_with(
        client=None,
        query="q",
        api_key="k",
        timeout_seconds=1,
        base_url=OMDB_DEFAULT_BASE_URL,
    )
    fetch.assert_awaited_once()
