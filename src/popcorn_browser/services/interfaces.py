"""Service interfaces + default adapters for app-level dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import httpx

from popcorn_browser.models import OMDB_DEFAULT_BASE_URL, CandidateRecord, DetailRecord
from popcorn_browser.services import omdb_service as _omdb


@runtime_checkable
class CatalogService(Protocol):
    """Interface for remote movie catalog lookups."""

    async def search_titles(
        self,
        *,
        client: httpx.AsyncClient | None,
        query: str,
        api_key: str,
        timeout_seconds: int,
        base_url: str = OMDB_DEFAULT_BASE_URL,
    ) -> list[CandidateRecord]:
        """Search the catalog by free text."""
        ...

    async def fetch_title(
        self,
        *,
        client: httpx.AsyncClient | None,
        imdb_id: str,
        api_key: str,
        timeout_seconds: int,
        base_url: str = OMDB_DEFAULT_BASE_URL,
    ) -> DetailRecord:
        """Fetch one full catalog record."""
        ...


class DefaultCatalogService:
    """Default adapter that delegates to function-based OMDb services."""

    async def search_titles(
        self,
        *,
        client: httpx.AsyncClient | None,
        query: str,
        api_key: str,
        timeout_seconds: int,
        base_url: str = OMDB_DEFAULT_BASE_URL,
    ) -> list[CandidateRecord]:
        return await _omdb.search_titles(
            client=client,
            query=query,
            api_key=api_key,
            timeout_seconds=timeout_seconds,
            base_url=base_url,
        )

    async def fetch_title(
        self,
        *,
        client: httpx.AsyncClient | None,
        imdb_id: str,
        api_key: str,
        timeout_seconds: int,
        base_url: str = OMDB_DEFAULT_BASE_URL,
    ) -> DetailRecord:
        return await _omdb.fetch_title(
            client=client,
            imdb_id=imdb_id,
            api_key=api_key,
            timeout_seconds=timeout_seconds,
            base_url=base_url,
        )


@dataclass(slots=True)
class AppServices:
    """Aggregated service interfaces consumed by the app layer."""

    catalog: CatalogService


def build_default_app_services() -> AppServices:
    """Build default app services backed by the function-based modules."""
    return AppServices(catalog=DefaultCatalogService())


__all__ = [
    "AppServices",
    "CatalogService",
    "DefaultCatalogService",
    "build_default_app_services",
]
