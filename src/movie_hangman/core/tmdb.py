from __future__ import annotations

import logging
from collections.abc import Mapping

import httpx
from pydantic import ValidationError

from movie_hangman.core.schemas import DiscoverPage

logger = logging.getLogger(__name__)

TMDB_BASE = "https://api.themoviedb.org/3"

# Parameters sent with every discovery query.
BASE_DISCOVER_PARAMS: dict[str, str] = {
    "include_adult": "false",
    "include_video": "false",
}


class MovieCatalogError(RuntimeError):
    pass


class TMDBClient:
    """Thin client for the TMDB `/discover/movie` endpoint.

    Only a single page is ever fetched per call. There is no retry or
    backoff; failures surface as MovieCatalogError.
    """

    def __init__(
        self,
        token: str,
        *,
        base_url: str = TMDB_BASE,
        release_date_floor: str | None = "2000-01-01",
        client: httpx.Client | None = None,
        timeout_s: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._release_date_floor = release_date_floor
        self._owns_client = client is None
        self._timeout_s = timeout_s
        self._transport = transport
        self._client = client if client is not None else self._new_client()
        self._headers = {
            "Authorization": f"Bearer {token}",
            "accept": "application/json",
        }

    def _new_client(self) -> httpx.Client:
        return httpx.Client(timeout=self._timeout_s, transport=self._transport)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> TMDBClient:
        return self

    def __exit__(self, *_exc) -> None:
        self.close()

    def build_params(self, filters: Mapping[str, str], *, include_page: bool = True) -> dict[str, str]:
        params = dict(BASE_DISCOVER_PARAMS)
        for key, value in filters.items():
            if key == "page" and not include_page:
                continue
            params[key] = value
        if self._release_date_floor:
            params["primary_release_date.gte"] = self._release_date_floor
        return params

    def discover(self, filters: Mapping[str, str]) -> DiscoverPage:
        return self._get_page(self.build_params(filters))

    def total_pages(self, filters: Mapping[str, str]) -> int:
        page = self._get_page(self.build_params(filters, include_page=False))
        logger.debug(
            "Discover probe: total_pages=%s total_results=%s",
            page.total_pages,
            page.total_results,
        )
        return page.total_pages

    def _get_page(self, params: dict[str, str]) -> DiscoverPage:
        url = f"{self._base_url}/discover/movie"
        logger.debug("Requesting %s params=%s", url, params)

        # An owned client closed at app shutdown is reopened if the app starts again.
        if self._owns_client and self._client.is_closed:
            self._client = self._new_client()

        try:
            resp = self._client.get(url, params=params, headers=self._headers)
        except httpx.HTTPError as e:
            logger.error("TMDB request failed: %s", e)
            raise MovieCatalogError(f"TMDB request failed: {e}") from e

        if resp.status_code >= 400:
            logger.error("TMDB responded with %s: %s", resp.status_code, resp.text[:200])
            raise MovieCatalogError(f"TMDB responded with {resp.status_code}")

        try:
            payload = resp.json()
        except ValueError as e:
            logger.error("Error decoding TMDB response: %s", e)
            raise MovieCatalogError("TMDB returned a non-JSON body") from e

        try:
            return DiscoverPage.model_validate(payload)
        except ValidationError as e:
            logger.error("Unexpected TMDB payload: %s", e)
            raise MovieCatalogError("TMDB returned an unexpected payload") from e
