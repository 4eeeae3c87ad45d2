"""Shared fakes for the API test suite."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from movie_hangman.api.app import create_app
from movie_hangman.api.session import SessionStore
from movie_hangman.core.config import Settings
from movie_hangman.core.schemas import DiscoverPage, MovieDetails


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_movie(movie_id: int, title: str | None = None) -> MovieDetails:
    return MovieDetails(
        id=movie_id,
        original_language="en",
        overview=f"Overview of movie {movie_id}",
        title=title or f"Movie {movie_id}",
        release_date="2010-01-01",
        vote_average=7.5,
        vote_count=100,
        popularity=12.0,
    )


class FakeCatalog:
    """Stands in for TMDBClient; serves one fixed candidate page."""

    def __init__(self, movies: list[MovieDetails], *, total_pages: int = 3) -> None:
        self.movies = movies
        self.pages = total_pages
        self.discover_calls: list[dict[str, str]] = []
        self.probe_calls: list[dict[str, str]] = []

    def total_pages(self, filters: dict[str, str]) -> int:
        self.probe_calls.append(dict(filters))
        return self.pages

    def discover(self, filters: dict[str, str]) -> DiscoverPage:
        self.discover_calls.append(dict(filters))
        return DiscoverPage(
            results=list(self.movies),
            page=int(filters.get("page", "1")),
            total_pages=self.pages,
            total_results=len(self.movies) * self.pages,
        )

    def close(self) -> None:
        pass


@pytest.fixture()
def settings() -> Settings:
    return Settings(tmdb_token="test-token")


@pytest.fixture()
def catalog() -> FakeCatalog:
    return FakeCatalog([make_movie(i) for i in range(1, 6)])


@pytest.fixture()
def store() -> SessionStore:
    return SessionStore(timeout_s=60)


@pytest.fixture()
def client(settings: Settings, catalog: FakeCatalog, store: SessionStore) -> TestClient:
    app = create_app(settings=settings, session_store=store, catalog=catalog)
    return TestClient(app)
