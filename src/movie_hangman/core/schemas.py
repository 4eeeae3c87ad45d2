from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MovieDetails(BaseModel):
    # TMDB returns many more fields (genre_ids, poster_path, ...); only the
    # ones the game needs are kept.
    model_config = ConfigDict(extra="ignore")

    id: int
    original_language: str = ""
    overview: str = ""
    title: str = ""
    release_date: str = ""
    vote_average: float = 0.0
    vote_count: int = Field(default=0, ge=0)
    popularity: float = 0.0

    @field_validator("original_language", "overview", "title", "release_date", mode="before")
    @classmethod
    def _null_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("vote_average", "vote_count", "popularity", mode="before")
    @classmethod
    def _null_to_zero(cls, value: Any) -> Any:
        return 0 if value is None else value


class DiscoverPage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    results: list[MovieDetails] = Field(default_factory=list)
    page: int = 0
    total_pages: int = Field(default=0, ge=0)
    total_results: int = Field(default=0, ge=0)
