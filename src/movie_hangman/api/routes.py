from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query, Request

from movie_hangman.core.difficulty import (
    InvalidDifficultyError,
    build_filters,
    parse_difficulty,
)
from movie_hangman.core.schemas import MovieDetails
from movie_hangman.core.selection import NoCandidatesError, choose_random_movie
from movie_hangman.core.tmdb import MovieCatalogError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/movie", response_model=MovieDetails)
def movie(
    request: Request,
    session_id: str = Query(default=""),
    difficulty: str = Query(default=""),
    language: str = Query(default=""),
) -> MovieDetails:
    try:
        level = parse_difficulty(difficulty)
    except InvalidDifficultyError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    catalog = request.app.state.catalog
    store = request.app.state.session_store

    try:
        filters = build_filters(level, language, catalog)
        page = catalog.discover(filters)
        picked = choose_random_movie(page.results, session_id or None, store)
    except MovieCatalogError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e
    except NoCandidatesError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e

    logger.info(
        "Selected movie id=%s title=%r (difficulty=%s, language=%s)",
        picked.id,
        picked.title,
        level.value,
        language or "any",
    )
    return picked
