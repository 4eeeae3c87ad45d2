from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import find_dotenv, load_dotenv

ENV_PREFIX = "MOVIE_HANGMAN_"


def _env(name: str, default: str) -> str:
    return os.environ.get(ENV_PREFIX + name, default).strip()


def parse_csv_env(name: str) -> list[str]:
    raw = _env(name, "")
    if not raw:
        return []

    # Support both comma-separated values and newline-separated values (common in PaaS).
    parts = [p.strip() for p in raw.replace("\n", ",").split(",")]
    return [p for p in parts if p]


@dataclass(frozen=True)
class Settings:
    tmdb_token: str = ""
    tmdb_base_url: str = "https://api.themoviedb.org/3"
    tmdb_timeout_s: float = 10.0
    release_date_floor: str = "2000-01-01"
    session_timeout_s: float = 30 * 60
    cors_origins: list[str] = field(default_factory=list)
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"


def load_settings(*, dotenv: bool = True) -> Settings:
    """Build settings from the process environment.

    A `.env` file in the working directory is loaded first (without
    overriding variables that are already set).
    """

    if dotenv:
        load_dotenv(find_dotenv(usecwd=True), override=False)

    return Settings(
        tmdb_token=os.environ.get("THE_MOVIE_DB_TOKEN", "").strip(),
        tmdb_base_url=_env("TMDB_BASE_URL", "https://api.themoviedb.org/3").rstrip("/"),
        tmdb_timeout_s=float(_env("TMDB_TIMEOUT_S", "10")),
        release_date_floor=_env("RELEASE_DATE_FLOOR", "2000-01-01"),
        session_timeout_s=float(_env("SESSION_TIMEOUT_S", str(30 * 60))),
        cors_origins=parse_csv_env("CORS_ORIGINS"),
        host=_env("HOST", "0.0.0.0"),
        port=int(_env("PORT", "8080")),
        log_level=_env("LOG_LEVEL", "INFO").upper(),
    )
