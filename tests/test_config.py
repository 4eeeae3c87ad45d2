from __future__ import annotations

from movie_hangman.core.config import load_settings


def test_defaults(monkeypatch) -> None:
    for name in (
        "THE_MOVIE_DB_TOKEN",
        "MOVIE_HANGMAN_SESSION_TIMEOUT_S",
        "MOVIE_HANGMAN_CORS_ORIGINS",
        "MOVIE_HANGMAN_PORT",
        "MOVIE_HANGMAN_RELEASE_DATE_FLOOR",
    ):
        monkeypatch.delenv(name, raising=False)

    s = load_settings(dotenv=False)
    assert s.tmdb_token == ""
    assert s.session_timeout_s == 1800
    assert s.cors_origins == []
    assert s.port == 8080
    assert s.release_date_floor == "2000-01-01"


def test_reads_environment(monkeypatch) -> None:
    monkeypatch.setenv("THE_MOVIE_DB_TOKEN", " abc123 ")
    monkeypatch.setenv("MOVIE_HANGMAN_SESSION_TIMEOUT_S", "120")
    monkeypatch.setenv("MOVIE_HANGMAN_CORS_ORIGINS", "https://a.example\nhttps://b.example, ")
    monkeypatch.setenv("MOVIE_HANGMAN_TMDB_BASE_URL", "http://localhost:9999/3/")
    monkeypatch.setenv("MOVIE_HANGMAN_LOG_LEVEL", "debug")

    s = load_settings(dotenv=False)
    assert s.tmdb_token == "abc123"
    assert s.session_timeout_s == 120
    assert s.cors_origins == ["https://a.example", "https://b.example"]
    assert s.tmdb_base_url == "http://localhost:9999/3"
    assert s.log_level == "DEBUG"


def test_dotenv_file_is_loaded_without_overriding(tmp_path, monkeypatch) -> None:
    (tmp_path / ".env").write_text(
        "THE_MOVIE_DB_TOKEN=from-file\nMOVIE_HANGMAN_PORT=9000\n"
    )
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("THE_MOVIE_DB_TOKEN", raising=False)
    monkeypatch.setenv("MOVIE_HANGMAN_PORT", "7000")

    s = load_settings()
    assert s.tmdb_token == "from-file"
    assert s.port == 7000
