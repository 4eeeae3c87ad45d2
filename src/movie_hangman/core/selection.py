from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from typing import Protocol

from movie_hangman.core.schemas import MovieDetails

logger = logging.getLogger(__name__)


class NoCandidatesError(RuntimeError):
    pass


class UsedMovieTracker(Protocol):
    def get(self, session_id: str) -> object | None: ...

    def create(self, session_id: str) -> object: ...

    def is_used(self, session_id: str, movie_id: int) -> bool: ...

    def claim(self, session_id: str, movie_id: int) -> bool: ...


def choose_random_movie(
    movies: Sequence[MovieDetails],
    session_id: str | None,
    tracker: UsedMovieTracker,
    *,
    rng: random.Random | None = None,
) -> MovieDetails:
    """Pick one movie from a candidate page.

    Without a session id every candidate is equally likely and nothing is
    recorded. With one, movies already shown to the session are skipped and
    the pick is marked used. When the whole page has been shown, a random
    movie from the full page is returned instead.
    """

    if not movies:
        raise NoCandidatesError("No movies found")

    rng = rng or random.Random()

    if not session_id:
        return rng.choice(movies)

    # Looking the session up refreshes it, so a request that only repeats a
    # movie still counts as activity.
    if tracker.get(session_id) is None:
        tracker.create(session_id)

    available = [m for m in movies if not tracker.is_used(session_id, m.id)]
    while available:
        pick = available.pop(rng.randrange(len(available)))
        # Another request for the same session may have claimed it meanwhile.
        if tracker.claim(session_id, pick.id):
            return pick

    logger.info("Session %s has seen every movie on this page; repeating one", session_id)
    return rng.choice(movies)
