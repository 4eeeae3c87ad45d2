from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from threading import Condition, Lock

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 30 * 60


@dataclass
class SessionState:
    session_id: str
    used_movie_ids: set[int] = field(default_factory=set)
    created_at: float = 0.0
    last_accessed: float = 0.0


class ReadWriteLock:
    """Many concurrent readers or a single writer.

    Waiting writers block new readers so a steady stream of reads cannot
    starve the sweep.
    """

    def __init__(self) -> None:
        self._cond = Condition(Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            while self._writer or self._readers:
                self._cond.wait()
            self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class SessionStore:
    """In-memory store of per-session used movie ids.

    Sessions live only in this process. Each one is dropped by `sweep` once
    it has been idle for longer than `timeout_s`; `run_sweeper` calls
    `sweep` every `timeout_s / 2` seconds.

    Callers always receive copies of SessionState, never the stored object.
    """

    def __init__(
        self,
        *,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if timeout_s <= 0:
            raise ValueError("timeout_s must be positive")
        self._timeout_s = timeout_s
        self._clock = clock
        self._lock = ReadWriteLock()
        self._sessions: dict[str, SessionState] = {}

    @property
    def timeout_s(self) -> float:
        return self._timeout_s

    @property
    def sweep_interval_s(self) -> float:
        return self._timeout_s / 2

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        with self._lock.read():
            return session_id in self._sessions

    def create(self, session_id: str) -> SessionState:
        with self._lock.write():
            state = self._sessions.get(session_id)
            if state is None:
                now = self._clock()
                state = SessionState(session_id=session_id, created_at=now, last_accessed=now)
                self._sessions[session_id] = state
            else:
                state.last_accessed = self._clock()
            return _snapshot(state)

    def get(self, session_id: str) -> SessionState | None:
        # Touching last_accessed is a mutation, so this takes the write side.
        with self._lock.write():
            state = self._sessions.get(session_id)
            if state is None:
                return None
            state.last_accessed = self._clock()
            return _snapshot(state)

    def mark_used(self, session_id: str, movie_id: int) -> None:
        with self._lock.write():
            state = self._sessions.get(session_id)
            if state is None:
                return
            state.used_movie_ids.add(movie_id)
            state.last_accessed = self._clock()

    def is_used(self, session_id: str, movie_id: int) -> bool:
        with self._lock.read():
            state = self._sessions.get(session_id)
            return state is not None and movie_id in state.used_movie_ids

    def claim(self, session_id: str, movie_id: int) -> bool:
        """Mark `movie_id` used and report whether this call was the one to do so."""

        with self._lock.write():
            state = self._sessions.get(session_id)
            if state is None or movie_id in state.used_movie_ids:
                return False
            state.used_movie_ids.add(movie_id)
            state.last_accessed = self._clock()
            return True

    def delete(self, session_id: str) -> None:
        with self._lock.write():
            self._sessions.pop(session_id, None)

    def sweep(self) -> int:
        with self._lock.write():
            now = self._clock()
            expired = [
                sid
                for sid, state in self._sessions.items()
                if now - state.last_accessed > self._timeout_s
            ]
            for sid in expired:
                del self._sessions[sid]

        if expired:
            logger.info("Expired %d idle session(s)", len(expired))
        return len(expired)

    async def run_sweeper(self) -> None:
        while True:
            await asyncio.sleep(self.sweep_interval_s)
            try:
                self.sweep()
            except Exception:
                logger.exception("Session sweep failed")


def _snapshot(state: SessionState) -> SessionState:
    return replace(state, used_movie_ids=set(state.used_movie_ids))


def create_session_store(*, timeout_s: float = DEFAULT_TIMEOUT_S) -> SessionStore:
    return SessionStore(timeout_s=timeout_s)
