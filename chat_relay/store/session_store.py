"""In-memory session store for conversation history.

Sessions live for the lifetime of the store object. The store is created
once per application and handed to the relay, so tests get isolation by
building a fresh instance.

Eviction is optional and lazy:
    - ``max_sessions`` caps the number of sessions (least recently used first)
    - ``ttl_seconds`` drops sessions idle for longer than the TTL

Both run when a new session is created. A session that is checked out by a
relay, or waiting to be, is never evicted.
"""

import asyncio
import logging
import time
from collections import OrderedDict
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from chat_relay.models.schemas import ChatTurn

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """Handle to one session's turns and its relay lock."""

    session_id: str
    turns: list[ChatTurn] = field(default_factory=list)
    last_access: float = 0.0
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)
    holders: int = 0

    @property
    def busy(self) -> bool:
        return self.holders > 0


class SessionStore:
    """Keyed storage of ordered chat turns.

    ``get``, ``replace`` and ``append`` never fail. Per-session mutual
    exclusion is provided by ``checkout`` / ``release``.
    """

    def __init__(
        self,
        max_sessions: int | None = None,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize an empty store.

        Args:
            max_sessions: Maximum number of sessions kept. None for unbounded.
            ttl_seconds: Idle time after which a session may be dropped.
                None to keep sessions forever.
            clock: Monotonic time source, injectable for tests.

        Raises:
            ValueError: If a limit is not positive.
        """
        if max_sessions is not None and max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        if ttl_seconds is not None and ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")

        self._sessions: OrderedDict[str, Session] = OrderedDict()
        self._max_sessions = max_sessions
        self._ttl_seconds = ttl_seconds
        self._clock = clock

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def get(self, session_id: str) -> list[ChatTurn]:
        """Return a copy of the session's turns, or an empty list if unseen."""
        session = self._sessions.get(session_id)
        if session is None:
            return []
        self._touch(session)
        return list(session.turns)

    def replace(self, session_id: str, turns: Iterable[ChatTurn]) -> None:
        """Overwrite the session's turns wholesale."""
        session = self.get_or_create(session_id)
        session.turns = list(turns)

    def append(self, session_id: str, turn: ChatTurn) -> None:
        """Append one turn, creating the session if needed."""
        session = self.get_or_create(session_id)
        session.turns.append(turn)

    def get_or_create(self, session_id: str) -> Session:
        """Return the session handle, creating it on first reference."""
        session = self._sessions.get(session_id)
        if session is not None:
            self._touch(session)
            return session

        self.evict_expired()
        self._evict_overflow()

        session = Session(session_id=session_id, last_access=self._clock())
        self._sessions[session_id] = session
        logger.debug(f"Created session {session_id}")
        return session

    async def checkout(self, session_id: str) -> Session:
        """Acquire exclusive use of a session.

        Waits until any other holder releases it. Must be paired with
        ``release``.
        """
        session = self.get_or_create(session_id)
        session.holders += 1
        try:
            await session.lock.acquire()
        except BaseException:
            session.holders -= 1
            raise
        self._touch(session)
        return session

    def release(self, session: Session) -> None:
        """Give up a session obtained from ``checkout``."""
        session.holders -= 1
        session.lock.release()
        self._touch(session)

    def evict_expired(self) -> int:
        """Drop idle sessions older than the TTL.

        Returns:
            Number of sessions removed.
        """
        if self._ttl_seconds is None:
            return 0

        cutoff = self._clock() - self._ttl_seconds
        expired = [
            sid
            for sid, session in self._sessions.items()
            if session.last_access < cutoff and not session.busy
        ]
        for sid in expired:
            del self._sessions[sid]

        if expired:
            logger.info(f"Evicted {len(expired)} expired session(s)")
        return len(expired)

    def _evict_overflow(self) -> None:
        # Makes room for one new session. Busy sessions are skipped, so the
        # cap may be exceeded while every session is in use.
        if self._max_sessions is None:
            return

        for sid in list(self._sessions):
            if len(self._sessions) < self._max_sessions:
                break
            if self._sessions[sid].busy:
                continue
            del self._sessions[sid]
            logger.debug(f"Evicted least recently used session {sid}")

    def _touch(self, session: Session) -> None:
        session.last_access = self._clock()
        self._sessions.move_to_end(session.session_id)
