"""Lifetime and paging state of an interactive Pokédex message."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable

from .constants import SESSION_TIMEOUT
from .pagination import next_page, previous_page
from .pokedex import PageResult

log = logging.getLogger(__name__)

PageFetcher = Callable[[int], Awaitable[PageResult]]
PageRenderer = Callable[[PageResult], Awaitable[None]]
ExpiryCallback = Callable[["PokedexSession"], Awaitable[None]]


class SessionState(Enum):
    ACTIVE = "active"
    EXPIRED = "expired"


class PageDirection(Enum):
    PREVIOUS = "previous"
    NEXT = "next"


class PokedexSession:
    """Paging state bound to one rendered Pokédex message.

    The session accepts page turns from the requester only.  It expires a
    fixed ``timeout`` after :meth:`start`; page turns do not extend that
    window.  Turns are serialised so the last applied turn is also the last
    one rendered.

    Expiry rejects new events at once, but a turn already being fetched
    finishes first; the expiry callbacks (which detach the buttons) run
    after it releases the lock.
    """

    def __init__(
        self,
        requester_id: int,
        result: PageResult,
        fetch_page: PageFetcher,
        *,
        timeout: float = SESSION_TIMEOUT,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.requester_id = requester_id
        self.result = result
        self.timeout = float(timeout)
        self.state = SessionState.ACTIVE
        self.deadline: float | None = None
        self._fetch_page = fetch_page
        self._clock = clock
        self._lock = asyncio.Lock()
        self._timer: asyncio.Task[None] | None = None
        self._expiry_callbacks: list[ExpiryCallback] = []

    @property
    def expired(self) -> bool:
        return self.state is SessionState.EXPIRED

    def add_expiry_callback(self, callback: ExpiryCallback) -> None:
        self._expiry_callbacks.append(callback)

    def accepts(self, actor_id: int) -> bool:
        return actor_id == self.requester_id

    def start(self) -> None:
        """Arm the expiry timer.  Must be called from a running event loop."""

        if self.deadline is not None:
            return
        self.deadline = self._now() + self.timeout
        self._timer = asyncio.create_task(self._expire_at_deadline(self.deadline))

    async def turn(
        self, direction: PageDirection, actor_id: int, render: PageRenderer
    ) -> PageResult | None:
        """Apply a page turn and render it.

        Returns ``None`` when the event is ignored.  Errors raised while
        fetching or rendering leave the current page untouched.
        """

        if not self.accepts(actor_id):
            log.debug("Ignoring page turn from %s on session of %s", actor_id, self.requester_id)
            return None
        if self.expired:
            return None
        async with self._lock:
            if self.expired:
                return None
            if self._deadline_passed():
                if self._mark_expired():
                    await self._run_expiry_callbacks()
                return None
            current = self.result
            if direction is PageDirection.PREVIOUS:
                target = previous_page(current.current_page, current.total_pages)
            else:
                target = next_page(current.current_page, current.total_pages)
            log.debug(
                "Turning %s's Pokédex from page %s to %s",
                current.player_name,
                current.current_page,
                target,
            )
            result = await self._fetch_page(target)
            await render(result)
            self.result = result
            return result

    async def expire(self) -> None:
        if not self._mark_expired():
            return
        async with self._lock:
            await self._run_expiry_callbacks()

    def _now(self) -> float:
        if self._clock is not None:
            return self._clock()
        return asyncio.get_running_loop().time()

    def _deadline_passed(self) -> bool:
        return self.deadline is not None and self._now() >= self.deadline

    async def _expire_at_deadline(self, deadline: float) -> None:
        await asyncio.sleep(max(0.0, deadline - self._now()))
        try:
            await self.expire()
        except Exception:
            log.exception("Failed to expire the Pokédex session of %s", self.requester_id)

    def _mark_expired(self) -> bool:
        if self.expired:
            return False
        self.state = SessionState.EXPIRED
        timer = self._timer
        if timer is not None and timer is not asyncio.current_task():
            timer.cancel()
        self._timer = None
        return True

    async def _run_expiry_callbacks(self) -> None:
        for callback in list(self._expiry_callbacks):
            await callback(self)


class SessionRegistry:
    """Live sessions keyed by the id of the message they control."""

    def __init__(self) -> None:
        self._sessions: dict[int, PokedexSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, message_id: object) -> bool:
        return message_id in self._sessions

    def get(self, message_id: int) -> PokedexSession | None:
        return self._sessions.get(message_id)

    async def register(self, message_id: int, session: PokedexSession) -> None:
        """Track ``session`` and expire any earlier session of the same requester."""

        superseded = [
            existing
            for existing in self._sessions.values()
            if existing.requester_id == session.requester_id and existing is not session
        ]
        for existing in superseded:
            await existing.expire()

        async def _forget(expired: PokedexSession) -> None:
            if self._sessions.get(message_id) is expired:
                del self._sessions[message_id]

        session.add_expiry_callback(_forget)
        self._sessions[message_id] = session
        if session.expired:
            self._sessions.pop(message_id, None)

    async def close_all(self) -> None:
        for session in list(self._sessions.values()):
            await session.expire()
        self._sessions.clear()


__all__ = [
    "PageDirection",
    "PokedexSession",
    "SessionRegistry",
    "SessionState",
]
