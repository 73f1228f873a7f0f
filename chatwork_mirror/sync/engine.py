"""
Implementation of the poll cycle.
"""

from __future__ import annotations

import datetime
import time
from logging import Logger
from typing import Callable

from pydantic import BaseModel, Field

from ..core.cache import EntityCache
from ..core.entities import Chat, Room
from ..core.exceptions import ChatworkError
from ..core.models import RoomInfo
from ..core.state import SessionState
from ..core.transport import Transport
from .detector import ChangeDetector
from .fetcher import DEFAULT_PAGE_SIZE, RoomDeltaFetcher
from .filter import DEFAULT_RECENCY_WINDOW, filter_messages
from .resolver import PersonResolver

__all__ = [
    "SyncEngine",
    "SyncOptions",
]


class SyncOptions(BaseModel):
    """
    Tunables of the poll cycle.
    """

    recency_window: int = Field(default=DEFAULT_RECENCY_WINDOW, ge=0)
    """
    Maximum age in seconds of a message accepted by a poll.
    """

    page_size: int = Field(default=DEFAULT_PAGE_SIZE, gt=0)
    """
    Maximum number of chats requested per changed room.
    """


class SyncEngine:
    """
    Runs poll cycles for a session: detect changed rooms, fetch each room's
    delta, filter it, resolve senders and commit the room.

    Rooms are committed one at a time. If a step fails, rooms committed
    earlier in the cycle stay committed and the error is raised with their
    chats attached as {obj}`ChatworkError.partial_chats`.
    """

    detector: ChangeDetector
    fetcher: RoomDeltaFetcher
    resolver: PersonResolver
    options: SyncOptions

    _state: SessionState
    _cache: EntityCache
    _clock: Callable[[], float]
    _logger: Logger

    def __init__(
        self,
        transport: Transport,
        state: SessionState,
        cache: EntityCache,
        logger: Logger,
        *,
        options: SyncOptions | None = None,
        clock: Callable[[], float] | None = None,
    ):
        self.options = options or SyncOptions()

        self._state = state
        self._cache = cache
        self._clock = clock or time.time
        self._logger = logger

        self.detector = ChangeDetector(transport, state, cache, logger)
        self.fetcher = RoomDeltaFetcher(
            transport, state, cache, logger, page_size=self.options.page_size
        )
        self.resolver = PersonResolver(transport, state, cache, logger)

    def poll(self) -> list[Chat]:
        """
        Run one poll cycle and return new chats.
        """
        chats: list[Chat] = []

        try:
            cursor, changed = self.detector.poll(self._state.cursor)
            self._state.cursor = cursor

            for room_id in sorted(changed):
                room = self._cache.rooms[room_id]
                chats += self._sync_room(room)
        except ChatworkError as e:
            e.partial_chats = chats
            raise

        if chats:
            self._logger.info(f"Received {len(chats)} new chats")

        return chats

    def _sync_room(self, room: Room) -> list[Chat]:
        """
        Fetch, filter and resolve a room's delta, then commit the room.
        Nothing is committed if any step raises.
        """
        info: RoomInfo | None = self.fetcher.fetch(room)
        if info is None:
            return []

        now = self._clock()
        state, accepted = filter_messages(
            room.state, info.chats, now, self.options.recency_window
        )

        skipped = len(info.chats) - len(accepted)
        if skipped:
            self._logger.debug(f"Filtered out {skipped} chats in {room}")

        chats = [
            Chat(
                id=raw.id,
                message=raw.message,
                person=self.resolver.resolve(raw.person_id),
                room=room,
                time=datetime.datetime.fromtimestamp(
                    raw.timestamp, tz=datetime.timezone.utc
                ),
            )
            for raw in accepted
        ]

        room._refresh(info)
        room._apply_state(state)

        return chats
