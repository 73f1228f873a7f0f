"""
Per-room delta requests.
"""

from __future__ import annotations

from logging import Logger

from ..core.cache import EntityCache
from ..core.entities import Room
from ..core.models import RoomInfo, RoomInfoResponse, parse_response
from ..core.state import SessionState
from ..core.transport import Transport
from ._base import SyncComponent

__all__ = ["RoomDeltaFetcher"]

COMMAND = "get_room_info"

DEFAULT_PAGE_SIZE = 20


class RoomDeltaFetcher(SyncComponent):
    """
    Requests recent chats of a room, anchored at its chat count and last
    update timestamp.
    """

    page_size: int
    """Maximum number of chats requested per room"""

    def __init__(
        self,
        transport: Transport,
        state: SessionState,
        cache: EntityCache,
        logger: Logger,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
    ):
        super().__init__(transport, state, cache, logger)
        self.page_size = page_size

    def fetch(self, room: Room) -> RoomInfo | None:
        """
        Get room info with its chat list, or `None` if the response doesn't
        include the room.
        """
        anchor = {
            "c": room.chat_count,
            "u": self.page_size,
            "t": room.last_update,
            "l": 0,
        }

        content = self._send(COMMAND, {"i": {room.id: anchor}})
        response = parse_response(RoomInfoResponse, content, COMMAND)

        info = response.result.rooms.get(room.id)

        if info is None:
            self._logger.debug(f"No room info returned for {room}, skipping")
        else:
            self._logger.debug(f"Fetched {len(info.chats)} chats for {room}")

        return info
