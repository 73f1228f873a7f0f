"""
Detection of rooms with pending updates.
"""

from __future__ import annotations

from typing import Any

from ..core.exceptions import AuthError, StatusError
from ..core.models import GetUpdateResponse, parse_response
from ._base import SyncComponent

__all__ = [
    "ChangeDetector",
    "decode_room_ids",
]

COMMAND = "get_update"


class ChangeDetector(SyncComponent):
    """
    Asks the gateway which rooms changed since the cursor.
    """

    def poll(self, cursor: str) -> tuple[str, set[str]]:
        """
        Get the new cursor and ids of changed rooms which are already cached.
        The new cursor is returned even if no room changed.

        The cursor comes from the gateway itself, so a failure status means
        the session was rejected, e.g. because its token expired.

        :param cursor: Current position in the update stream

        :raises AuthError: Gateway rejected the session
        """
        try:
            content = self._send(COMMAND, {"last_id": cursor})
        except StatusError as e:
            self._logger.warning(f"Update rejected, session expired: {e}")
            raise AuthError(
                f"Session rejected: {e.status_message}", command=COMMAND
            ) from e

        response = parse_response(GetUpdateResponse, content, COMMAND)
        result = response.result

        changed: set[str] = set()

        for room_id in decode_room_ids(result.update_info.room):
            if room_id in self._cache.rooms:
                changed.add(room_id)
            else:
                self._logger.debug(f"Ignoring update for unknown room {room_id}")

        self._logger.debug(
            f"Polled update: cursor {cursor} -> {result.last_id}, changed rooms: {sorted(changed)}"
        )

        return result.last_id, changed


def decode_room_ids(value: Any) -> set[str]:
    """
    Extract room ids from the loosely structured `update_info.room` value.

    A mapping contributes its keys and a list its scalar entries. Anything
    else, including entries which aren't a string or integer, is discarded.
    """
    if isinstance(value, dict):
        entries = list(value.keys())
    elif isinstance(value, list):
        entries = value
    else:
        return set()

    room_ids: set[str] = set()

    for entry in entries:
        # bool is a subclass of int but never a room id
        if isinstance(entry, bool):
            continue
        if isinstance(entry, int):
            room_ids.add(str(entry))
        elif isinstance(entry, str) and entry.strip():
            room_ids.add(entry.strip())

    return room_ids
