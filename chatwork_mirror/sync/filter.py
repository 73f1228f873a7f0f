"""
Selection of new and recent messages from a room delta.
"""

from __future__ import annotations

from typing import Iterable

from ..core.entities import RoomState
from ..core.models import RawChat

__all__ = ["filter_messages"]

DEFAULT_RECENCY_WINDOW = 60
"""
Maximum age in seconds of a message accepted by a poll.
"""


def filter_messages(
    state: RoomState,
    messages: Iterable[RawChat],
    now: float,
    window: int = DEFAULT_RECENCY_WINDOW,
) -> tuple[RoomState, list[RawChat]]:
    """
    Select messages which are new and recent, and compute the room's new
    state. Doesn't modify anything.

    Messages are scanned once in delivery order. A message is dropped if:

    - its id is not above `state.high_water_id`
    - its timestamp is before `state.last_update`
    - it's older than `window` seconds relative to `now`
    - its id was already accepted earlier in the same batch

    The new state holds the max id and timestamp of accepted messages, and
    never goes below `state`.

    :param state: Current marks of the room
    :param messages: Candidate messages as returned by the gateway
    :param now: Current time in epoch seconds
    :param window: Recency window in seconds

    :returns: Tuple of new state and accepted messages in delivery order
    """
    accepted: list[RawChat] = []
    accepted_ids: set[int] = set()

    high_water_id = state.high_water_id
    last_update = state.last_update

    for message in messages:
        if message.id <= state.high_water_id:
            continue
        if message.timestamp < state.last_update:
            continue
        if now - message.timestamp > window:
            continue
        if message.id in accepted_ids:
            continue

        accepted.append(message)
        accepted_ids.add(message.id)

        high_water_id = max(high_water_id, message.id)
        last_update = max(last_update, message.timestamp)

    new_state = RoomState(high_water_id=high_water_id, last_update=last_update)

    return new_state, accepted
