"""
Domain objects mirrored from Chatwork.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field

from .models import PersonModel, RoomModel

__all__ = [
    "Person",
    "Room",
    "RoomState",
    "Chat",
]


@dataclass(frozen=True)
class Person:
    """
    Chatwork account. Once cached, a person is never updated.
    """

    id: int
    external_id: str = ""
    name: str = ""
    organization: str = ""

    @classmethod
    def _from_model(cls, model: PersonModel) -> Person:
        return cls(
            id=model.id,
            external_id=model.external_id or "",
            name=model.name or "",
            organization=model.organization or "",
        )


@dataclass(frozen=True)
class RoomState:
    """
    Per-room synchronization marks used for filtering.
    """

    high_water_id: int = 0
    """Largest message id ever emitted for the room"""

    last_update: int = 0
    """Latest message timestamp seen, in epoch seconds"""


@dataclass(eq=False)
class Room:
    """
    Chat room. Compared and hashed by identity; the cache guarantees one
    object per room id.
    """

    id: str
    name: str = ""
    type: int = 0

    last_update: int = 0
    """
    Timestamp anchor sent with each delta request; never decreases.
    """

    read_count: int = 0

    chat_count: int = 0
    """
    Count anchor sent with each delta request.
    """

    members: dict[str, int] = field(default_factory=dict)
    """
    Mapping of person id to role.
    """

    high_water_id: int = 0
    """
    Client-local dedup mark, never sent to the gateway.
    """

    def __str__(self) -> str:
        return f"Room(id={self.id}, name={self.name!r})"

    @property
    def state(self) -> RoomState:
        return RoomState(
            high_water_id=self.high_water_id, last_update=self.last_update
        )

    def _apply_state(self, state: RoomState):
        """
        Commit new marks, keeping both monotonic.
        """
        self.high_water_id = max(self.high_water_id, state.high_water_id)
        self.last_update = max(self.last_update, state.last_update)

    def _refresh(self, model: RoomModel):
        """
        Update descriptive fields and the count anchor from fields present in
        the model. The timestamp anchor only moves through accepted messages.
        """
        fields = model.model_fields_set

        if "name" in fields and model.name is not None:
            self.name = model.name
        if "type" in fields:
            self.type = model.type
        if "read_count" in fields:
            self.read_count = model.read_count
        if "chat_count" in fields:
            self.chat_count = model.chat_count
        if "members" in fields:
            self.members = dict(model.members)

    @classmethod
    def _from_model(cls, room_id: str, model: RoomModel) -> Room:
        return cls(
            id=room_id,
            name=model.name or "",
            type=model.type,
            last_update=model.last_update,
            read_count=model.read_count,
            chat_count=model.chat_count,
            members=dict(model.members),
        )


@dataclass(frozen=True)
class Chat:
    """
    Newly received message. Built per poll and not stored.
    """

    id: int
    message: str
    person: Person
    room: Room
    time: datetime.datetime

    def __str__(self) -> str:
        return f"[{self.room.name}] {self.person.name}: {self.message}"
