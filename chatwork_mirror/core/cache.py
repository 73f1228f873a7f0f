"""
Implements the in-memory mirror of rooms and people.
"""

from __future__ import annotations

from logging import Logger
from typing import Iterable

from .entities import Person, Room

__all__ = ["EntityCache"]


class EntityCache:
    """
    Authoritative local mirror: rooms keyed by room id and people keyed by
    account id. Seeded by login and enriched by the sync engine.

    Entries are never duplicated; adding an id which is already present
    keeps and returns the existing object.
    """

    rooms: dict[str, Room]
    """Mapping of room id to room object"""

    people: dict[int, Person]
    """Mapping of account id to person object"""

    _logger: Logger

    def __init__(self, logger: Logger):
        self._logger = logger
        self.rooms = dict()
        self.people = dict()

    def __str__(self):
        return f"EntityCache: {len(self.rooms)} rooms, {len(self.people)} people"

    def add_room(self, room: Room) -> Room:
        """
        Add room, or return the cached room with the same id.
        """
        if room.id in self.rooms:
            return self.rooms[room.id]

        self.rooms[room.id] = room
        self._logger.debug(f"Added to cache: room_id={room.id}")
        return room

    def add_person(self, person: Person) -> Person:
        """
        Add person, or return the cached person with the same id. Cached
        people are not refreshed.
        """
        if person.id in self.people:
            return self.people[person.id]

        self.people[person.id] = person
        self._logger.debug(f"Added to cache: person_id={person.id}")
        return person

    def get_room(self, room_id: str) -> Room | None:
        return self.rooms.get(room_id)

    def get_person(self, person_id: int) -> Person | None:
        return self.people.get(person_id)

    def replace(self, rooms: Iterable[Room], people: Iterable[Person]):
        """
        Replace all contents with a snapshot, e.g. upon login.
        """
        self.clear()

        for room in rooms:
            self.add_room(room)
        for person in people:
            self.add_person(person)

        self._logger.debug(f"Replaced cache contents: {self}")

    def clear(self):
        self.rooms.clear()
        self.people.clear()
