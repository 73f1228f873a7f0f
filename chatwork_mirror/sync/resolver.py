"""
Lazy lookup of message senders.
"""

from __future__ import annotations

from ..core.entities import Person
from ..core.exceptions import ResolutionError
from ..core.models import AccountInfoResponse, parse_response
from ._base import SyncComponent

__all__ = ["PersonResolver"]

COMMAND = "get_account_info"


class PersonResolver(SyncComponent):
    """
    Cache-first lookup of people. Misses are fetched from the gateway and
    every returned person is cached.

    ```{note}
    People already cached are never refreshed, so name or organization
    changes made after the first lookup aren't picked up until the next
    login.
    ```
    """

    def resolve(self, person_id: int) -> Person:
        """
        Get person by id, fetching it if not cached.

        :raises ResolutionError: Lookup didn't return the person
        """
        person = self._cache.get_person(person_id)
        if person is not None:
            return person

        self._logger.debug(f"Resolving unknown person {person_id}")
        self.fetch(person_id)

        person = self._cache.get_person(person_id)
        if person is None:
            raise ResolutionError(person_id, command=COMMAND)

        return person

    def fetch(self, *person_ids: int) -> list[Person]:
        """
        Look up people by id regardless of the cache, caching any which
        weren't already known.

        :returns: Cached person objects for each returned account
        """
        content = self._send(COMMAND, {"aid": list(person_ids)})
        response = parse_response(AccountInfoResponse, content, COMMAND)

        return [
            self._cache.add_person(Person._from_model(model))
            for model in response.result.people.values()
        ]
