"""
Implementation of session functionality.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from logging import Logger
from typing import TYPE_CHECKING, Callable

from .cache import EntityCache
from .entities import Chat, Person, Room
from .exceptions import AuthError, ProtocolError
from .models import LoginResponse, parse_response
from .state import SessionState
from .transport import Transport

if TYPE_CHECKING:
    from ..sync.engine import SyncEngine, SyncOptions
    from ..tools.config import Config

__all__ = [
    "Credentials",
    "Session",
]

LOGIN_COMMAND = "api_login"
SEND_COMMAND = "send_chat"


@dataclass(frozen=True)
class Credentials:
    """
    Login credentials of a Chatwork account.
    """

    email: str
    password: str

    def __repr__(self) -> str:
        return f"Credentials(email={self.email!r}, password='***')"


class Session:
    """
    Logged-in connection to Chatwork and context owning its mirror of rooms
    and people.

    Logs in upon creation. Each session owns its own transport, cache and
    sync engine; sessions share no state.

    Example usage:
    ```
    with Session(Credentials(email, password)) as session:
        for chat in session.poll():
            print(chat)
    ```
    """

    _credentials: Credentials
    """
    Credentials as passed by user.
    """

    _transport: Transport
    """
    Transport used for all commands.
    """

    _state: SessionState
    """
    Token and cursor.
    """

    _cache: EntityCache
    """
    Rooms and people.
    """

    _engine: SyncEngine
    """
    Engine implementing poll cycles.
    """

    _account_id: str | None = None
    """
    Account id of the logged in user.
    """

    _logger: Logger
    """
    Logger to use.
    """

    def __init__(
        self,
        credentials: Credentials,
        *,
        config: Config | None = None,
        options: SyncOptions | None = None,
        transport: Transport | None = None,
        logger: Logger | None = None,
        clock: Callable[[], float] | None = None,
    ):
        """
        :param credentials: Account to login with
        :param config: Configuration providing transport settings and sync options
        :param options: Sync options, overriding those from `config`
        :param transport: Transport to use instead of creating one from `config`
        :param logger: Logger to use, or `None` to use default logger
        :param clock: Source of current epoch time, for filtering by recency
        """
        from ..sync.engine import SyncEngine

        self._logger = logger or logging.getLogger()
        self._credentials = credentials

        if transport is None:
            transport = (
                config.create_transport(logger=self._logger)
                if config is not None
                else Transport(logger=self._logger)
            )

        if options is None and config is not None:
            options = config.sync

        self._transport = transport
        self._state = SessionState()
        self._cache = EntityCache(self._logger)
        self._engine = SyncEngine(
            self._transport,
            self._state,
            self._cache,
            self._logger,
            options=options,
            clock=clock,
        )

        self.login()

    def __enter__(self):
        self._logger.debug(f"Entering context: {self}")
        return self

    def __exit__(self, exc_type, exc_val, traceback):
        if exc_type:
            self._logger.error(f"Exiting context with error: {self}")
        else:
            self._logger.debug(f"Exiting context: {self}")

        self.logout()

    def __str__(self) -> str:
        return f"Session(email={self._credentials.email!r}, logged_in={self.logged_in})"

    def login(self):
        """
        Login and replace the cache with the rooms and contacts returned.
        Also resets the cursor, so this is a full resync.

        If login fails, the session is left as it was.

        :raises AuthError: Credentials were rejected
        """
        payload = {
            "email": self._credentials.email,
            "password": self._credentials.password,
            "type": "mobile",
            "with_profile": 1,
        }

        try:
            content = self._transport.send(LOGIN_COMMAND, payload)
        except ProtocolError as e:
            self._logger.error(
                f"Login failed for '{self._credentials.email}': {e}"
            )
            raise AuthError(str(e), command=LOGIN_COMMAND) from e

        result = parse_response(LoginResponse, content, LOGIN_COMMAND).result

        # build snapshot before touching current state
        rooms = [
            Room._from_model(room_id, model)
            for room_id, model in result.rooms.items()
        ]
        people = [Person._from_model(model) for model in result.people.values()]

        self._cache.replace(rooms, people)
        self._state.token = result.token
        self._state.cursor = result.last_id
        self._account_id = result.account_id or None

        self._logger.debug(
            f"Logged in as '{self._credentials.email}': {len(rooms)} rooms, {len(people)} people"
        )

    def logout(self):
        """
        Drop token, cursor and cached entities, and close the transport.
        Subsequent calls other than {meth}`login` raise {obj}`AuthError`.
        """
        if not self.logged_in:
            return

        self._state.clear()
        self._cache.clear()
        self._account_id = None
        self._transport.close()

        self._logger.debug(f"Logged out: {self}")

    def poll(self) -> list[Chat]:
        """
        Run one poll cycle and return new chats from all rooms.

        The cursor advances even if no room changed. Errors abort the rest
        of the cycle; rooms processed before the error keep their updated
        state, and their chats are available on the error's
        `partial_chats`.

        :raises AuthError: Not logged in, or the update request was rejected
            because the session expired; {meth}`login` before polling again
        :raises TransportError: Request failed
        :raises StatusError: A room or account request reported failure
        :raises ProtocolError: Gateway sent an invalid response
        """
        return self._engine.poll()

    def get_account_info(self, *person_ids: int) -> list[Person]:
        """
        Look up people by account id, caching those not already known.
        """
        return self._engine.resolver.fetch(*person_ids)

    def get_person(self, person_id: int) -> Person:
        """
        Get person from the cache, looking it up if unknown.
        """
        return self._engine.resolver.resolve(person_id)

    def send_chat(self, room_id: str | int, text: str):
        """
        Post a message to a room.

        :param room_id: Id of destination room
        :param text: Message body
        """
        if not self.logged_in:
            raise AuthError("Not logged in", command=SEND_COMMAND)

        payload = {
            "room_id": str(room_id),
            "text": text,
            "last_chat_id": None,
            "read": True,
            "edit_id": None,
        }

        self._transport.send(SEND_COMMAND, payload, token=self._state.token)
        self._logger.debug(f"Sent chat to room {room_id}")

    @property
    def rooms(self) -> dict[str, Room]:
        """
        Mapping of room id to cached room.
        """
        return self._cache.rooms

    @property
    def people(self) -> dict[int, Person]:
        """
        Mapping of account id to cached person.
        """
        return self._cache.people

    @property
    def cursor(self) -> str:
        """
        Current position in the update stream.
        """
        return self._state.cursor

    @property
    def token(self) -> str | None:
        return self._state.token

    @property
    def account_id(self) -> str | None:
        """
        Account id of the logged in user, as reported by login.
        """
        return self._account_id

    @property
    def logged_in(self) -> bool:
        return self._state.logged_in

    @property
    def engine(self) -> SyncEngine:
        """
        Sync engine of this session. Exposed for tuning and manual
        low-level operations.
        """
        return self._engine
