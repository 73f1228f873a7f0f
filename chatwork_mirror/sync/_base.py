from __future__ import annotations

from logging import Logger
from typing import Any

from ..core.cache import EntityCache
from ..core.exceptions import AuthError
from ..core.state import SessionState
from ..core.transport import Transport


class SyncComponent:
    """
    Indicates that an object issues commands on behalf of a session, using
    its transport, state and cache.
    """

    _transport: Transport
    _state: SessionState
    _cache: EntityCache
    _logger: Logger

    def __init__(
        self,
        transport: Transport,
        state: SessionState,
        cache: EntityCache,
        logger: Logger,
    ):
        self._transport = transport
        self._state = state
        self._cache = cache
        self._logger = logger

    def _send(self, command: str, payload: Any) -> dict[str, Any]:
        if not self._state.logged_in:
            raise AuthError("Not logged in", command=command)

        return self._transport.send(command, payload, token=self._state.token)
