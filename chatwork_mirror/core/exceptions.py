from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .entities import Chat

__all__ = [
    "ChatworkError",
    "AuthError",
    "TransportError",
    "ProtocolError",
    "StatusError",
    "ResolutionError",
]


class ChatworkError(Exception):
    """
    Base class of all errors raised by this package.
    """

    command: str | None
    """
    Gateway command which failed, if the error came from a request.
    """

    partial_chats: list[Chat]
    """
    Chats already built in the poll cycle which raised this error. Rooms
    they belong to have been committed, so these won't be delivered again.
    """

    def __init__(self, message: str, *, command: str | None = None):
        self.command = command
        self.partial_chats = []

        if command is not None:
            message = f"{command}: {message}"

        super().__init__(message)


class AuthError(ChatworkError):
    """
    Raised when login is rejected, the gateway rejects the session, or a
    call requires a session which isn't logged in. The caller must login
    again before polling.
    """


class TransportError(ChatworkError):
    """
    Raised when the request itself fails: connection error, timeout or
    non-2xx HTTP status.
    """


class ProtocolError(ChatworkError):
    """
    Raised when the gateway responds but the response is unusable:
    failure status, body which isn't a JSON object, or payload not matching
    the expected model.
    """


class StatusError(ProtocolError):
    """
    Raised when the gateway responds with a failure status.
    """

    status_message: str | None
    """
    Message of the failure status, if any.
    """

    def __init__(
        self,
        status_message: str | None = None,
        *,
        command: str | None = None,
    ):
        self.status_message = status_message
        super().__init__(
            f"Response status is fail: {status_message}", command=command
        )


class ResolutionError(ProtocolError):
    """
    Raised when an account lookup succeeds but doesn't contain the
    requested person.
    """

    person_id: int

    def __init__(self, person_id: int, *, command: str | None = None):
        self.person_id = person_id
        super().__init__(
            f"No account info returned for person {person_id}",
            command=command,
        )
