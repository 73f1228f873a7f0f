from __future__ import annotations

from dataclasses import dataclass

__all__ = ["SessionState"]


@dataclass
class SessionState:
    """
    Session store: token from login and cursor into the global update
    stream. The token stays fixed for the session's lifetime; the cursor
    is advanced by every poll.
    """

    token: str | None = None
    cursor: str = ""

    @property
    def logged_in(self) -> bool:
        return self.token is not None

    def clear(self):
        self.token = None
        self.cursor = ""
