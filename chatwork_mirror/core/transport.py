"""
Request/response interface to the Chatwork gateway.
"""

from __future__ import annotations

import json
import logging
from logging import Logger
from typing import Any

import requests

from .exceptions import ProtocolError, StatusError, TransportError

__all__ = ["Transport"]

DEFAULT_ENDPOINT = "https://kcw.kddi.ne.jp/gateway.php"
"""
Gateway URL; commands are selected by query parameter.
"""

DEFAULT_API_VERSION = "2.52"
DEFAULT_APP_VERSION = "4"

REQUEST_TIMEOUT = 10.0
"""
Timeout for each request, in seconds.
"""

REDACTED_COMMANDS = frozenset({"api_login"})
"""
Commands whose response body carries the session token and isn't logged.
"""


class Transport:
    """
    Sends gateway commands over a persistent HTTP session.

    The gateway is cookie-based in addition to the token passed with each
    command, so one `requests.Session` is kept for the lifetime of this
    object.
    """

    _endpoint: str
    _api_version: str
    _app_version: str
    _timeout: float
    _http: requests.Session
    _logger: Logger

    def __init__(
        self,
        endpoint: str = DEFAULT_ENDPOINT,
        *,
        api_version: str = DEFAULT_API_VERSION,
        app_version: str = DEFAULT_APP_VERSION,
        timeout: float = REQUEST_TIMEOUT,
        logger: Logger | None = None,
    ):
        self._endpoint = endpoint
        self._api_version = api_version
        self._app_version = app_version
        self._timeout = timeout
        self._http = requests.Session()
        self._logger = logger or logging.getLogger()

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def send(
        self, command: str, payload: Any, token: str | None = None
    ) -> dict[str, Any]:
        """
        Send command and return the decoded response object.

        :param command: Gateway command, e.g. `get_update`
        :param payload: JSON-serializable parameters of command
        :param token: Session token, if logged in

        :raises TransportError: Request failed
        :raises StatusError: Response reports failure
        :raises ProtocolError: Response is not a JSON object
        """
        data = {"pdata": json.dumps(payload)}
        if token:
            data["_t"] = token

        params = {
            "_v": self._api_version,
            "_av": self._app_version,
            "cmd": command,
        }

        self._logger.debug(f"Sending command: {command}")

        try:
            response = self._http.post(
                self._endpoint,
                params=params,
                data=data,
                timeout=self._timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise TransportError(str(e), command=command) from e

        if command in REDACTED_COMMANDS:
            self._logger.debug(
                f"Got response to {command}: {len(response.content)} bytes"
            )
        else:
            self._logger.debug(f"Got response to {command}: {response.text}")

        try:
            content = response.json()
        except ValueError as e:
            raise ProtocolError(
                "Response is not valid JSON", command=command
            ) from e

        if not isinstance(content, dict):
            raise ProtocolError(
                f"Response is not an object: {content}", command=command
            )

        status = content.get("status")
        if not isinstance(status, dict) or status.get("success") is not True:
            raise StatusError(_status_message(status), command=command)

        return content

    def close(self):
        """
        Close underlying HTTP session, dropping its cookies.
        """
        self._http.cookies.clear()
        self._http.close()


def _status_message(status: Any) -> str | None:
    """
    Get message of a failure status, tolerating a malformed status.
    """
    if not isinstance(status, dict):
        return None

    message = status.get("message")
    return None if message is None else str(message)
