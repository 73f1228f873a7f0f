"""
Interface to configuration as persisted in .yaml file.
"""
from __future__ import annotations

from logging import Logger
from typing import Self

from pydantic import Field, field_validator, model_validator

from ..core.session import Credentials
from ..core.transport import (
    DEFAULT_API_VERSION,
    DEFAULT_APP_VERSION,
    DEFAULT_ENDPOINT,
    REQUEST_TIMEOUT,
    Transport,
)
from ..sync.engine import SyncOptions
from .yaml_model import BaseYamlModel

__all__ = [
    "Config",
]


class Config(BaseYamlModel):
    """
    Encapsulates configuration for use in tools.
    """

    endpoint: str = DEFAULT_ENDPOINT
    """
    Gateway URL.
    """

    api_version: str = DEFAULT_API_VERSION
    app_version: str = DEFAULT_APP_VERSION

    request_timeout: float = Field(default=REQUEST_TIMEOUT, gt=0)
    """
    Timeout of each request, in seconds.
    """

    email: str | None = None
    password: str | None = None

    poll_interval: float = Field(default=5.0, gt=0)
    """
    Seconds between poll cycles when watching.
    """

    sync: SyncOptions = Field(default_factory=SyncOptions)

    @field_validator("endpoint")
    def validate_endpoint(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"endpoint must be an http(s) URL: '{value}'")
        return value

    @model_validator(mode="after")
    def validate_credentials(self) -> Self:
        # password is unusable without an account
        if self.password and not self.email:
            raise ValueError("password provided without email")
        return self

    @property
    def credentials(self) -> Credentials | None:
        """
        Credentials from this config, if both email and password are set.
        """
        if self.email and self.password:
            return Credentials(self.email, self.password)
        return None

    def create_transport(self, *, logger: Logger | None = None) -> Transport:
        """
        Get transport from this config's fields.
        """
        return Transport(
            self.endpoint,
            api_version=self.api_version,
            app_version=self.app_version,
            timeout=self.request_timeout,
            logger=logger,
        )
