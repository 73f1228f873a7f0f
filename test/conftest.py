import logging
from typing import Generator

from pytest import fixture

from chatwork_mirror import Credentials, Session

from .gateway_utils import (
    EMAIL,
    PASSWORD,
    Clock,
    FakeGateway,
    login_result,
    update,
)

logging.basicConfig(level=logging.WARNING)


@fixture
def clock() -> Clock:
    return Clock()


@fixture
def gateway() -> FakeGateway:
    """
    Gateway with a default login and an idle update stream.
    """
    gateway = FakeGateway()
    gateway.on("api_login", login_result())
    gateway.on("get_update", lambda p: update([], str(int(p["last_id"]) + 1)))
    return gateway


@fixture
def session(
    gateway: FakeGateway, clock: Clock
) -> Generator[Session, None, None]:
    """
    Create a new Session logged in through the fake gateway.
    """
    session = Session(
        Credentials(EMAIL, PASSWORD), transport=gateway, clock=clock
    )

    yield session

    session.logout()
