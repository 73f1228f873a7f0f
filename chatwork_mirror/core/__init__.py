"""
This module implements the session, the entity cache and the gateway
transport.
"""

from pyrollup import rollup

from . import cache, entities, exceptions, session, state, transport
from .cache import *  # noqa
from .entities import *  # noqa
from .exceptions import *  # noqa
from .session import *  # noqa
from .state import *  # noqa
from .transport import *  # noqa

__all__ = rollup(
    session,
    entities,
    cache,
    state,
    transport,
    exceptions,
)

__canonical_children__ = [
    "session",
    "entities",
    "cache",
    "state",
    "transport",
    "exceptions",
]
