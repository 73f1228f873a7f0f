"""
This module implements incremental synchronization: detecting changed rooms,
fetching their deltas, filtering new messages and resolving their senders.
"""

from pyrollup import rollup

from . import detector, engine, fetcher, filter, resolver
from .detector import *  # noqa
from .engine import *  # noqa
from .fetcher import *  # noqa
from .filter import *  # noqa
from .resolver import *  # noqa

__all__ = rollup(
    engine,
    detector,
    fetcher,
    filter,
    resolver,
)

__canonical_children__ = [
    "engine",
    "detector",
    "fetcher",
    "filter",
    "resolver",
]
