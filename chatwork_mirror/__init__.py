"""
ChatworkMirror: an in-memory mirror and incremental message sync for
Chatwork.
"""

from pyrollup import rollup

from . import core, sync
from .core import *  # noqa
from .sync import *  # noqa

__all__ = rollup(core, sync)

__canonical_children__ = [
    "core",
    "sync",
]
