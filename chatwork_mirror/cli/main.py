"""
Entry point of `chatwork-mirror` CLI.
"""

import logging

import dotenv
from rich.console import Console
from rich.logging import RichHandler

from . import room, sync
from ._utils import MainTyper

logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
    handlers=[
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            show_level=True,
            show_time=True,
            show_path=False,
        )
    ],
)

dotenv.load_dotenv()

app = MainTyper(
    "chatwork-mirror",
    help="ChatworkMirror CLI",
)
app.add_typer(room.app)
app.add_typer(sync.app)


def run():
    app()


if __name__ == "__main__":
    app()
