import logging
import time

from rich.console import Console
from rich.markup import escape
from typer import Context, Exit, Option

from ..core import AuthError, Chat, ChatworkError, Session
from ._utils import OperationTyper, get_operation_params

app = OperationTyper(
    "sync",
    help="Message synchronization",
)


@app.command(require_session=True)
def poll(ctx: Context):
    """
    Run a single poll cycle and print new messages
    """
    params = get_operation_params(ctx)
    assert params.session

    console = Console()

    with params.session as session:
        try:
            chats = session.poll()
        except ChatworkError as e:
            _print_chats(console, e.partial_chats)
            logging.error(f"Poll failed: {e}")
            raise Exit(1)

        _print_chats(console, chats)


@app.command(require_session=True)
def watch(
    ctx: Context,
    interval: float | None = Option(
        None,
        help="Seconds between polls; defaults to poll_interval from config",
        show_default=False,
    ),
    count: int = Option(
        0, help="Number of poll cycles to run, or 0 to run until interrupted"
    ),
):
    """
    Poll repeatedly and print new messages as they arrive
    """
    params = get_operation_params(ctx)
    assert params.session

    delay = interval if interval is not None else params.config.poll_interval
    console = Console()

    with params.session as session:
        cycle = 0

        try:
            while not count or cycle < count:
                if cycle:
                    time.sleep(delay)
                cycle += 1

                _poll_once(console, session)
        except KeyboardInterrupt:
            logging.info("Interrupted, stopping")


def _poll_once(console: Console, session: Session):
    """
    Run a poll cycle, logging errors instead of raising them. The next
    cycle retries from scratch.
    """
    try:
        chats = session.poll()
    except AuthError as e:
        logging.warning(f"Session rejected, logging in again: {e}")
        try:
            session.login()
        except ChatworkError as e:
            logging.error(f"Login failed: {e}")
        return
    except ChatworkError as e:
        _print_chats(console, e.partial_chats)
        logging.error(f"Poll failed, will retry: {e}")
        return

    _print_chats(console, chats)


def _print_chats(console: Console, chats: list[Chat]):
    for chat in chats:
        timestamp = chat.time.astimezone().strftime("%H:%M:%S")
        console.print(
            f"[dim]{timestamp}[/dim] [cyan]{escape(chat.room.name)}[/cyan] "
            f"[bold]{escape(chat.person.name)}[/bold]: {escape(chat.message)}"
        )
