import logging

from rich.console import Console
from rich.table import Table
from typer import Argument, Context, Exit, Option

from ..core import ChatworkError
from ._utils import OperationTyper, get_operation_params

app = OperationTyper(
    "room",
    help="Room operations",
)


@app.command("list", require_session=True)
def list_(
    ctx: Context,
    members: bool = Option(False, help="Whether to show member count"),
):
    """
    List rooms known after login
    """
    params = get_operation_params(ctx)
    assert params.session

    with params.session as session:
        table = Table("id", "name", "chats", "unread")
        if members:
            table.add_column("members")

        for room in sorted(session.rooms.values(), key=lambda r: r.name):
            row = [
                room.id,
                room.name,
                str(room.chat_count),
                str(max(room.chat_count - room.read_count, 0)),
            ]
            if members:
                row.append(str(len(room.members)))
            table.add_row(*row)

        Console().print(table)


@app.command(require_session=True)
def send(
    ctx: Context,
    room_id: str = Argument(help="Destination room id"),
    text: str = Argument(help="Message to send"),
):
    """
    Send a message to a room
    """
    params = get_operation_params(ctx)
    assert params.session

    with params.session as session:
        if room_id not in session.rooms:
            logging.warning(f"Room {room_id} is not in the room list")

        try:
            session.send_chat(room_id, text)
        except ChatworkError as e:
            logging.error(f"Failed to send message: {e}")
            raise Exit(1)

    logging.info(f"Sent message to room {room_id}")
