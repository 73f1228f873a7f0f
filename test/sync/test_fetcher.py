from chatwork_mirror import Session

from ..gateway_utils import NOW, FakeGateway, chat, ok, room_info


def test_fetch(session: Session, gateway: FakeGateway):
    room = session.rooms["20"]
    gateway.queue("get_room_info", room_info("20", [chat(1, NOW), chat(2, NOW)]))

    info = session.engine.fetcher.fetch(room)

    assert info is not None
    assert [c.id for c in info.chats] == [1, 2]

    (payload,) = gateway.payloads("get_room_info")
    assert payload["i"]["20"] == {
        "c": room.chat_count,
        "u": 20,
        "t": room.last_update,
        "l": 0,
    }


def test_fetch_missing_room(session: Session, gateway: FakeGateway):
    gateway.queue("get_room_info", ok({"room_dat": []}))

    assert session.engine.fetcher.fetch(session.rooms["10"]) is None


def test_fetch_no_result(session: Session, gateway: FakeGateway):
    gateway.queue("get_room_info", ok())

    assert session.engine.fetcher.fetch(session.rooms["10"]) is None


def test_token_sent(session: Session, gateway: FakeGateway):
    gateway.queue("get_room_info", room_info("10", []))

    session.engine.fetcher.fetch(session.rooms["10"])

    _, _, token = gateway.calls[-1]
    assert token == "token-1"


def test_fetch_empty_result(session: Session, gateway: FakeGateway):
    gateway.queue(
        "get_room_info",
        {"status": {"success": True}, "result": []},
        {"status": {"success": True}, "result": None},
    )

    assert session.engine.fetcher.fetch(session.rooms["10"]) is None
    assert session.engine.fetcher.fetch(session.rooms["10"]) is None
