from pytest import mark, raises

from chatwork_mirror import AuthError, Session, decode_room_ids

from ..gateway_utils import FakeGateway, fail, ok, update


@mark.parametrize(
    "value,expected",
    [
        ({"10": {"p": 1}, "20": {}}, {"10", "20"}),
        (["10", 20], {"10", "20"}),
        ([], set()),
        ({}, set()),
        (None, set()),
        ("10", set()),
        (5, set()),
        # malformed entries are dropped
        (["10", None, {"id": 1}, 2.5, True, "", " 30 "], {"10", "30"}),
    ],
)
def test_decode_room_ids(value, expected: set[str]):
    assert decode_room_ids(value) == expected


def test_poll(session: Session, gateway: FakeGateway):
    gateway.queue("get_update", update({"10": {}, "42": {}}, "555"))

    cursor, changed = session.engine.detector.poll("100")

    assert cursor == "555"
    assert changed == {"10"}

    # detector doesn't touch the session's cursor itself
    assert session.cursor == "100"


def test_poll_numeric_cursor(session: Session, gateway: FakeGateway):
    gateway.queue(
        "get_update", {"status": {"success": True}, "result": {"last_id": 777}}
    )

    cursor, changed = session.engine.detector.poll("100")

    assert cursor == "777"
    assert changed == set()


@mark.parametrize("update_info", [[], None, "", 0])
def test_poll_empty_update_info(
    session: Session, gateway: FakeGateway, update_info
):
    gateway.queue("get_update", ok({"last_id": "101", "update_info": update_info}))

    # cursor still advances through the session
    assert session.poll() == []
    assert session.cursor == "101"
    assert gateway.commands("get_room_info") == []


def test_poll_rejected(session: Session, gateway: FakeGateway):
    gateway.queue("get_update", fail("token expired"))

    with raises(AuthError) as e:
        session.engine.detector.poll("100")

    assert "token expired" in str(e.value)
