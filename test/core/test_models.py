from pytest import raises

from chatwork_mirror import ProtocolError
from chatwork_mirror.core.models import (
    LoginResponse,
    PersonModel,
    RoomInfo,
    RoomModel,
    parse_response,
)


def test_person_aliases():
    model = PersonModel.model_validate(
        {"aid": "12", "cwid": "alice01", "name": "Alice", "onm": None, "extra": 1}
    )

    assert model.id == 12
    assert model.external_id == "alice01"
    assert model.organization is None


def test_room_empty_members():
    # empty maps arrive as lists
    model = RoomModel.model_validate({"n": "General", "m": []})

    assert model.members == {}
    assert model.model_fields_set == {"name", "members"}


def test_room_info_chats():
    model = RoomInfo.model_validate(
        {"c": 3, "chat_list": [{"id": 1, "aid": 2, "msg": "hi", "tm": 10}]}
    )

    (chat,) = model.chats
    assert (chat.id, chat.person_id, chat.message, chat.timestamp) == (
        1,
        2,
        "hi",
        10,
    )
    assert chat.update_time == 0


def test_parse_response_invalid():
    with raises(ProtocolError) as e:
        parse_response(LoginResponse, {"status": {"success": True}}, "api_login")

    assert e.value.command == "api_login"
