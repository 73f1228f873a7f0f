"""
Pydantic models of gateway payloads.

Field names are readable; the gateway's terse keys are kept as aliases.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ProtocolError

__all__ = [
    "PersonModel",
    "RoomModel",
    "RawChat",
    "RoomInfo",
]

ModelT = TypeVar("ModelT", bound="WireModel")


def _as_dict(value: Any) -> Any:
    """
    The gateway encodes empty maps as `[]`; treat any non-mapping as empty.
    """
    return value if isinstance(value, (dict, BaseModel)) else {}


class WireModel(BaseModel):
    """
    Base of all gateway models.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )


class Status(WireModel):
    success: bool = False
    message: Any = None


class Response(WireModel):
    """
    Common envelope of every response.
    """

    status: Status


class PersonModel(WireModel):
    id: int = Field(alias="aid")
    external_id: str | None = Field(default=None, alias="cwid")
    name: str | None = Field(default=None, alias="name")
    organization: str | None = Field(default=None, alias="onm")


class RoomModel(WireModel):
    name: str | None = Field(default=None, alias="n")
    type: int = Field(default=0, alias="t")
    last_update: int = Field(default=0, alias="lt")
    read_count: int = Field(default=0, alias="r")
    chat_count: int = Field(default=0, alias="c")
    members: dict[str, int] = Field(default_factory=dict, alias="m")

    @field_validator("members", mode="before")
    @classmethod
    def validate_members(cls, value: Any) -> Any:
        return _as_dict(value)


class RawChat(WireModel):
    """
    Chat message as listed in a room delta.
    """

    id: int
    person_id: int = Field(alias="aid")
    message: str = Field(default="", alias="msg")
    timestamp: int = Field(alias="tm")
    update_time: int = Field(default=0, alias="utm")


class RoomInfo(RoomModel):
    """
    Room as returned by `get_room_info`: room fields plus recent chats.
    """

    chats: list[RawChat] = Field(default_factory=list, alias="chat_list")


class LoginResult(WireModel):
    token: str
    account_id: str = Field(default="", alias="myid")
    rooms: dict[str, RoomModel] = Field(default_factory=dict, alias="room_dat")
    people: dict[str, PersonModel] = Field(
        default_factory=dict, alias="contact_dat"
    )
    announce_id: int = 0
    last_id: str

    @field_validator("rooms", "people", mode="before")
    @classmethod
    def validate_maps(cls, value: Any) -> Any:
        return _as_dict(value)


class LoginResponse(Response):
    result: LoginResult


class UpdateInfo(WireModel):
    num: int = 0

    room: Any = None
    """
    Loosely structured: a mapping keyed by room id when there are updates,
    otherwise anything. Decoded by the change detector.
    """


class GetUpdateResult(WireModel):
    last_id: str
    update_info: UpdateInfo = Field(default_factory=UpdateInfo)

    @field_validator("update_info", mode="before")
    @classmethod
    def validate_update_info(cls, value: Any) -> Any:
        return _as_dict(value)


class GetUpdateResponse(Response):
    result: GetUpdateResult


class RoomInfoResult(WireModel):
    rooms: dict[str, RoomInfo] = Field(default_factory=dict, alias="room_dat")

    @field_validator("rooms", mode="before")
    @classmethod
    def validate_rooms(cls, value: Any) -> Any:
        return _as_dict(value)


class RoomInfoResponse(Response):
    result: RoomInfoResult = Field(default_factory=RoomInfoResult)

    @field_validator("result", mode="before")
    @classmethod
    def validate_result(cls, value: Any) -> Any:
        return _as_dict(value)


class AccountInfoResult(WireModel):
    people: dict[str, PersonModel] = Field(
        default_factory=dict, alias="account_dat"
    )

    @field_validator("people", mode="before")
    @classmethod
    def validate_people(cls, value: Any) -> Any:
        return _as_dict(value)


class AccountInfoResponse(Response):
    result: AccountInfoResult = Field(default_factory=AccountInfoResult)

    @field_validator("result", mode="before")
    @classmethod
    def validate_result(cls, value: Any) -> Any:
        return _as_dict(value)


def parse_response(
    model_cls: type[ModelT], content: dict[str, Any], command: str
) -> ModelT:
    """
    Validate response content, converting validation failures to
    {obj}`ProtocolError`.
    """
    try:
        return model_cls.model_validate(content)
    except PydanticValidationError as e:
        raise ProtocolError(
            f"Unexpected response payload: {e}", command=command
        ) from e
