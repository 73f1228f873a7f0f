import time
from pathlib import Path

from pytest import MonkeyPatch, fixture
from typer.testing import CliRunner

from chatwork_mirror import AuthError, ProtocolError, Transport
from chatwork_mirror.cli.main import app

from ..gateway_utils import (
    EMAIL,
    PASSWORD,
    FakeGateway,
    chat,
    fail,
    login_result,
    room_info,
    update,
)

ENV = {
    "CHATWORK_EMAIL": EMAIL,
    "CHATWORK_PASSWORD": PASSWORD,
}

runner = CliRunner()


@fixture
def cli_gateway(monkeypatch: MonkeyPatch, gateway: FakeGateway) -> FakeGateway:
    """
    Route every transport created by the CLI through the fake gateway.
    """
    monkeypatch.setattr(Transport, "send", gateway.send)
    return gateway


def test_room_list(cli_gateway: FakeGateway):
    result = runner.invoke(app, ["room", "list", "--members"], env=ENV)

    assert result.exit_code == 0, result.output
    assert "General" in result.output
    assert "Random" in result.output


def test_missing_credentials(cli_gateway: FakeGateway):
    result = runner.invoke(
        app,
        ["room", "list"],
        env={"CHATWORK_EMAIL": "", "CHATWORK_PASSWORD": ""},
    )

    assert result.exit_code == 2
    assert cli_gateway.calls == []


def test_login_rejected(cli_gateway: FakeGateway):
    cli_gateway.queue("api_login", ProtocolError("Response status is fail"))

    result = runner.invoke(app, ["room", "list"], env=ENV)

    assert result.exit_code == 1


def test_options_override_env(cli_gateway: FakeGateway):
    result = runner.invoke(
        app, ["room", "list", "--email", "other@example.com"], env=ENV
    )

    assert result.exit_code == 0, result.output
    _, payload, _ = cli_gateway.calls[0]
    assert payload["email"] == "other@example.com"
    assert payload["password"] == PASSWORD


def test_config_file(cli_gateway: FakeGateway, tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text(f"email: {EMAIL}\npassword: {PASSWORD}\n")

    result = runner.invoke(
        app,
        ["room", "list", "--config", str(path)],
        env={"CHATWORK_EMAIL": "", "CHATWORK_PASSWORD": ""},
    )

    assert result.exit_code == 0, result.output


def test_send(cli_gateway: FakeGateway):
    cli_gateway.on("send_chat", {"status": {"success": True}})

    result = runner.invoke(app, ["room", "send", "10", "hello"], env=ENV)

    assert result.exit_code == 0, result.output
    assert cli_gateway.payloads("send_chat")[0]["text"] == "hello"


def test_send_failure(cli_gateway: FakeGateway):
    cli_gateway.queue("send_chat", ProtocolError("fail", command="send_chat"))

    result = runner.invoke(app, ["room", "send", "10", "hello"], env=ENV)

    assert result.exit_code == 1


def test_poll(cli_gateway: FakeGateway):
    now = int(time.time())

    cli_gateway.queue("get_update", update({"10": {}}, "101"))
    cli_gateway.queue("get_room_info", room_info("10", [chat(1, now, msg="hi")]))

    result = runner.invoke(app, ["sync", "poll"], env=ENV)

    assert result.exit_code == 0, result.output
    assert "Alice: hi" in result.output


def test_poll_failure(cli_gateway: FakeGateway):
    cli_gateway.queue("get_update", ProtocolError("fail", command="get_update"))

    result = runner.invoke(app, ["sync", "poll"], env=ENV)

    assert result.exit_code == 1


def test_watch(cli_gateway: FakeGateway):
    now = int(time.time())

    # first cycle fails, second recovers
    cli_gateway.queue(
        "get_update",
        ProtocolError("fail", command="get_update"),
        update({"10": {}}, "101"),
    )
    cli_gateway.queue(
        "get_room_info", room_info("10", [chat(1, now, aid=2, msg="back")])
    )

    result = runner.invoke(
        app, ["sync", "watch", "--count", "2", "--interval", "0"], env=ENV
    )

    assert result.exit_code == 0, result.output
    assert "Bob: back" in result.output
    assert len(cli_gateway.payloads("get_update")) == 2


def test_watch_relogin(cli_gateway: FakeGateway):
    cli_gateway.queue("get_update", AuthError("session expired"))
    cli_gateway.queue("api_login", login_result(), login_result(token="token-2"))

    result = runner.invoke(
        app, ["sync", "watch", "--count", "2", "--interval", "0"], env=ENV
    )

    assert result.exit_code == 0, result.output
    assert cli_gateway.commands("api_login") == ["api_login", "api_login"]
    _, _, token = cli_gateway.calls[-1]
    assert token == "token-2"


def test_watch_relogin_after_expiry(cli_gateway: FakeGateway):
    cli_gateway.queue("get_update", fail("token expired"))
    cli_gateway.queue("api_login", login_result(), login_result(token="token-2"))

    result = runner.invoke(
        app, ["sync", "watch", "--count", "2", "--interval", "0"], env=ENV
    )

    assert result.exit_code == 0, result.output
    assert cli_gateway.commands("api_login") == ["api_login", "api_login"]
    _, _, token = cli_gateway.calls[-1]
    assert token == "token-2"
