from pathlib import Path

from pydantic import ValidationError
from pytest import raises

from chatwork_mirror import Credentials, SyncOptions
from chatwork_mirror.tools.config import Config


def test_defaults():
    config = Config()

    assert config.endpoint == "https://kcw.kddi.ne.jp/gateway.php"
    assert config.sync == SyncOptions(recency_window=60, page_size=20)
    assert config.credentials is None


def test_load(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "\n".join(
            [
                "endpoint: http://localhost:8080/gateway.php",
                "email: user@example.com",
                "password: secret",
                "request_timeout: 2.5",
                "sync:",
                "  recency_window: 120",
                "  page_size: 50",
            ]
        )
    )

    config = Config.load_yaml(path)

    assert config.credentials == Credentials("user@example.com", "secret")
    assert config.sync.recency_window == 120
    assert config.sync.page_size == 50

    transport = config.create_transport()
    assert transport.endpoint == "http://localhost:8080/gateway.php"
    assert transport._timeout == 2.5


def test_load_empty(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text("")

    assert Config.load_yaml(path) == Config()


def test_load_missing(tmp_path: Path):
    with raises(FileNotFoundError):
        Config.load_yaml(tmp_path / "missing.yaml")


def test_load_invalid(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text("- a\n- b\n")

    with raises(ValueError):
        Config.load_yaml(path)


def test_dump(tmp_path: Path):
    path = tmp_path / "config.yaml"
    config = Config(email="user@example.com", sync=SyncOptions(page_size=5))

    config.dump_yaml(path)

    assert Config.load_yaml(path) == config


def test_validation():
    with raises(ValidationError):
        Config(endpoint="ftp://example.com")

    with raises(ValidationError):
        Config(password="secret")

    with raises(ValidationError):
        Config(sync={"page_size": 0})

    with raises(ValidationError):
        Config(sync={"recency_window": -1})
