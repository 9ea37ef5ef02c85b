import pathlib

import pytest

from mcpws.config import Config, load_config
from mcpws.exceptions import BadConfig


def test_load_config(tmp_path: pathlib.Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        """
server:
  host: 127.0.0.1
  port: 9000
  static_dir: public
  shutdown_grace_sec: 5
logging:
  level: debug
  output: file
  file_path: /tmp/mcpws-test.log
        """
    )
    config = load_config(config_path)
    assert isinstance(config, Config)
    assert config.server.port == 9000
    assert config.server.static_dir == "public"
    assert config.server.shutdown_grace_sec == 5.0
    assert config.logging.level == "DEBUG"
    assert config.logging.output == "file"


def test_defaults() -> None:
    config = Config()
    assert config.server.host == "0.0.0.0"
    assert config.server.port == 8080
    assert config.server.static_dir == "static"
    assert config.server.shutdown_grace_sec == 30.0
    assert config.logging.level == "INFO"


def test_empty_file_uses_defaults(tmp_path: pathlib.Path) -> None:
    config_path = tmp_path / "empty.yaml"
    config_path.write_text("")
    assert load_config(config_path) == Config()


@pytest.mark.parametrize(
    "content",
    [
        "server:\n  port: 70000\n",
        "server:\n  shutdown_grace_sec: -1\n",
        "logging:\n  level: chatty\n",
        "logging:\n  level: warn\n",
        "logging:\n  level: notset\n",
        "logging:\n  output: syslog\n",
        "- just\n- a list\n",
        "server: [unclosed\n",
    ],
)
def test_invalid_config(tmp_path: pathlib.Path, content: str) -> None:
    config_path = tmp_path / "bad.yaml"
    config_path.write_text(content)
    with pytest.raises(BadConfig):
        load_config(config_path)


def test_missing_config_file(tmp_path: pathlib.Path) -> None:
    with pytest.raises(BadConfig):
        load_config(tmp_path / "nope.yaml")


def test_log_level_is_case_insensitive(tmp_path: pathlib.Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("logging:\n  level: warning\n")
    assert load_config(config_path).logging.level == "WARNING"
