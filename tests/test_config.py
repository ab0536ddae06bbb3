"""Tests for log-stream configuration loading."""

from pathlib import Path

import pytest

from logstream.config import DEFAULT_CONTAINER, StreamConfig

ENV_VARS = (
    "LOGSTREAM_URL",
    "LOGSTREAM_TOKEN",
    "LOGSTREAM_VERIFY_SSL",
    "LOGSTREAM_CONTAINER",
    "LOGSTREAM_ENTRIES",
    "LOGSTREAM_DECODE_ERRORS",
    "LOGSTREAM_CONFIG",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("logstream.config.DEFAULT_CONFIG_FILE", tmp_path / "missing.yaml")


class TestFromDict:
    """Tests for building config from parsed YAML."""

    def test_defaults(self):
        config = StreamConfig.from_dict({})
        assert config.daemon.url == ""
        assert config.daemon.verify_ssl is True
        assert config.stream.default_container == DEFAULT_CONTAINER
        assert config.stream.entries == 0
        assert config.stream.decode_errors == "strict"

    def test_nested_under_logstream_key(self):
        config = StreamConfig.from_dict(
            {
                "logstream": {
                    "daemon": {"url": "https://daemon:4303", "token": "t0k", "verify_ssl": False},
                    "stream": {"default_container": "/web", "entries": 250},
                }
            }
        )
        assert config.daemon.url == "https://daemon:4303"
        assert config.daemon.token == "t0k"
        assert config.daemon.verify_ssl is False
        assert config.stream.default_container == "/web"
        assert config.stream.entries == 250

    def test_invalid_decode_policy(self):
        with pytest.raises(ValueError, match="decode_errors"):
            StreamConfig.from_dict({"stream": {"decode_errors": "ignore"}})

    def test_negative_entries(self):
        with pytest.raises(ValueError, match="entries"):
            StreamConfig.from_dict({"stream": {"entries": -1}})


class TestLoad:
    """Tests for StreamConfig.load precedence."""

    def test_no_config_uses_env(self, monkeypatch):
        monkeypatch.setenv("LOGSTREAM_URL", "https://env-daemon")
        monkeypatch.setenv("LOGSTREAM_VERIFY_SSL", "false")
        monkeypatch.setenv("LOGSTREAM_ENTRIES", "20")

        config = StreamConfig.load()

        assert config.daemon.url == "https://env-daemon"
        assert config.daemon.verify_ssl is False
        assert config.stream.entries == 20

    def test_missing_explicit_path_raises(self):
        with pytest.raises(FileNotFoundError):
            StreamConfig.load("/nonexistent/logstream.yaml")

    def test_explicit_path(self, tmp_path):
        config_file = tmp_path / "logstream.yaml"
        config_file.write_text(
            """
daemon:
  url: https://file-daemon
stream:
  decode_errors: replace
"""
        )
        config = StreamConfig.load(str(config_file))
        assert config.daemon.url == "https://file-daemon"
        assert config.stream.decode_errors == "replace"

    def test_default_file_overridden_by_env(self, monkeypatch, tmp_path):
        default_file = tmp_path / "config.yaml"
        default_file.write_text("daemon:\n  url: https://file-daemon\n  token: from-file\n")
        monkeypatch.setattr("logstream.config.DEFAULT_CONFIG_FILE", default_file)
        monkeypatch.setenv("LOGSTREAM_TOKEN", "from-env")

        config = StreamConfig.load()

        assert config.daemon.url == "https://file-daemon"
        assert config.daemon.token == "from-env"

    def test_non_mapping_yaml_rejected(self, tmp_path):
        config_file = tmp_path / "bad.yaml"
        config_file.write_text("- just\n- a list\n")
        with pytest.raises(ValueError, match="mapping"):
            StreamConfig.from_yaml(config_file)

    def test_non_integer_entries_env(self, monkeypatch):
        monkeypatch.setenv("LOGSTREAM_ENTRIES", "lots")
        with pytest.raises(ValueError, match="LOGSTREAM_ENTRIES"):
            StreamConfig.from_env()
