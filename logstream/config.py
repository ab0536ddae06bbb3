"""Configuration for connecting to a daemon's log stream."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .core.decoder import DECODE_POLICIES

# Default paths
DEFAULT_CONFIG_DIR = Path.home() / ".config" / "logstream"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"

# Container streamed when no target is selected
DEFAULT_CONTAINER = "/inertia-daemon"
DEFAULT_CONNECT_TIMEOUT_S = 10.0


def _parse_bool_env(value: str) -> bool:
    return value.strip().lower() not in ("0", "false", "no", "off", "")


@dataclass
class DaemonConfig:
    """Where the daemon lives and how to authenticate against it."""

    url: str = ""
    token: str = ""
    verify_ssl: bool = True
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT_S


@dataclass
class StreamOptions:
    """Per-stream request and decoding options."""

    default_container: str = DEFAULT_CONTAINER
    entries: int = 0  # 0 lets the daemon pick its default
    decode_errors: str = "strict"  # "strict" | "replace"

    def validate(self) -> None:
        if self.decode_errors not in DECODE_POLICIES:
            raise ValueError(
                f"Invalid decode_errors '{self.decode_errors}'. "
                f"Allowed values: {', '.join(DECODE_POLICIES)}."
            )
        if self.entries < 0:
            raise ValueError(f"entries must be >= 0, got {self.entries}")


@dataclass
class StreamConfig:
    """Main log-stream configuration."""

    daemon: DaemonConfig = field(default_factory=DaemonConfig)
    stream: StreamOptions = field(default_factory=StreamOptions)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StreamConfig:
        """Create config from dictionary (e.g., parsed YAML)."""
        cfg_data = data.get("logstream", data)

        daemon = DaemonConfig()
        if "daemon" in cfg_data:
            daemon_data = cfg_data["daemon"] or {}
            daemon = DaemonConfig(
                url=str(daemon_data.get("url", "")),
                token=str(daemon_data.get("token", "")),
                verify_ssl=bool(daemon_data.get("verify_ssl", True)),
                connect_timeout=float(
                    daemon_data.get("connect_timeout", DEFAULT_CONNECT_TIMEOUT_S)
                ),
            )

        stream = StreamOptions()
        if "stream" in cfg_data:
            stream_data = cfg_data["stream"] or {}
            stream = StreamOptions(
                default_container=str(
                    stream_data.get("default_container", DEFAULT_CONTAINER)
                ),
                entries=int(stream_data.get("entries", 0)),
                decode_errors=str(stream_data.get("decode_errors", "strict")),
            )
        stream.validate()

        return cls(daemon=daemon, stream=stream)

    @classmethod
    def from_yaml(cls, path: str | Path) -> StreamConfig:
        """Load config from YAML file."""
        path = Path(path).expanduser()
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if data is not None and not isinstance(data, dict):
            raise ValueError(f"Config file must contain a YAML mapping: {path}")
        return cls.from_dict(data or {})

    def apply_env(self) -> StreamConfig:
        """Override fields from ``LOGSTREAM_*`` environment variables."""
        if url := os.getenv("LOGSTREAM_URL"):
            self.daemon.url = url
        if token := os.getenv("LOGSTREAM_TOKEN"):
            self.daemon.token = token
        verify = os.getenv("LOGSTREAM_VERIFY_SSL")
        if verify is not None:
            self.daemon.verify_ssl = _parse_bool_env(verify)
        if container := os.getenv("LOGSTREAM_CONTAINER"):
            self.stream.default_container = container
        entries = os.getenv("LOGSTREAM_ENTRIES")
        if entries:
            try:
                self.stream.entries = int(entries)
            except ValueError as exc:
                raise ValueError(f"LOGSTREAM_ENTRIES must be an integer, got {entries!r}") from exc
        if policy := os.getenv("LOGSTREAM_DECODE_ERRORS"):
            self.stream.decode_errors = policy
        self.stream.validate()
        return self

    @classmethod
    def from_env(cls) -> StreamConfig:
        """Create config from defaults overridden by environment variables."""
        return cls().apply_env()

    @classmethod
    def load(cls, config_path: str | None = None) -> StreamConfig:
        """Load config with precedence: explicit path > env vars > default file > defaults.

        Args:
            config_path: Explicit path to config file (highest precedence).

        Returns:
            Loaded stream config.
        """
        if config_path:
            return cls.from_yaml(config_path)

        env_path = os.getenv("LOGSTREAM_CONFIG")
        if env_path:
            return cls.from_yaml(env_path).apply_env()

        if DEFAULT_CONFIG_FILE.exists():
            return cls.from_yaml(DEFAULT_CONFIG_FILE).apply_env()

        return cls.from_env()
