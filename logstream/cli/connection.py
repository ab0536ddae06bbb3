"""Config resolution and transport construction shared by CLI commands."""

from __future__ import annotations

import yaml

from ..config import StreamConfig
from ..transport.http import HttpLogTransport
from .errors import ConfigLoadError, InvalidEntriesError, MissingDaemonUrlError


def resolve_config(
    config_path: str | None = None,
    *,
    url: str | None = None,
    token: str | None = None,
    insecure: bool = False,
    entries: int | None = None,
    replace_invalid: bool = False,
) -> StreamConfig:
    """Load config and apply command-line overrides on top of it."""
    try:
        config = StreamConfig.load(config_path)
    except FileNotFoundError as exc:
        raise ConfigLoadError(str(exc)) from exc
    except yaml.YAMLError as exc:
        raise ConfigLoadError(f"invalid YAML in {config_path or 'config file'}: {exc}") from exc
    except ValueError as exc:
        raise ConfigLoadError(str(exc)) from exc

    if url:
        config.daemon.url = url
    if token:
        config.daemon.token = token
    if insecure:
        config.daemon.verify_ssl = False
    if entries is not None:
        if entries < 0:
            raise InvalidEntriesError(entries)
        config.stream.entries = entries
    if replace_invalid:
        config.stream.decode_errors = "replace"

    if not config.daemon.url:
        raise MissingDaemonUrlError()
    return config


def build_transport(config: StreamConfig) -> HttpLogTransport:
    """Create the transport used by CLI commands."""
    return HttpLogTransport(config.daemon, config.stream)
