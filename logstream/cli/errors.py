"""User-facing CLI error types with actionable messages."""


class CliUsageError(ValueError):
    """Base class for user-facing CLI configuration and usage errors."""


class MissingDaemonUrlError(CliUsageError):
    """Raised when no daemon URL was configured."""

    def __init__(self) -> None:
        super().__init__(
            "Missing daemon URL. Set LOGSTREAM_URL, pass --url, or add daemon.url "
            "to ~/.config/logstream/config.yaml."
        )


class InvalidEntriesError(CliUsageError):
    """Raised when the requested number of log entries is invalid."""

    def __init__(self, value: int) -> None:
        super().__init__(f"Invalid --entries '{value}'. Use 0 for the daemon default or a positive count.")


class ConfigLoadError(CliUsageError):
    """Raised when the config file cannot be loaded."""

    def __init__(self, details: str) -> None:
        super().__init__(f"Configuration error: {details}")
