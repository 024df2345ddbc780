"""Exceptions raised by the claude-history engine."""


class ClaudeHistoryError(Exception):
    """Base class for engine errors."""


class DataSourceUnavailableError(ClaudeHistoryError):
    """The log root or a project directory could not be listed."""

    def __init__(self, path, reason: str) -> None:
        self.path = path
        super().__init__(f"Cannot read log directory {path}: {reason}")


class SessionNotFoundError(ClaudeHistoryError, LookupError):
    """No session file carries the requested session id."""

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f"Session file not found for ID: {session_id}")


class RecordParseError(ClaudeHistoryError, ValueError):
    """A JSONL line could not be decoded into a record."""
