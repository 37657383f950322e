from __future__ import annotations


class WrapperError(RuntimeError):
    """Base exception for this project."""


class ConfigError(WrapperError):
    """Raised when configuration is invalid or incomplete."""

    def __init__(self, message: str, *, path: str | None = None):
        super().__init__(f"{path}: {message}" if path else message)
        self.path = path


class StaleStateError(WrapperError):
    """A saved handler from an earlier run is still on disk."""

    def __init__(self, message: str, *, saved_path: str):
        super().__init__(message)
        self.saved_path = saved_path


class FilesystemError(WrapperError):
    """A move, write or delete failed while swapping handler files."""

    def __init__(self, message: str, *, path: str | None = None):
        super().__init__(f"{message}: {path}" if path else message)
        self.path = path


class VersionMismatchWarning(UserWarning):
    """The host framework is older than the plugin supports."""
