"""Error types.

Only RootPathError and ConfigError ever reach the caller; an unreadable file
is recorded as a diagnostic and the scan goes on.
"""


class EnvAuditError(Exception):
    """Base class for all env-audit errors."""


class RootPathError(EnvAuditError):
    """The scan root does not exist or is not a directory."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{reason}: {path}")


class ConfigError(EnvAuditError):
    """The configuration file cannot be read or holds an invalid value."""


class UnreadableFileError(EnvAuditError):
    """A single file cannot be read as UTF-8 text."""
