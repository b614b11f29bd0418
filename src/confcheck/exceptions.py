"""Custom exceptions for confcheck."""


class ConfcheckError(Exception):
    """Base exception for confcheck errors."""
    pass


class SchemaBuildError(ConfcheckError):
    """Raised when a schema descriptor is malformed.

    This is a wiring defect: it surfaces at startup, never while analyzing.
    """
    pass


class RegistryError(ConfcheckError):
    """Raised for conflicting or missing schema registrations."""
    pass


class LoadError(ConfcheckError):
    """Raised when a resource file cannot be read or decoded."""

    def __init__(self, path, message: str, line: int | None = None):
        self.path = path
        self.line = line
        location = f"{path}:{line}" if line is not None else f"{path}"
        super().__init__(f"{location}: {message}")
