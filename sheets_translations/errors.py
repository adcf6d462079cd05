"""Error types raised by the translations sync tool."""


class SyncError(Exception):
    """Base class for every error the sync tool reports to the user."""
    pass


class ConfigurationError(SyncError):
    """Settings file is missing, malformed or lacks a mandatory field."""
    pass


class CredentialError(SyncError):
    """Client secret document missing, token exchange failed or token file unreadable."""
    pass


class RemoteError(SyncError):
    """Spreadsheet API call failed."""
    pass


class StructuralConflict(SyncError):
    """A translation key is both a leaf and a parent of other keys.

    Raised when e.g. ``home`` and ``home.title`` are both present: the
    nested tree cannot hold a string and a mapping at the same path.
    """

    def __init__(self, path: str, message: str = ""):
        self.path = path
        super().__init__(message or f"Translation key '{path}' conflicts with another key path")


class TranslationFileError(SyncError):
    """A per-language translation file could not be read, parsed or written."""

    def __init__(self, path, message: str):
        self.path = path
        super().__init__(f"{path}: {message}")
