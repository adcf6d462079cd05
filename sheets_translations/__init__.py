"""
Sheets Translations

Keeps an application's per-language translation files in sync with a Google
Sheet used as the translators' workbench:
- pull: sheet rows (one translation key per row, one language per column)
  become nested per-language modules
- push: per-language modules are flattened and uploaded column by column
"""

__version__ = "1.0.0"

from .config import Settings, load_settings
from .errors import (
    ConfigurationError,
    CredentialError,
    RemoteError,
    StructuralConflict,
    SyncError,
    TranslationFileError,
)
from .keypath import flatten, unflatten

__all__ = [
    "ConfigurationError",
    "CredentialError",
    "RemoteError",
    "Settings",
    "StructuralConflict",
    "SyncError",
    "TranslationFileError",
    "flatten",
    "load_settings",
    "unflatten",
]
