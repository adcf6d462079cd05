"""Project settings and well-known locations."""

import json
import os
from pathlib import Path
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigurationError

SETTINGS_FILE_NAME = ".translations-settings.json"
APPLICATION_STORE_DIRNAME = ".sheets-translations"
DEFAULT_REFERENCE_LANGUAGE = "en"
DEFAULT_SHEET_NAME = "Sheet1"

# Environment variable -> settings file key
ENV_OVERRIDES = {
    "TRANSLATIONS_DIR": "translationsDir",
    "TRANSLATIONS_SPREADSHEET_ID": "spreadsheetId",
    "TRANSLATIONS_REFERENCE_LANGUAGE": "referenceLanguage",
    "TRANSLATIONS_SHEET_NAME": "sheetName",
    "TRANSLATIONS_FORMAT": "format",
}


def default_store_path() -> Path:
    """Directory holding the OAuth client secret and cached token."""
    override = os.getenv("SHEETS_TRANSLATIONS_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / APPLICATION_STORE_DIRNAME


class Settings(BaseModel):
    """Settings read from the project's ``.translations-settings.json``."""

    model_config = ConfigDict(populate_by_name=True)

    translations_dir: Path = Field(alias="translationsDir")
    spreadsheet_id: str = Field(alias="spreadsheetId")
    reference_language: str = Field(default=DEFAULT_REFERENCE_LANGUAGE, alias="referenceLanguage")
    sheet_name: str = Field(default=DEFAULT_SHEET_NAME, alias="sheetName")
    format: Literal["js", "esm", "json"] = "js"

    @field_validator("spreadsheet_id", "reference_language", "sheet_name")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    def with_translations_dir(self, directory: Path) -> "Settings":
        """Copy of the settings writing to / reading from another directory."""
        return self.model_copy(update={"translations_dir": Path(directory).expanduser().resolve()})


def load_settings(path: Optional[Path] = None) -> Settings:
    """Load and validate settings from the settings file and environment.

    Environment variables (including a ``.env`` file) override values from the
    file. ``translationsDir`` is resolved relative to the settings file.

    Raises:
        ConfigurationError: If the file is missing or unreadable, or a
            mandatory option is absent or invalid
    """
    load_dotenv()
    path = Path(path) if path else Path.cwd() / SETTINGS_FILE_NAME

    if not path.exists():
        raise ConfigurationError(
            f"Settings file not found: {path}\n"
            f"Create {SETTINGS_FILE_NAME} with \"translationsDir\" and \"spreadsheetId\" properties."
        )

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Cannot read settings file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Settings file {path} must contain a JSON object")

    for env_name, key in ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value:
            data[key] = value

    errors = []
    if not str(data.get("translationsDir") or "").strip():
        errors.append(
            f"You have to specify translations dir as \"translationsDir\" property in your project {SETTINGS_FILE_NAME}"
        )
    if not str(data.get("spreadsheetId") or "").strip():
        errors.append(
            f"You have to specify spreadsheet id as \"spreadsheetId\" in your project {SETTINGS_FILE_NAME}"
        )
    if errors:
        raise ConfigurationError("\n".join(errors))

    translations_dir = Path(str(data["translationsDir"]).strip()).expanduser()
    data["translationsDir"] = (path.parent / translations_dir).resolve()

    try:
        return Settings(**data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in e.errors()
        )
        raise ConfigurationError(f"Invalid settings in {path}: {problems}") from e
