"""Shared fixtures for the sheets_translations test suite."""

import json
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from sheets_translations.config import Settings


@pytest.fixture
def sample_grid():
    """Sheet values as the API returns them: title, header, then key rows."""
    return [
        ["Translations"],
        ["Key", "en", "fr", "de"],
        ["home.title", "Hello", "Bonjour", "Hallo"],
        ["home.subtitle", "Welcome", "Bienvenue"],
        ["menu.items.save", "Save", "Enregistrer", "Speichern"],
    ]


@pytest.fixture
def settings(tmp_path):
    return Settings(
        translationsDir=tmp_path / "translations",
        spreadsheetId="sheet-123",
    )


@pytest.fixture
def mock_sheets_client(sample_grid):
    """SheetsClient stand-in returning ``sample_grid`` for every read."""
    mock = MagicMock()
    mock.get_values.return_value = sample_grid
    mock.update_values.return_value = {"updatedRange": "Sheet1!A2:D5", "updatedCells": 16}
    return mock


@pytest.fixture
def fake_session():
    """Token provider with a fixed access token."""
    session = MagicMock()
    session.get_valid_tokens.return_value = SimpleNamespace(access_token="token-1")
    session.refresh.return_value = SimpleNamespace(access_token="token-2")
    return session


@pytest.fixture
def write_settings(tmp_path):
    """Write a settings file and return its path."""
    def _write(data):
        path = tmp_path / ".translations-settings.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return path
    return _write


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Keep the developer's environment and home directory out of the tests."""
    for name in (
        "TRANSLATIONS_DIR",
        "TRANSLATIONS_SPREADSHEET_ID",
        "TRANSLATIONS_REFERENCE_LANGUAGE",
        "TRANSLATIONS_SHEET_NAME",
        "TRANSLATIONS_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("SHEETS_TRANSLATIONS_HOME", str(tmp_path / "store"))
    monkeypatch.setattr("sheets_translations.config.load_dotenv", lambda *args, **kwargs: False)
