"""Tests for the command-line interface."""

import importlib
import json
from unittest.mock import MagicMock

import pytest
from typer.testing import CliRunner

from sheets_translations import cli
from sheets_translations.auth import CredentialStore, StoredTokens

runner = CliRunner()


@pytest.fixture
def settings_file(write_settings, tmp_path):
    return write_settings({"translationsDir": "locales", "spreadsheetId": "sheet-123"})


@pytest.fixture
def offline(monkeypatch, mock_sheets_client):
    """Replace authorization and the Sheets client with mocks."""
    session = MagicMock()
    monkeypatch.setattr(cli.AuthSession, "from_store", MagicMock(return_value=session))
    mock_sheets_client.__enter__.return_value = mock_sheets_client
    monkeypatch.setattr(cli, "SheetsClient", MagicMock(return_value=mock_sheets_client))
    return session


class TestSyncCommand:
    """Tests for the sync command"""

    def test_requires_a_direction(self):
        result = runner.invoke(cli.app, ["sync"])
        assert result.exit_code == 2

    def test_rejects_both_directions(self):
        result = runner.invoke(cli.app, ["sync", "--pull", "--push"])
        assert result.exit_code == 2

    def test_missing_settings_file(self, tmp_path):
        result = runner.invoke(cli.app, ["sync", "--pull", "--settings", str(tmp_path / "missing.json")])
        assert result.exit_code == 1

    def test_incomplete_settings(self, write_settings):
        path = write_settings({"translationsDir": "locales"})
        result = runner.invoke(cli.app, ["sync", "--pull", "--settings", str(path)])
        assert result.exit_code == 1

    def test_missing_client_secret(self, settings_file):
        result = runner.invoke(cli.app, ["sync", "--pull", "--settings", str(settings_file)])
        assert result.exit_code == 1

    def test_pull(self, settings_file, offline, tmp_path):
        result = runner.invoke(cli.app, ["sync", "--pull", "--settings", str(settings_file)])

        assert result.exit_code == 0, result.output
        assert sorted(path.name for path in (tmp_path / "locales").iterdir()) == ["de.js", "en.js", "fr.js"]
        assert "Language en file has been saved!" in result.output
        offline.close.assert_called_once()

    def test_pull_to_output_dir(self, settings_file, offline, tmp_path):
        target = tmp_path / "elsewhere"
        result = runner.invoke(cli.app, ["sync", "--pull", "--settings", str(settings_file), "-o", str(target)])

        assert result.exit_code == 0, result.output
        assert (target / "en.js").is_file()
        assert not (tmp_path / "locales").exists()

    def test_pull_with_write_failure(self, settings_file, offline, tmp_path):
        (tmp_path / "locales" / "fr.js").mkdir(parents=True)
        result = runner.invoke(cli.app, ["sync", "--pull", "--settings", str(settings_file)])

        assert result.exit_code == 1
        assert (tmp_path / "locales" / "en.js").is_file()

    def test_push(self, settings_file, offline, mock_sheets_client, tmp_path):
        locales = tmp_path / "locales"
        locales.mkdir()
        (locales / "en.js").write_text("module.exports = {a: 'A'}\n", encoding="utf-8")

        result = runner.invoke(cli.app, ["sync", "--push", "--settings", str(settings_file)])

        assert result.exit_code == 0, result.output
        mock_sheets_client.update_values.assert_called_once()
        assert "Translations pushed!" in result.output

    def test_push_with_broken_file(self, settings_file, offline, mock_sheets_client, tmp_path):
        locales = tmp_path / "locales"
        locales.mkdir()
        (locales / "en.js").write_text("module.exports = {a: \n", encoding="utf-8")

        result = runner.invoke(cli.app, ["sync", "--push", "--settings", str(settings_file)])

        assert result.exit_code == 1
        mock_sheets_client.update_values.assert_not_called()


class TestCredentialCommands:

    def test_info_without_token(self):
        result = runner.invoke(cli.app, ["info"])
        assert result.exit_code == 0
        assert "Credential Store" in result.output

    def test_clear_without_token(self):
        result = runner.invoke(cli.app, ["clear"])
        assert result.exit_code == 0
        assert "No token to clear." in result.output

    def test_clear_confirmed(self):
        store = CredentialStore()
        store.ensure()
        store.save_tokens(StoredTokens(access_token="abc"))

        result = runner.invoke(cli.app, ["clear"], input="y\n")

        assert result.exit_code == 0
        assert not store.has_tokens()

    def test_clear_declined(self):
        store = CredentialStore()
        store.ensure()
        store.save_tokens(StoredTokens(access_token="abc"))

        result = runner.invoke(cli.app, ["clear"], input="n\n")

        assert result.exit_code == 0
        assert store.has_tokens()

    def test_auth_without_client_secret(self):
        result = runner.invoke(cli.app, ["auth"])
        assert result.exit_code == 1

    def test_auth_with_cached_token(self, tmp_path):
        store = CredentialStore()
        store.ensure()
        store.client_secret_file.write_text(json.dumps({"installed": {
            "client_id": "id", "client_secret": "secret", "redirect_uris": ["http://localhost"],
        }}), encoding="utf-8")
        store.save_tokens(StoredTokens(access_token="abc", refresh_token="def"))

        result = runner.invoke(cli.app, ["auth"])

        assert result.exit_code == 0
        assert "Cached token is valid" in result.output


def test_import_does_not_load_dotenv(monkeypatch):
    calls = []
    monkeypatch.setattr("dotenv.load_dotenv", lambda *args, **kwargs: calls.append(args))
    importlib.reload(cli)
    assert calls == []
