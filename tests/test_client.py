"""Tests for the Sheets REST client, using httpx.MockTransport."""

import json

import httpx
import pytest

from sheets_translations.client import SheetsClient, sheet_range
from sheets_translations.errors import RemoteError


class TestSheetRange:

    @pytest.mark.parametrize("name,cell,expected", [
        ("Sheet1", None, "Sheet1"),
        ("Sheet1", "A2", "Sheet1!A2"),
        ("my_sheet", "A2", "my_sheet!A2"),
        ("My Sheet", None, "'My Sheet'"),
        ("Translations v2", "A2", "'Translations v2'!A2"),
        ("Bob's", None, "'Bob''s'"),
    ])
    def test_notation(self, name, cell, expected):
        assert sheet_range(name, cell) == expected


class TestSheetsClient:
    """Tests for SheetsClient"""

    def make_client(self, session, handler):
        return SheetsClient(session, transport=httpx.MockTransport(handler))

    def test_get_values(self, fake_session):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"range": "Sheet1!A1:B2", "values": [["Title"], ["Key", "en"]]})

        with self.make_client(fake_session, handler) as client:
            values = client.get_values("sheet-123", "Sheet1")

        assert values == [["Title"], ["Key", "en"]]
        assert seen[0].method == "GET"
        assert seen[0].url.path == "/v4/spreadsheets/sheet-123/values/Sheet1"
        assert seen[0].headers["Authorization"] == "Bearer token-1"

    def test_get_values_of_empty_sheet(self, fake_session):
        client = self.make_client(fake_session, lambda request: httpx.Response(200, json={"range": "Sheet1!A1:Z1000"}))
        assert client.get_values("sheet-123", "Sheet1") == []

    def test_update_values(self, fake_session):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"updatedRange": "Sheet1!A2:B3", "updatedCells": 4})

        client = self.make_client(fake_session, handler)
        response = client.update_values("sheet-123", "Sheet1!A2", [["Key Name", "a"], ["en", "A"]], major_dimension="COLUMNS")

        assert response["updatedCells"] == 4
        request = seen[0]
        assert request.method == "PUT"
        assert request.url.params["valueInputOption"] == "RAW"
        assert json.loads(request.content) == {
            "range": "Sheet1!A2",
            "majorDimension": "COLUMNS",
            "values": [["Key Name", "a"], ["en", "A"]],
        }

    def test_refreshes_once_on_401(self, fake_session):
        tokens_seen = []

        def handler(request):
            tokens_seen.append(request.headers["Authorization"])
            if len(tokens_seen) == 1:
                return httpx.Response(401, json={"error": {"status": "UNAUTHENTICATED", "message": "expired"}})
            return httpx.Response(200, json={"values": [["Title"]]})

        client = self.make_client(fake_session, handler)
        assert client.get_values("sheet-123", "Sheet1") == [["Title"]]
        assert tokens_seen == ["Bearer token-1", "Bearer token-2"]
        fake_session.refresh.assert_called_once()

    def test_second_401_is_an_error(self, fake_session):
        client = self.make_client(
            fake_session, lambda request: httpx.Response(401, json={"error": {"status": "UNAUTHENTICATED"}})
        )
        with pytest.raises(RemoteError, match="401"):
            client.get_values("sheet-123", "Sheet1")
        fake_session.refresh.assert_called_once()

    def test_api_error(self, fake_session):
        body = {"error": {"code": 404, "status": "NOT_FOUND", "message": "Requested entity was not found."}}
        client = self.make_client(fake_session, lambda request: httpx.Response(404, json=body))
        with pytest.raises(RemoteError) as exc_info:
            client.get_values("missing", "Sheet1")
        assert str(exc_info.value).startswith("The API returned an error:")
        assert "Requested entity was not found." in str(exc_info.value)

    def test_transport_error(self, fake_session):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = self.make_client(fake_session, handler)
        with pytest.raises(RemoteError, match="connection refused"):
            client.get_values("sheet-123", "Sheet1")

    def test_unreadable_response(self, fake_session):
        client = self.make_client(fake_session, lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(RemoteError, match="unreadable"):
            client.get_values("sheet-123", "Sheet1")
