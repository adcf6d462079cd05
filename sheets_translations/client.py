"""Google Sheets REST client with token refresh on 401."""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from .errors import RemoteError

logger = logging.getLogger(__name__)


def sheet_range(sheet_name: str, cell: Optional[str] = None) -> str:
    """A1 notation for a whole sheet or a cell within it.

    Sheet names other than plain letters/digits/underscores are quoted.
    """
    if not sheet_name.replace("_", "").isalnum():
        sheet_name = "'" + sheet_name.replace("'", "''") + "'"
    return f"{sheet_name}!{cell}" if cell else sheet_name


class SheetsClient:
    """Reads and writes cell values of one spreadsheet through the Sheets v4 API.

    ``session`` provides access tokens: it needs ``get_valid_tokens()`` and
    ``refresh()``, both returning an object with an ``access_token``.
    """

    BASE_URL = "https://sheets.googleapis.com/v4/spreadsheets"

    def __init__(self, session, transport: Optional[httpx.BaseTransport] = None):
        self.session = session
        self.client = httpx.Client(timeout=30.0, transport=transport)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def _request(self, method: str, spreadsheet_id: str, range_name: str, **kwargs) -> Dict[str, Any]:
        url = f"{self.BASE_URL}/{quote(spreadsheet_id, safe='')}/values/{quote(range_name, safe=':!$')}"
        tokens = self.session.get_valid_tokens()

        try:
            response = self.client.request(
                method, url, headers={"Authorization": f"Bearer {tokens.access_token}"}, **kwargs
            )

            # Token revoked or expired early: refresh once and replay
            if response.status_code == 401:
                logger.debug("Received 401, refreshing access token")
                tokens = self.session.refresh()
                response = self.client.request(
                    method, url, headers={"Authorization": f"Bearer {tokens.access_token}"}, **kwargs
                )

            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            raise RemoteError(f"The API returned an error: {_describe(e.response)}") from e
        except httpx.HTTPError as e:
            raise RemoteError(f"The API returned an error: {e}") from e
        except ValueError as e:
            raise RemoteError(f"The API returned an unreadable response: {e}") from e

    def get_values(self, spreadsheet_id: str, range_name: str) -> List[List[str]]:
        """Fetch the cell grid of a range. Trailing empty rows and cells are omitted by the API."""
        logger.debug("Fetching %s from spreadsheet %s", range_name, spreadsheet_id)
        data = self._request("GET", spreadsheet_id, range_name)
        return data.get("values", [])

    def update_values(
        self,
        spreadsheet_id: str,
        range_name: str,
        values: List[List[Any]],
        major_dimension: str = "ROWS",
    ) -> Dict[str, Any]:
        """Overwrite a range with raw (unparsed) values.

        Args:
            spreadsheet_id: Target spreadsheet
            range_name: A1 range or anchor cell
            values: 2D list of values
            major_dimension: ``ROWS`` or ``COLUMNS``, the orientation of ``values``

        Returns:
            The API's update response
        """
        logger.debug("Updating %s in spreadsheet %s (%s)", range_name, spreadsheet_id, major_dimension)
        body = {
            "range": range_name,
            "majorDimension": major_dimension,
            "values": values,
        }
        return self._request(
            "PUT", spreadsheet_id, range_name,
            params={"valueInputOption": "RAW"},
            json=body,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self.client.close()


def _describe(response: httpx.Response) -> str:
    try:
        error = response.json().get("error", {})
        return f"{response.status_code} {error.get('status', '')} {error.get('message', '')}".strip()
    except (ValueError, AttributeError):
        return f"{response.status_code} {response.text}"
