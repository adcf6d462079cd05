"""OAuth2 installed-application flow against Google's token endpoint."""

import logging
import webbrowser
from typing import Callable, Optional
from urllib.parse import parse_qs, urlencode, urlparse

import httpx
from rich.console import Console
from rich.prompt import Prompt

from ..errors import CredentialError
from .models import ClientSecrets, StoredTokens, TokenResponse
from .storage import CredentialStore

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


class OAuthClient:
    """Builds the consent URL and exchanges/refreshes tokens."""

    def __init__(self, secrets: ClientSecrets, transport: Optional[httpx.BaseTransport] = None):
        self.secrets = secrets
        self.client = httpx.Client(timeout=30.0, transport=transport)

    def build_authorize_url(self, state: Optional[str] = None) -> str:
        """Build the consent page URL for offline access to spreadsheets."""
        params = {
            "response_type": "code",
            "client_id": self.secrets.client_id,
            "redirect_uri": self.secrets.redirect_uri,
            "scope": " ".join(SCOPES),
            "access_type": "offline",
        }
        if state:
            params["state"] = state
        return f"{self.secrets.auth_uri}?{urlencode(params)}"

    def exchange_code_for_tokens(self, code: str) -> StoredTokens:
        """Exchange an authorization code for access and refresh tokens.

        Raises:
            CredentialError: If the token endpoint rejects the code
        """
        data = {
            "grant_type": "authorization_code",
            "code": code,
            "client_id": self.secrets.client_id,
            "client_secret": self.secrets.client_secret,
            "redirect_uri": self.secrets.redirect_uri,
        }
        return StoredTokens.from_response(self._post_token(data, "Token exchange failed"))

    def refresh_tokens(self, tokens: StoredTokens) -> StoredTokens:
        """Get a new access token using the refresh token.

        Raises:
            CredentialError: If there is no refresh token or the refresh fails
        """
        if not tokens.refresh_token:
            raise CredentialError(
                "No refresh token available. Run 'sheets-translations auth' to authorize again."
            )
        data = {
            "grant_type": "refresh_token",
            "refresh_token": tokens.refresh_token,
            "client_id": self.secrets.client_id,
            "client_secret": self.secrets.client_secret,
        }
        response = self._post_token(data, "Token refresh failed")
        return StoredTokens.from_response(response, refresh_token=tokens.refresh_token)

    def _post_token(self, data: dict, message: str) -> TokenResponse:
        try:
            response = self.client.post(self.secrets.token_uri, data=data)
            response.raise_for_status()
            return TokenResponse(**response.json())
        except httpx.HTTPStatusError as e:
            try:
                err_json = e.response.json()
                err_desc = err_json.get("error_description") or err_json.get("error")
            except ValueError:
                err_desc = e.response.text
            if "invalid_grant" in str(err_desc).lower() or "invalid_grant" in e.response.text:
                message = f"{message}: grant is invalid or expired. Run 'sheets-translations auth' to authorize again"
            raise CredentialError(f"{message}. Details: {err_desc}") from e
        except httpx.HTTPError as e:
            raise CredentialError(f"{message}: {e}") from e
        except ValueError as e:
            raise CredentialError(f"{message}: unexpected token response ({e})") from e

    def close(self) -> None:
        """Close the HTTP client."""
        self.client.close()


def extract_code(answer: str) -> Optional[str]:
    """Take the authorization code from a pasted code or full redirect URL."""
    answer = answer.strip()
    if not answer:
        return None
    if "://" in answer or answer.startswith("/?") or answer.startswith("?"):
        query = parse_qs(urlparse(answer).query)
        codes = query.get("code")
        return codes[0] if codes else None
    return answer


def authorize_interactively(
    oauth_client: OAuthClient,
    console: Optional[Console] = None,
    ask: Callable[[str], str] = Prompt.ask,
    open_browser: Callable[[str], bool] = webbrowser.open,
) -> StoredTokens:
    """Prompt the user through the consent page and exchange the code they paste.

    Raises:
        CredentialError: If no code is entered or the exchange fails
    """
    console = console or Console()
    auth_url = oauth_client.build_authorize_url()

    console.print("Authorize this app by visiting this url:")
    console.print(f"[blue]{auth_url}[/blue]")
    try:
        open_browser(auth_url)
    except Exception:
        console.print("[yellow]Could not open browser automatically[/yellow]")

    console.print(
        "After granting access you will land on a page that may fail to load. "
        "Copy the 'code' parameter, or the whole address, from the browser's address bar."
    )
    code = extract_code(ask("Enter the code from that page here") or "")
    if not code:
        raise CredentialError("No authorization code provided")

    console.print("Exchanging authorization code for tokens...")
    return oauth_client.exchange_code_for_tokens(code)


class AuthSession:
    """Hands out valid access tokens, authorizing or refreshing as needed."""

    def __init__(
        self,
        store: CredentialStore,
        oauth_client: OAuthClient,
        console: Optional[Console] = None,
        ask: Callable[[str], str] = Prompt.ask,
        open_browser: Callable[[str], bool] = webbrowser.open,
    ):
        self.store = store
        self.oauth_client = oauth_client
        self.console = console or Console()
        self._ask = ask
        self._open_browser = open_browser
        self._tokens: Optional[StoredTokens] = None

    @classmethod
    def from_store(
        cls,
        store: CredentialStore,
        console: Optional[Console] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> "AuthSession":
        """Create the store if needed and load its client secret."""
        store.ensure()
        secrets = store.load_client_secrets()
        return cls(store, OAuthClient(secrets, transport=transport), console)

    def authorize(self) -> StoredTokens:
        """Run the interactive flow and cache the new token."""
        tokens = authorize_interactively(
            self.oauth_client, self.console, ask=self._ask, open_browser=self._open_browser
        )
        self.store.save_tokens(tokens)
        self.console.print(f"Token stored to {self.store.token_file}")
        self._tokens = tokens
        return tokens

    def refresh(self) -> StoredTokens:
        """Refresh the current token and cache the result."""
        tokens = self._tokens or self.store.load_tokens()
        if tokens is None:
            return self.authorize()
        logger.debug("Refreshing access token")
        refreshed = self.oauth_client.refresh_tokens(tokens)
        self.store.save_tokens(refreshed)
        self._tokens = refreshed
        return refreshed

    def get_valid_tokens(self) -> StoredTokens:
        """Return a usable token, authorizing on first run and refreshing when expired."""
        if self._tokens is None:
            self._tokens = self.store.load_tokens()
        if self._tokens is None:
            return self.authorize()
        if self._tokens.is_expired() and self._tokens.refresh_token:
            return self.refresh()
        return self._tokens

    def close(self) -> None:
        self.oauth_client.close()
