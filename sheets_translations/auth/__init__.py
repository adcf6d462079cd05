"""Google OAuth credentials for the spreadsheet API."""

from .models import ClientSecrets, StoredTokens, TokenResponse
from .oauth import AuthSession, OAuthClient, authorize_interactively, extract_code
from .storage import CredentialStore

__all__ = [
    "AuthSession",
    "ClientSecrets",
    "CredentialStore",
    "OAuthClient",
    "StoredTokens",
    "TokenResponse",
    "authorize_interactively",
    "extract_code",
]
