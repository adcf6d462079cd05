"""Pydantic models for the OAuth client secret and cached tokens."""

import time
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

GOOGLE_AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"


class ClientSecrets(BaseModel):
    """OAuth client downloaded from the Google Developer Console."""

    client_id: str
    client_secret: str
    redirect_uris: List[str] = Field(default_factory=lambda: ["http://localhost"])
    auth_uri: str = GOOGLE_AUTH_URI
    token_uri: str = GOOGLE_TOKEN_URI

    @property
    def redirect_uri(self) -> str:
        return self.redirect_uris[0] if self.redirect_uris else "http://localhost"

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "ClientSecrets":
        """Build from the ``{"installed": {...}}`` or ``{"web": {...}}`` document."""
        credentials = document.get("installed") or document.get("web")
        if not isinstance(credentials, dict):
            raise ValueError('expected an "installed" or "web" client section')
        return cls(**credentials)


class TokenResponse(BaseModel):
    """Response from the OAuth token endpoint."""

    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "Bearer"
    expires_in: int = 3600
    scope: Optional[str] = None


class StoredTokens(BaseModel):
    """Token document cached in the credential store.

    ``expiry_date`` is in epoch milliseconds, the same layout the Node
    googleapis client writes, so existing token files keep working.
    """

    access_token: str
    refresh_token: Optional[str] = None
    scope: Optional[str] = None
    token_type: str = "Bearer"
    expiry_date: Optional[int] = None

    @classmethod
    def from_response(cls, response: TokenResponse, refresh_token: Optional[str] = None) -> "StoredTokens":
        expiry_date = int(time.time() * 1000) + response.expires_in * 1000
        return cls(
            access_token=response.access_token,
            # refresh responses usually omit the refresh token
            refresh_token=response.refresh_token or refresh_token,
            scope=response.scope,
            token_type=response.token_type,
            expiry_date=expiry_date,
        )

    def is_expired(self, buffer_seconds: int = 60) -> bool:
        """Check if the access token is expired (with buffer)."""
        if self.expiry_date is None:
            return False
        return time.time() * 1000 >= self.expiry_date - buffer_seconds * 1000

    def mask_token(self, token: str) -> str:
        """Mask a token for display (show first 4 and last 4 chars)."""
        if len(token) <= 8:
            return "*" * len(token)
        return f"{token[:4]}...{token[-4:]}"

    def get_masked_access_token(self) -> str:
        return self.mask_token(self.access_token)

    def get_masked_refresh_token(self) -> str:
        if not self.refresh_token:
            return "None"
        return self.mask_token(self.refresh_token)
