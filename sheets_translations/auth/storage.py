"""Credential store in the user's home directory."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..config import APPLICATION_STORE_DIRNAME, default_store_path
from ..errors import CredentialError
from .models import ClientSecrets, StoredTokens

logger = logging.getLogger(__name__)

CLIENT_SECRET_FILENAME = "client_secret.json"
TOKEN_FILENAME = "sheets.googleapis.com-sheets-translations.json"

CLIENT_SECRET_HELP = f"""You have to download {CLIENT_SECRET_FILENAME} file from Google Developer Console.
https://console.developers.google.com/apis/credentials

1. Create credentials for "OAuth Client ID".
2. Select "Desktop app" (formerly "Other") as application type.
3. Type application name, ex. Translations CLI
4. Click "Ok" in popup and download client keys.
5. Move it to ~/{APPLICATION_STORE_DIRNAME} and rename to "{CLIENT_SECRET_FILENAME}\""""


class CredentialStore:
    """Reads the OAuth client secret and reads/writes the cached token."""

    def __init__(self, store_dir: Optional[Path] = None):
        """Initialize the store.

        Args:
            store_dir: Store location. Defaults to ~/.sheets-translations/
        """
        self.store_dir = Path(store_dir) if store_dir is not None else default_store_path()
        self.client_secret_file = self.store_dir / CLIENT_SECRET_FILENAME
        self.token_file = self.store_dir / TOKEN_FILENAME

    def ensure(self) -> None:
        """Create the store directory; an existing directory is fine."""
        try:
            self.store_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CredentialError(f"Cannot create credential store {self.store_dir}: {e}") from e
        logger.debug("Store exists at %s", self.store_dir)

    def load_client_secrets(self) -> ClientSecrets:
        """Load the OAuth client secret document.

        Raises:
            CredentialError: If the document is missing or malformed
        """
        logger.debug("Secret file path: %s", self.client_secret_file)
        if not self.client_secret_file.exists():
            raise CredentialError(CLIENT_SECRET_HELP)

        try:
            with open(self.client_secret_file, "r", encoding="utf-8") as f:
                document = json.load(f)
            return ClientSecrets.from_document(document)
        except (OSError, ValueError) as e:
            raise CredentialError(
                f"Cannot read {self.client_secret_file}: {e}\n\n{CLIENT_SECRET_HELP}"
            ) from e

    def load_tokens(self) -> Optional[StoredTokens]:
        """Load the cached token.

        Returns:
            StoredTokens, or None when no token has been cached yet

        Raises:
            CredentialError: If the token file exists but cannot be read
        """
        if not self.token_file.exists():
            return None

        try:
            with open(self.token_file, "r", encoding="utf-8") as f:
                data = json.load(f)
            return StoredTokens(**data)
        except (OSError, ValueError, TypeError) as e:
            # ValidationError is a ValueError
            raise CredentialError(
                f"Cannot read cached token {self.token_file}: {e}\n"
                f"Run 'sheets-translations clear' and authorize again."
            ) from e

    def save_tokens(self, tokens: StoredTokens) -> None:
        """Write the token to disk, readable by the owner only."""
        try:
            with open(self.token_file, "w", encoding="utf-8") as f:
                json.dump(tokens.model_dump(exclude_none=True), f, indent=2)
            self.token_file.chmod(0o600)
        except OSError as e:
            raise CredentialError(f"Cannot store token to {self.token_file}: {e}") from e
        logger.debug("Token stored to %s", self.token_file)

    def clear_tokens(self) -> None:
        """Remove the cached token."""
        if self.token_file.exists():
            self.token_file.unlink()

    def has_tokens(self) -> bool:
        return self.token_file.exists()

    def get_storage_info(self) -> dict:
        """Get information about the store location and token status."""
        info = {
            "store_path": str(self.store_dir),
            "client_secret_path": str(self.client_secret_file),
            "has_client_secret": self.client_secret_file.exists(),
            "token_path": str(self.token_file),
            "has_tokens": self.has_tokens(),
        }

        tokens = self.load_tokens()
        if tokens:
            expires_at = (
                datetime.fromtimestamp(tokens.expiry_date / 1000).isoformat(timespec="seconds")
                if tokens.expiry_date else "unknown"
            )
            info.update({
                "access_token": tokens.get_masked_access_token(),
                "refresh_token": tokens.get_masked_refresh_token(),
                "expires_at": expires_at,
                "is_expired": tokens.is_expired(),
                "scope": tokens.scope or "",
            })

        return info
