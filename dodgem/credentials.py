"""Local storage for Rocket League Garage account credentials.

Credentials are kept in a JSON file inside the config directory, written
atomically with owner-only permissions. They are never checked against the
site here; a bad password only shows up as a failed login at cycle time.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dodgem.exceptions import CredentialsMissingError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Credentials:
    """Account credentials used to log in.

    Attributes:
        email: Account email address (the login identity)
        password: Account password
    """

    email: str
    password: str

    def __repr__(self) -> str:
        return f"Credentials(email={self.email!r}, password='****')"


class CredentialStore:
    """File-backed credential store.

    Example:
        store = CredentialStore(config.credentials_file)
        store.save(Credentials("me@example.com", "hunter2"))
        creds = store.get_credentials()
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        """Check whether a credentials file is present."""
        return self._path.is_file()

    def load(self) -> Credentials | None:
        """Load stored credentials.

        Returns:
            The stored credentials, or None if nothing is stored

        Raises:
            CredentialsMissingError: If the file exists but is unreadable or incomplete
        """
        if not self.exists():
            return None

        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise CredentialsMissingError(
                f"Stored credentials are unreadable ({exc}); run 'dodgem login' again"
            ) from exc

        if not isinstance(payload, dict):
            raise CredentialsMissingError("Stored credentials are malformed; run 'dodgem login' again")

        email = payload.get("email")
        password = payload.get("password")
        if not email or not password:
            raise CredentialsMissingError("Stored credentials are incomplete; run 'dodgem login' again")

        return Credentials(email=email, password=password)

    def get_credentials(self) -> Credentials:
        """Return stored credentials or raise if there are none.

        Raises:
            CredentialsMissingError: If no usable credentials are stored
        """
        credentials = self.load()
        if credentials is None:
            raise CredentialsMissingError("No credentials stored; run 'dodgem login' first")
        return credentials

    def save(self, credentials: Credentials) -> None:
        """Persist credentials with 0600 permissions, replacing any existing file."""
        serialized = json.dumps(
            {"email": credentials.email, "password": credentials.password},
            indent=2,
        )
        temp_path = self._path.with_name(f"{self._path.name}.tmp")
        fd: int | None = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(temp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as stream:
                fd = None
                stream.write(serialized)
                stream.write("\n")
            os.chmod(temp_path, 0o600)
            os.replace(temp_path, self._path)
        finally:
            if fd is not None:
                os.close(fd)
            if temp_path.exists():
                temp_path.unlink()

        logger.info(f"Saved credentials for {credentials.email} to {self._path}")

    def clear(self) -> bool:
        """Remove stored credentials.

        Returns:
            True if a file was removed
        """
        if not self.exists():
            return False
        self._path.unlink()
        logger.info(f"Removed stored credentials at {self._path}")
        return True
