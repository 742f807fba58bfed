"""Admin login checks and credential rotation."""

import hmac
import logging

from laptop_catalog.models import Credentials
from laptop_catalog.services.credential_store import CredentialStore

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


class AuthenticationError(Exception):
    """Raised when presented credentials do not match the stored ones."""

    pass


class CredentialValidationError(ValueError):
    """Raised when a rotation request has missing or malformed fields."""

    def __init__(self, field_errors: dict[str, list[str]]):
        super().__init__("; ".join(f"{k}: {', '.join(v)}" for k, v in field_errors.items()))
        self.field_errors = field_errors


def _matches(presented: str, stored: str) -> bool:
    return hmac.compare_digest(presented.encode("utf-8"), stored.encode("utf-8"))


class CredentialService:
    """Verifies and rotates the single admin credential pair."""

    def __init__(self, store: CredentialStore):
        self._store = store

    async def current_username(self) -> str:
        return (await self._store.get()).username

    async def verify(self, username: str, password: str) -> bool:
        """Check a login attempt against the stored credentials."""
        stored = await self._store.get()
        # Both comparisons always run
        username_ok = _matches(username, stored.username)
        password_ok = _matches(password, stored.password)
        return username_ok and password_ok

    async def rotate(self, current_password: str, new_username: str, new_password: str) -> Credentials:
        """
        Replace the admin credentials.

        Args:
            current_password: Must equal the stored password.
            new_username: Replacement username, non-empty.
            new_password: Replacement password, at least 6 characters.

        Returns:
            The new credentials.

        Raises:
            CredentialValidationError: If a field is missing or too short.
            AuthenticationError: If ``current_password`` is wrong. Nothing
                is changed in that case.
            CredentialStoreError: If the new credentials cannot be written.
        """
        field_errors: dict[str, list[str]] = {}
        if not current_password:
            field_errors["currentPassword"] = ["Current password is required"]
        if not new_username:
            field_errors["newUsername"] = ["New username is required"]
        if len(new_password) < MIN_PASSWORD_LENGTH:
            field_errors["newPassword"] = [
                f"New password must be at least {MIN_PASSWORD_LENGTH} characters"
            ]
        if field_errors:
            raise CredentialValidationError(field_errors)

        stored = await self._store.get()
        if not _matches(current_password, stored.password):
            logger.warning("Credential rotation rejected: incorrect current password")
            raise AuthenticationError("Incorrect current password.")

        credentials = Credentials(username=new_username, password=new_password)
        await self._store.save(credentials)
        logger.info(f"Admin credentials rotated, username is now '{new_username}'")
        return credentials
