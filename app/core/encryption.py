"""Field-level encryption for secrets stored inside configuration sections.

Model API keys live in the ``ai_model`` JSON section of a profile. They are
encrypted with Fernet before being written and decrypted on load. Values
carry an ``enc:`` prefix so rows written before a key was configured still
load as plaintext.
"""

import logging
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken

logger = logging.getLogger(__name__)

ENCRYPTED_PREFIX = "enc:"


class EncryptionError(Exception):
    """Raised when encryption/decryption fails."""
    pass


class EncryptionService:
    """Encrypts and decrypts sensitive strings with a Fernet key."""

    def __init__(self, key: str | None = None) -> None:
        self._fernet: Optional[Fernet] = None
        if key is None:
            # Import here to avoid circular import
            from app.settings import settings

            key = settings.field_encryption_key

        if key:
            try:
                self._fernet = Fernet(key.encode())
                logger.info("Encryption service initialized")
            except (ValueError, TypeError) as e:
                logger.error(f"Invalid FIELD_ENCRYPTION_KEY format: {e}")
        else:
            logger.debug("No encryption key configured - encryption disabled")

    @property
    def is_enabled(self) -> bool:
        """Check if encryption is enabled (key is configured)."""
        return self._fernet is not None

    def encrypt(self, plaintext: str) -> str:
        """Encrypt a plaintext string.

        Returns the ``enc:``-prefixed token, or the plaintext unchanged when
        no key is configured or the value is already encrypted.
        """
        if not plaintext or self.is_encrypted(plaintext):
            return plaintext

        if not self._fernet:
            logger.warning("Encryption not enabled - storing plaintext")
            return plaintext

        try:
            encrypted_bytes = self._fernet.encrypt(plaintext.encode())
        except Exception as e:
            raise EncryptionError(f"Failed to encrypt value: {e}") from e
        return f"{ENCRYPTED_PREFIX}{encrypted_bytes.decode()}"

    def decrypt(self, ciphertext: str) -> str:
        """Decrypt an ``enc:``-prefixed string; other values pass through.

        Raises:
            EncryptionError: If the key is missing or does not match
        """
        if not ciphertext or not self.is_encrypted(ciphertext):
            return ciphertext

        if not self._fernet:
            raise EncryptionError("Cannot decrypt: encryption key not configured")

        try:
            decrypted_bytes = self._fernet.decrypt(ciphertext[len(ENCRYPTED_PREFIX):].encode())
        except InvalidToken:
            raise EncryptionError("Failed to decrypt: invalid token or wrong key")
        return decrypted_bytes.decode()

    @staticmethod
    def is_encrypted(value: str | None) -> bool:
        """Check if a value is already encrypted."""
        return bool(value) and value.startswith(ENCRYPTED_PREFIX)


_encryption_service: Optional[EncryptionService] = None


def get_encryption_service() -> EncryptionService:
    """Get the process-wide encryption service instance."""
    global _encryption_service
    if _encryption_service is None:
        _encryption_service = EncryptionService()
    return _encryption_service


def reset_encryption_service() -> None:
    """Drop the cached service so the next call re-reads settings."""
    global _encryption_service
    _encryption_service = None


def encrypt_field(value: Optional[str]) -> Optional[str]:
    """Convenience function to encrypt a field value."""
    if value is None:
        return None
    return get_encryption_service().encrypt(value)


def decrypt_field(value: Optional[str]) -> Optional[str]:
    """Convenience function to decrypt a field value."""
    if value is None:
        return None
    return get_encryption_service().decrypt(value)


def generate_encryption_key() -> str:
    """Generate a new Fernet key suitable for FIELD_ENCRYPTION_KEY."""
    return Fernet.generate_key().decode()
