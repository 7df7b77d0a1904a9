"""Custom SQLAlchemy types for the application."""

from typing import Any, Optional

from sqlalchemy import JSON, TypeDecorator

from app.core.encryption import decrypt_field, encrypt_field


class EncryptedJSON(TypeDecorator):
    """JSON object column whose listed keys are stored encrypted.

    Usage:
        ai_model = Column(EncryptedJSON(secret_keys=("api_key",)))

    Only string values under ``secret_keys`` are touched; everything else is
    stored as plain JSON. Values carry the ``enc:`` prefix, so rows written
    without an encryption key still load.
    """

    impl = JSON
    cache_ok = True

    def __init__(self, secret_keys: tuple[str, ...] = ()):
        super().__init__()
        self.secret_keys = tuple(secret_keys)

    def _transform(self, value: Optional[dict], func) -> Optional[dict]:
        if value is None:
            return None
        result: dict[str, Any] = dict(value)
        for key in self.secret_keys:
            if isinstance(result.get(key), str):
                result[key] = func(result[key])
        return result

    def process_bind_param(self, value: Optional[dict], dialect) -> Optional[dict]:
        """Encrypt secret keys before storing in database."""
        return self._transform(value, encrypt_field)

    def process_result_value(self, value: Optional[dict], dialect) -> Optional[dict]:
        """Decrypt secret keys when reading from database."""
        return self._transform(value, decrypt_field)
