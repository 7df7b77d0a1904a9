"""Domain errors raised by the configuration and template services."""


class ConfigurationServiceError(Exception):
    """Base class for configuration and template service errors."""
    pass


class ValidationError(ConfigurationServiceError):
    """Raised when a required field is blank or a section value is invalid."""
    pass


class NotFoundError(ConfigurationServiceError):
    """Raised when a profile or template id is unknown."""
    pass


class ForbiddenError(ConfigurationServiceError):
    """Raised when an operation targets the reserved default profile."""
    pass


class ConflictError(ConfigurationServiceError):
    """Raised when a write carries a stale profile version."""

    def __init__(self, message: str, current_version: int | None = None) -> None:
        super().__init__(message)
        self.current_version = current_version
