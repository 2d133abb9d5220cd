"""Identity Directory exceptions."""

from apps.core.exceptions import ExternalSystemError


class DirectoryError(ExternalSystemError):
    """
    An Identity Directory call failed.

    Attributes:
        operation: Adapter method that failed, e.g. "create_organization"
        status_code: HTTP status, or None for transport errors and timeouts
    """

    code = "directory_error"

    def __init__(self, message: str, operation: str = "", status_code: int | None = None):
        super().__init__(message)
        self.operation = operation
        self.status_code = status_code
        # Client errors will fail the same way again
        self.retryable = status_code is None or status_code >= 500 or status_code == 429


class DirectoryAuthError(DirectoryError):
    """Admin token could not be obtained."""

    code = "directory_auth_error"


class DirectoryNotConfiguredError(DirectoryError):
    """Directory connection settings are missing."""

    code = "directory_not_configured"
