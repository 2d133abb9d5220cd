"""
Core exception taxonomy.

Every error raised by the organization services derives from EngineError.
The API layer translates these into HTTP responses in one place
(see config/api.py), so services never raise HttpError themselves.

Classes:
    ValidationError: bad input, safe to report verbatim
    ConflictError: resource already exists, may carry suggestions
    AuthorizationError: principal lacks the required role
    NotFoundError: resource missing (or hidden from non-members)
    ExternalSystemError: Identity Directory or DNS failure, retryable
    PartialProvisioningError: external create succeeded, local mirror failed
"""


class EngineError(Exception):
    """Base exception for organization engine errors."""

    code = "engine_error"
    retryable = False
    default_message = "Request failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def public_message(self) -> str:
        """Message that is safe to show to the caller."""
        return self.message


class ValidationError(EngineError):
    """Input failed validation."""

    code = "validation_error"
    default_message = "Invalid input"


class ConflictError(EngineError):
    """Resource already exists or is in a conflicting state."""

    code = "conflict"
    default_message = "Resource already exists"

    def __init__(self, message: str | None = None, suggestions: list[str] | None = None):
        super().__init__(message)
        self.suggestions = suggestions or []


class AuthorizationError(EngineError):
    """Principal does not hold the required role."""

    code = "forbidden"
    default_message = "You do not have permission to perform this action"


class NotFoundError(EngineError):
    """Resource does not exist or is not visible to the principal."""

    code = "not_found"
    default_message = "Not found"


class ExternalSystemError(EngineError):
    """
    An external system call failed.

    The detailed message is kept for logs; callers only see a generic one.
    """

    code = "external_failure"
    retryable = True
    default_message = "An external service is unavailable. Please try again."

    @property
    def public_message(self) -> str:
        return self.default_message


class PartialProvisioningError(EngineError):
    """
    External resource was created but the local mirror write failed.

    The two systems are now out of step and cannot be repaired
    automatically. Carries the external id for operators.
    """

    code = "partial_provisioning"
    default_message = (
        "Organization setup did not complete. Please contact support before retrying."
    )

    def __init__(self, message: str | None = None, external_id: str = ""):
        super().__init__(message)
        self.external_id = external_id

    @property
    def public_message(self) -> str:
        return self.default_message
