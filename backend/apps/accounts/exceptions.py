"""Membership and authorization exceptions."""

from apps.core.exceptions import AuthorizationError


class PermissionDeniedError(AuthorizationError):
    """Principal is a member but lacks the required role."""

    code = "permission_denied"
