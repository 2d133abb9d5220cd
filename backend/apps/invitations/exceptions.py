"""
Exceptions for invitations app.
"""

from apps.core.exceptions import ConflictError, NotFoundError, ValidationError


class InvalidEmailError(ValidationError):
    """Invitee email is not a valid address."""

    code = "invalid_email"
    default_message = "Invalid email address"


class InvalidRoleError(ValidationError):
    """Requested role is not owner, admin or member."""

    code = "invalid_role"
    default_message = "Invalid role"


class AlreadyMemberError(ConflictError):
    """Invitee already belongs to the organization."""

    code = "already_member"
    default_message = "User is already a member of this organization"


class AlreadyInvitedError(ConflictError):
    """A live pending invitation exists for this email."""

    code = "already_invited"
    default_message = "User already has a pending invitation"


class InvitationNotFoundError(NotFoundError):
    """Invitation does not exist or belongs to another organization."""

    code = "invitation_not_found"
    default_message = "Invitation not found"


class InvitationNotPendingError(ConflictError):
    """Invitation is accepted, cancelled or expired."""

    code = "invitation_not_pending"
    default_message = "Only pending invitations can be cancelled"
