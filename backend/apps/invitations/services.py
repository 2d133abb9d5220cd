"""
Invitation services.

The Identity Directory delivers invitation emails and adds the user to the
organization once they register. Locally we only track the invitation so
that reconciliation can mark it accepted.

Expiry is evaluated at read time: a pending row past expires_at is treated
as expired everywhere. Stale rows are swept to status=expired lazily when
an operation touches them, or eagerly by the expire_invitations command.
"""

from dataclasses import dataclass
from datetime import timedelta

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email
from django.db import IntegrityError, transaction
from django.db.models import Q, QuerySet
from django.utils import timezone

from apps.accounts.constants import MANAGER_ROLES, VALID_ROLES
from apps.accounts.exceptions import PermissionDeniedError
from apps.accounts.models import Member, User
from apps.accounts.services import get_membership, is_member_email, require_role
from apps.core.exceptions import ValidationError
from apps.core.logging import get_logger
from apps.directory.client import get_directory_client
from apps.directory.exceptions import DirectoryError
from apps.invitations.exceptions import (
    AlreadyInvitedError,
    AlreadyMemberError,
    InvalidEmailError,
    InvalidRoleError,
    InvitationNotFoundError,
    InvitationNotPendingError,
)
from apps.invitations.models import Invitation
from apps.organizations.exceptions import OrganizationNotLinkedError
from apps.organizations.models import Organization

logger = get_logger(__name__)

CANCEL_LOCAL_ONLY_MESSAGE = (
    "Invitation cancelled. The invitation email already sent by the identity "
    "provider cannot be revoked and its link stays usable until it expires."
)


@dataclass
class CancelResult:
    """Outcome of cancel_invitation."""

    invitation: Invitation
    external_revoked: bool
    message: str


def normalize_email(email: str) -> str:
    """Lowercase and validate an email address."""
    email = email.strip().lower()
    try:
        validate_email(email)
    except DjangoValidationError as e:
        raise InvalidEmailError() from e
    return email


def stale_invitations(
    organization: Organization | None = None,
    email: str | None = None,
) -> QuerySet[Invitation]:
    """Pending invitations whose expiry has passed."""
    qs = Invitation.objects.filter(
        status=Invitation.Status.PENDING,
        expires_at__lte=timezone.now(),
    )
    if organization is not None:
        qs = qs.filter(organization=organization)
    if email is not None:
        qs = qs.filter(email=email)
    return qs


def expire_stale_invitations(
    organization: Organization | None = None,
    email: str | None = None,
) -> int:
    """Mark stale pending invitations as expired. Returns the number swept."""
    now = timezone.now()
    count = stale_invitations(organization, email).update(
        status=Invitation.Status.EXPIRED,
        updated_at=now,
    )
    if count:
        logger.info(
            "invitations_expired",
            count=count,
            organization_id=organization.pk if organization else None,
        )
    return count


def invite_member(
    principal: User,
    organization_id: int,
    email: str,
    role: str = Member.Role.MEMBER,
    first_name: str = "",
    last_name: str = "",
) -> Invitation:
    """
    Invite an email address into an organization.

    The directory invitation is sent first; if it fails no local row is
    written.

    Raises:
        InvalidEmailError, InvalidRoleError
        OrganizationNotFoundError: organization missing or principal not a member
        PermissionDeniedError: principal is not owner or admin
        AlreadyMemberError: local member, or the directory reports an existing member
        AlreadyInvitedError
        OrganizationNotLinkedError: organization has no directory id
        DirectoryError: the directory rejected or failed the invite
    """
    email = normalize_email(email)
    if role not in VALID_ROLES:
        raise InvalidRoleError(f"Invalid role: {role}")

    membership = require_role(
        principal,
        organization_id,
        roles=MANAGER_ROLES,
        denied_message="Only owners and admins can invite members",
    )
    org = membership.organization

    if is_member_email(org, email):
        raise AlreadyMemberError()

    # A stale pending row must not block a fresh invitation
    expire_stale_invitations(organization=org, email=email)
    if Invitation.objects.filter(
        organization=org,
        email=email,
        status=Invitation.Status.PENDING,
    ).exists():
        raise AlreadyInvitedError()

    if not org.external_org_id:
        raise OrganizationNotLinkedError(
            f"Organization {org.pk} is not linked to the Identity Directory"
        )

    try:
        get_directory_client().invite_user(
            org.external_org_id,
            email,
            first_name=first_name,
            last_name=last_name,
        )
    except DirectoryError as e:
        if e.status_code == 409:
            # Directory member not yet mirrored locally
            logger.info("invitation_directory_member_exists", organization_id=org.pk, email=email)
            raise AlreadyMemberError() from e
        raise

    try:
        with transaction.atomic():
            invitation = Invitation.objects.create(
                organization=org,
                email=email,
                role=role,
                inviter=principal,
                expires_at=timezone.now() + timedelta(days=settings.INVITATION_EXPIRY_DAYS),
            )
    except IntegrityError as e:
        # Concurrent invite for the same email committed first
        logger.info(
            "invitation_insert_conflict",
            organization_id=org.pk,
            email=email,
        )
        raise AlreadyInvitedError() from e

    logger.info(
        "invitation_created",
        invitation_id=invitation.pk,
        organization_id=org.pk,
        email=email,
        role=role,
        **{"usr.id": str(principal.pk)},
    )
    return invitation


def cancel_invitation(principal: User, invitation_id: int) -> CancelResult:
    """
    Cancel a pending invitation.

    Cancellation is local only: the directory offers no way to revoke an
    invitation it already sent.

    Raises:
        InvitationNotFoundError: missing, or principal not in its organization
        PermissionDeniedError: principal is not owner or admin
        InvitationNotPendingError: accepted, cancelled or expired
    """
    invitation = (
        Invitation.objects.select_related("organization")
        .filter(pk=invitation_id)
        .first()
    )
    if invitation is None:
        raise InvitationNotFoundError()

    membership = get_membership(principal, invitation.organization_id)
    if membership is None:
        raise InvitationNotFoundError()
    if membership.role not in MANAGER_ROLES:
        raise PermissionDeniedError("Only owners and admins can cancel invitations")

    if invitation.is_expired:
        Invitation.objects.filter(
            pk=invitation.pk,
            status=Invitation.Status.PENDING,
        ).update(status=Invitation.Status.EXPIRED, updated_at=timezone.now())
        raise InvitationNotPendingError("Invitation has expired")

    if invitation.status != Invitation.Status.PENDING:
        raise InvitationNotPendingError(f"Invitation is already {invitation.status}")

    now = timezone.now()
    updated = Invitation.objects.filter(
        pk=invitation.pk,
        status=Invitation.Status.PENDING,
    ).update(status=Invitation.Status.CANCELLED, updated_at=now)
    if not updated:
        # Accepted or cancelled between our read and write
        invitation.refresh_from_db(fields=["status"])
        raise InvitationNotPendingError(f"Invitation is already {invitation.status}")

    invitation.status = Invitation.Status.CANCELLED
    invitation.updated_at = now

    logger.info(
        "invitation_cancelled",
        invitation_id=invitation.pk,
        organization_id=invitation.organization_id,
        external_revoked=False,
        **{"usr.id": str(principal.pk)},
    )
    return CancelResult(
        invitation=invitation,
        external_revoked=False,
        message=CANCEL_LOCAL_ONLY_MESSAGE,
    )


def list_invitations(
    principal: User,
    organization_id: int,
    status: str | None = None,
) -> list[Invitation]:
    """
    List an organization's invitations, newest first.

    Any member may list. Pending rows past their expiry are filtered and
    reported as expired.
    """
    require_role(principal, organization_id)

    if status is not None and status not in Invitation.Status.values:
        raise ValidationError(f"Unknown invitation status: {status}")

    now = timezone.now()
    qs = Invitation.objects.filter(organization_id=organization_id).select_related("inviter")

    if status == Invitation.Status.PENDING:
        qs = qs.filter(status=Invitation.Status.PENDING, expires_at__gt=now)
    elif status == Invitation.Status.EXPIRED:
        qs = qs.filter(
            Q(status=Invitation.Status.EXPIRED)
            | Q(status=Invitation.Status.PENDING, expires_at__lte=now)
        )
    elif status is not None:
        qs = qs.filter(status=status)

    return list(qs.order_by("-created_at"))


def accept_pending_invitation(organization: Organization, email: str) -> Invitation | None:
    """
    Mark the live pending invitation for this email as accepted.

    Called by reconciliation when a membership first appears locally.
    Returns the accepted invitation, or None when there was none.
    """
    now = timezone.now()
    invitation = (
        Invitation.objects.filter(
            organization=organization,
            email=email.strip().lower(),
            status=Invitation.Status.PENDING,
            expires_at__gt=now,
        )
        .order_by("-created_at")
        .first()
    )
    if invitation is None:
        return None

    updated = Invitation.objects.filter(
        pk=invitation.pk,
        status=Invitation.Status.PENDING,
    ).update(status=Invitation.Status.ACCEPTED, accepted_at=now, updated_at=now)
    if not updated:
        return None

    invitation.status = Invitation.Status.ACCEPTED
    invitation.accepted_at = now
    logger.info(
        "invitation_accepted",
        invitation_id=invitation.pk,
        organization_id=organization.pk,
        email=invitation.email,
    )
    return invitation
