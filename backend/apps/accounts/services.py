"""
Accounts services - local user and membership bookkeeping.

Membership lookups double as the authorization check for every
organization operation: non-members get OrganizationNotFoundError so the
existence of an organization is not leaked to outsiders.
"""

from collections.abc import Iterable

from django.db import IntegrityError, transaction

from apps.accounts.exceptions import PermissionDeniedError
from apps.accounts.models import Member, User
from apps.organizations.exceptions import OrganizationNotFoundError
from apps.organizations.models import Organization


def get_or_create_user(email: str, name: str = "") -> User:
    """
    Get or create a local User by email.

    Email is the cross-system identifier. Called when a login or
    reconciliation needs a local user row.
    """
    email = email.strip().lower()
    user = User.objects.filter(email=email).first()
    if user is not None:
        if name and user.name != name:
            user.name = name
            user.save(update_fields=["name", "updated_at"])
        return user

    try:
        with transaction.atomic():
            return User.objects.create_user(email=email, name=name)
    except IntegrityError:
        # Concurrent insert won the race, fetch the winner
        return User.objects.get(email=email)


def get_or_create_member(
    user: User,
    organization: Organization,
    role: str = Member.Role.MEMBER,
) -> tuple[Member, bool]:
    """
    Ensure a membership row exists for (organization, user).

    Never changes the role of an existing membership. Returns the member
    and whether it was created by this call.
    """
    existing = Member.objects.filter(organization=organization, user=user).first()
    if existing is not None:
        return existing, False

    try:
        with transaction.atomic():
            return Member.objects.create(user=user, organization=organization, role=role), True
    except IntegrityError:
        # Concurrent insert won the race, fetch the winner
        return Member.objects.get(organization=organization, user=user), False


def get_membership(user: User, organization_id: int) -> Member | None:
    """Return the user's membership in an organization, if any."""
    return (
        Member.objects.select_related("organization")
        .filter(organization_id=organization_id, user=user)
        .first()
    )


def require_role(
    user: User,
    organization_id: int,
    roles: Iterable[str] | None = None,
    denied_message: str | None = None,
) -> Member:
    """
    Load the principal's membership and check its role.

    Args:
        user: Acting principal
        organization_id: Local organization id
        roles: Accepted roles; None accepts any membership
        denied_message: Message for PermissionDeniedError

    Raises:
        OrganizationNotFoundError: organization missing or principal not a member
        PermissionDeniedError: principal is a member without an accepted role
    """
    member = get_membership(user, organization_id)
    if member is None:
        raise OrganizationNotFoundError()

    if roles is not None and member.role not in set(roles):
        raise PermissionDeniedError(denied_message)

    return member


def is_member_email(organization: Organization, email: str) -> bool:
    """Check whether a user with this email already belongs to the organization."""
    return Member.objects.filter(
        organization=organization,
        user__email__iexact=email.strip(),
    ).exists()
