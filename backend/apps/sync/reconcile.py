"""
Post-authentication reconciliation.

After a user signs in, their organization memberships are read from the
Identity Directory and mirrored locally:

- organizations unknown locally are created (slug from the directory alias,
  or a generated unique fallback)
- missing memberships are created with the default role
- a live pending invitation for a newly created membership is accepted

Each organization is handled in its own local transaction. Failures are
collected in the result and the loop moves on; reconcile_user never raises,
so a directory outage cannot block sign-in.
"""

from dataclasses import dataclass, field

from django.db import DatabaseError, IntegrityError, transaction

from apps.accounts.constants import DEFAULT_RECONCILED_ROLE
from apps.accounts.models import User
from apps.accounts.services import get_or_create_member
from apps.core.logging import get_logger
from apps.directory.client import DirectoryOrganization, get_directory_client
from apps.directory.exceptions import DirectoryError
from apps.invitations.services import accept_pending_invitation
from apps.organizations.exceptions import OrganizationNotFoundError
from apps.organizations.models import Organization
from apps.organizations.services import allocate_unique_slug
from apps.organizations.slugs import generate_slug
from apps.sync.models import SyncState
from apps.sync.services import record_sync_state

logger = get_logger(__name__)


@dataclass
class ReconcileResult:
    new_organizations: int = 0
    new_memberships: int = 0
    accepted_invitations: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.new_organizations or self.new_memberships or self.accepted_invitations)


def _plan_from_attributes(attributes: dict[str, list[str]]) -> str:
    values = attributes.get("subscription_plan") or []
    if values and values[0] in Organization.Plan.values:
        return values[0]
    return Organization.Plan.FREE


def ensure_local_organization(
    directory_org: DirectoryOrganization,
) -> tuple[Organization, bool]:
    """
    Get or create the local mirror of a directory organization.

    Returns the organization and whether it was created by this call.
    """
    existing = Organization.objects.filter(external_org_id=directory_org.id).first()
    if existing is not None:
        return existing, False

    slug = allocate_unique_slug(directory_org.alias, generate_slug(directory_org.name))

    try:
        with transaction.atomic():
            org = Organization.objects.create(
                name=(directory_org.name or "Unknown")[:255],
                slug=slug,
                external_org_id=directory_org.id,
                subscription_plan=_plan_from_attributes(directory_org.attributes),
            )
            record_sync_state(
                SyncState.EntityType.ORGANIZATION,
                org.pk,
                directory_org.id,
                SyncState.Status.SYNCED,
            )
    except IntegrityError:
        # Mirrored concurrently by another request
        existing = Organization.objects.filter(external_org_id=directory_org.id).first()
        if existing is None:
            raise
        return existing, False

    logger.info(
        "organization_mirrored",
        organization_id=org.pk,
        external_org_id=directory_org.id,
        slug=slug,
        alias=directory_org.alias,
    )
    return org, True


def sync_organization(external_org_id: str) -> Organization:
    """
    Mirror a single directory organization into the Local Store.

    Used by operators to adopt an organization orphaned by a failed
    provisioning.

    Raises:
        OrganizationNotFoundError: the directory has no such organization
        DirectoryError: the directory call failed
    """
    directory_org = get_directory_client().get_organization(external_org_id)
    if directory_org is None:
        raise OrganizationNotFoundError(
            f"Organization {external_org_id} not found in the Identity Directory"
        )
    org, _ = ensure_local_organization(directory_org)
    return org


def _record_failure(directory_org: DirectoryOrganization, error: str) -> None:
    """Mark the local organization as errored in the ledger, when one exists."""
    try:
        org = Organization.objects.filter(external_org_id=directory_org.id).first()
        if org is not None:
            record_sync_state(
                SyncState.EntityType.ORGANIZATION,
                org.pk,
                directory_org.id,
                SyncState.Status.ERROR,
                error=error,
            )
    except DatabaseError as e:
        logger.error(
            "reconcile_ledger_write_failed",
            external_org_id=directory_org.id,
            error=str(e),
        )


def reconcile_user(user_id: int, email: str) -> ReconcileResult:
    """
    Mirror a user's directory memberships into the Local Store.

    Idempotent: a second run with nothing new in the directory returns
    all-zero counts. Never raises.

    Args:
        user_id: Local user id
        email: User email, used to find the directory account
    """
    result = ReconcileResult()
    email = email.strip().lower()
    log = logger.bind(**{"usr.id": str(user_id), "usr.email": email})

    user = User.objects.filter(pk=user_id).first()
    if user is None:
        result.errors.append(f"Local user {user_id} not found")
        log.warning("reconcile_user_missing")
        return result

    directory = get_directory_client()

    try:
        directory_user = directory.get_user_by_email(email)
    except DirectoryError as e:
        result.errors.append(f"Directory user lookup failed: {e}")
        log.warning("reconcile_directory_user_lookup_failed", error=str(e))
        return result

    if directory_user is None:
        log.warning("reconcile_directory_user_not_found")
        return result

    try:
        directory_orgs = directory.list_user_organizations(directory_user.id)
    except DirectoryError as e:
        result.errors.append(f"Listing directory organizations failed: {e}")
        log.warning("reconcile_list_organizations_failed", error=str(e))
        return result

    try:
        record_sync_state(SyncState.EntityType.USER, user.pk, directory_user.id)
    except DatabaseError as e:
        result.errors.append(f"Recording user sync state failed: {e}")
        log.error("reconcile_user_ledger_failed", error=str(e))

    for directory_org in directory_orgs:
        if not directory_org.id:
            continue

        try:
            with transaction.atomic():
                org, org_created = ensure_local_organization(directory_org)
                member, member_created = get_or_create_member(
                    user, org, role=DEFAULT_RECONCILED_ROLE
                )
                invitation = None
                if member_created:
                    record_sync_state(
                        SyncState.EntityType.MEMBER,
                        member.pk,
                        directory_user.id,
                        SyncState.Status.SYNCED,
                    )
                    invitation = accept_pending_invitation(org, email)
        except Exception as e:
            # One bad organization must not stop the others
            message = f"Organization {directory_org.id}: {e}"
            result.errors.append(message)
            log.exception(
                "reconcile_organization_failed",
                external_org_id=directory_org.id,
            )
            _record_failure(directory_org, str(e))
            continue

        result.new_organizations += int(org_created)
        result.new_memberships += int(member_created)
        result.accepted_invitations += int(invitation is not None)

    log.info(
        "reconcile_completed",
        directory_organizations=len(directory_orgs),
        new_organizations=result.new_organizations,
        new_memberships=result.new_memberships,
        accepted_invitations=result.accepted_invitations,
        errors=len(result.errors),
    )
    return result
