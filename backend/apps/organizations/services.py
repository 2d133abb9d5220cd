"""
Organization provisioning across the Identity Directory and the Local Store.

The directory is the system of record, so it is written first and the
local rows mirror it. Steps run in strict order:

1. validate the slug                        -> InvalidSlugError
2. check slug uniqueness locally            -> SlugTakenError
3. check slug uniqueness in the directory   -> SlugTakenError
4. create the directory organization        (irreversible)
5. add the creator as a directory member
6. insert the local organization + ledger row
7. insert the local owner membership + ledger row

Steps 1-3 reject without side effects. Anything failing after step 4
leaves an orphaned directory organization: it is logged at critical level
with the external id and raised as PartialProvisioningError. There is no
automatic rollback or retry.

External calls are never made inside a database transaction.
"""

import secrets
from dataclasses import dataclass, field
from datetime import UTC, datetime

from django.db import DatabaseError, IntegrityError, transaction

from apps.accounts.models import Member, User
from apps.core.exceptions import PartialProvisioningError
from apps.core.logging import get_logger
from apps.directory.client import DirectoryUser, get_directory_client
from apps.directory.exceptions import DirectoryError
from apps.organizations.exceptions import (
    InvalidOrganizationNameError,
    InvalidSlugError,
    SlugTakenError,
)
from apps.organizations.models import Organization
from apps.organizations.slugs import generate_slug_suggestions, validate_slug
from apps.sync.models import SyncState
from apps.sync.services import record_sync_state

logger = get_logger(__name__)

MAX_NAME_LENGTH = 255


@dataclass
class SlugAvailability:
    """Result of check_slug."""

    slug: str
    available: bool
    error: str | None = None
    suggestions: list[str] = field(default_factory=list)


def slug_taken_locally(slug: str) -> bool:
    """Check whether any local organization already uses this slug."""
    return Organization.objects.filter(slug=slug).exists()


def check_slug(slug: str) -> SlugAvailability:
    """
    Check if a slug can be used for a new organization.

    Only the Local Store is consulted; create_organization repeats the
    check against the directory before creating anything.
    """
    validation = validate_slug(slug)
    if not validation.valid:
        return SlugAvailability(
            slug=slug,
            available=False,
            error=validation.error,
            suggestions=generate_slug_suggestions(slug),
        )

    if slug_taken_locally(slug):
        return SlugAvailability(
            slug=slug,
            available=False,
            error=f"Slug '{slug}' is already taken",
            suggestions=generate_slug_suggestions(slug),
        )

    return SlugAvailability(slug=slug, available=True)


def allocate_unique_slug(*preferred: str) -> str:
    """
    Pick a free, valid slug for an organization that already exists elsewhere.

    Tries each preferred base and then its numbered suggestions. Falls back
    to a random slug when every candidate is invalid or taken.
    """
    for base in preferred:
        base = (base or "").strip().lower()
        if not base:
            continue
        for candidate in [base, *generate_slug_suggestions(base, count=5)]:
            if validate_slug(candidate).valid and not slug_taken_locally(candidate):
                return candidate
    return f"org-{secrets.token_hex(4)}"


def _slug_taken(slug: str) -> SlugTakenError:
    return SlugTakenError(
        f"Organization slug '{slug}' is already taken",
        suggestions=generate_slug_suggestions(slug),
    )


def _initial_attributes(principal: User, slug: str) -> dict[str, list[str]]:
    """Directory attributes mirroring locally owned fields."""
    return {
        "slug": [slug],
        "created_by": [str(principal.pk)],
        "created_at": [datetime.now(UTC).isoformat()],
        "custom_domain": [],
        "domain_verified": ["false"],
        "subscription_plan": [Organization.Plan.FREE.value],
    }


def _orphaned(
    message: str,
    external_org_id: str,
    principal: User,
    slug: str,
    step: str,
) -> PartialProvisioningError:
    """Log an orphaned directory organization and build the caller-facing error."""
    logger.critical(
        "organization_provision_orphaned",
        external_org_id=external_org_id,
        slug=slug,
        step=step,
        error=message,
        **{"usr.id": str(principal.pk), "usr.email": principal.email},
    )
    return PartialProvisioningError(message, external_id=external_org_id)


def create_organization(principal: User, name: str, slug: str) -> Organization:
    """
    Provision a new organization owned by the principal.

    Args:
        principal: Acting user, becomes the owner
        name: Display name
        slug: Requested slug

    Returns:
        The local Organization with external_org_id set

    Raises:
        InvalidOrganizationNameError: name empty or too long
        InvalidSlugError: slug fails validation
        SlugTakenError: slug used locally, in the directory, or lost a race
            (including a directory create rejected with 409)
        DirectoryError: directory unavailable before anything was created
        PartialProvisioningError: directory organization created but setup incomplete
    """
    name = name.strip()
    if not name or len(name) > MAX_NAME_LENGTH:
        raise InvalidOrganizationNameError(
            None if not name else f"Organization name must be at most {MAX_NAME_LENGTH} characters"
        )

    # 1. Format and reserved words
    validation = validate_slug(slug)
    if not validation.valid:
        raise InvalidSlugError(validation.error)

    # 2. Local uniqueness
    if slug_taken_locally(slug):
        logger.info("organization_slug_taken", slug=slug, source="local")
        raise _slug_taken(slug)

    # 3. Directory uniqueness - the directory may know slugs we don't
    directory = get_directory_client()
    if directory.search_organizations_by_alias(slug):
        logger.info("organization_slug_taken", slug=slug, source="directory")
        raise _slug_taken(slug)

    # 4. Directory create - from here on failures orphan the external org
    try:
        external_org_id = directory.create_organization(
            name=name,
            alias=slug,
            attributes=_initial_attributes(principal, slug),
        )
    except DirectoryError as e:
        if e.status_code == 409:
            # Another create claimed the alias after our search
            logger.info("organization_slug_taken", slug=slug, source="directory_create")
            raise _slug_taken(slug) from e
        logger.error("organization_directory_create_failed", slug=slug, name=name)
        raise

    logger.info("directory_organization_created", external_org_id=external_org_id, slug=slug)

    # 5. Directory membership for the creator
    try:
        directory_user: DirectoryUser | None = directory.get_user_by_email(principal.email)
        if directory_user is None:
            raise _orphaned(
                f"User {principal.email} not found in the Identity Directory",
                external_org_id,
                principal,
                slug,
                step="resolve_user",
            )
        directory.add_member(external_org_id, directory_user.id)
    except DirectoryError as e:
        raise _orphaned(str(e), external_org_id, principal, slug, step="add_member") from e

    # 6 + 7. Local mirror in one local transaction
    try:
        with transaction.atomic():
            org = Organization.objects.create(
                name=name,
                slug=slug,
                external_org_id=external_org_id,
                created_by=principal,
                subscription_plan=Organization.Plan.FREE,
            )
            record_sync_state(
                SyncState.EntityType.ORGANIZATION,
                org.pk,
                external_org_id,
                SyncState.Status.SYNCED,
            )

            member = Member.objects.create(
                user=principal,
                organization=org,
                role=Member.Role.OWNER,
            )
            record_sync_state(
                SyncState.EntityType.MEMBER,
                member.pk,
                directory_user.id,
                SyncState.Status.SYNCED,
            )
    except IntegrityError as e:
        if slug_taken_locally(slug):
            # Lost a race with a concurrent create for the same slug
            logger.error(
                "organization_provision_slug_race_lost",
                external_org_id=external_org_id,
                slug=slug,
                **{"usr.id": str(principal.pk), "usr.email": principal.email},
            )
            raise _slug_taken(slug) from e
        raise _orphaned(str(e), external_org_id, principal, slug, step="local_insert") from e
    except DatabaseError as e:
        raise _orphaned(str(e), external_org_id, principal, slug, step="local_insert") from e

    logger.info(
        "organization_provisioned",
        organization_id=org.pk,
        external_org_id=external_org_id,
        slug=slug,
        owner_member_id=member.pk,
    )
    return org
