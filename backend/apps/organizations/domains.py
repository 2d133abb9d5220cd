"""
Custom domain verification.

An owner adds a domain and receives a TXT record to publish. Verification
looks the record up and compares it with the stored token. The verified
state is mirrored to the Identity Directory on a best-effort basis.

State machine per organization:

    none --add--> pending(token) --verify--> verified
      ^                |                        |
      +-----remove-----+---------remove---------+
"""

import re
import secrets
import string
from dataclasses import dataclass, field
from datetime import datetime, timedelta

import dns.exception
import dns.resolver
from django.conf import settings
from django.db import transaction
from django.utils import timezone

from apps.accounts.models import Member, User
from apps.accounts.services import require_role
from apps.core.logging import get_logger
from apps.directory.client import get_directory_client
from apps.directory.exceptions import DirectoryError
from apps.organizations.exceptions import (
    DNSResolverError,
    DomainAlreadySetError,
    DomainRecordNotFoundError,
    DomainTokenExpiredError,
    InvalidDomainError,
    NoDomainError,
    OrganizationNotFoundError,
    TokenMismatchError,
)
from apps.organizations.models import Organization
from apps.sync.models import SyncState
from apps.sync.services import record_sync_state

logger = get_logger(__name__)

DOMAIN_PATTERN = re.compile(r"^[a-z0-9]+([\-.][a-z0-9]+)*\.[a-z]{2,}$", re.IGNORECASE)
MAX_DOMAIN_LENGTH = 253

TOKEN_ALPHABET = string.ascii_lowercase + string.digits
TOKEN_LENGTH = 32

OWNER_ONLY = (Member.Role.OWNER,)


@dataclass
class DomainInstructions:
    """What the owner must publish in DNS to prove control of the domain."""

    domain: str
    record: str
    type: str
    value: str
    expires_at: datetime | None = None
    instructions: list[str] = field(default_factory=list)


@dataclass
class VerifyResult:
    verified: bool
    domain: str
    verified_at: datetime | None
    already_verified: bool = False


def normalize_domain(domain: str) -> str:
    """Lowercase and validate a hostname."""
    domain = domain.strip().lower().rstrip(".")
    if not domain or len(domain) > MAX_DOMAIN_LENGTH or not DOMAIN_PATTERN.match(domain):
        raise InvalidDomainError()
    return domain


def generate_verification_token() -> str:
    return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(TOKEN_LENGTH))


def verification_record_name(domain: str) -> str:
    """DNS name where the TXT record must be published."""
    return f"_{settings.DOMAIN_VERIFICATION_PRODUCT}-verify.{domain}"


def get_verification_instructions(
    domain: str, token: str, expires_at: datetime | None = None
) -> DomainInstructions:
    record = verification_record_name(domain)
    return DomainInstructions(
        domain=domain,
        record=record,
        type="TXT",
        value=token,
        expires_at=expires_at,
        instructions=[
            "Go to your DNS provider's settings",
            f"Add a TXT record with name: {record}",
            f"Set the value to: {token}",
            "Wait for DNS propagation (usually 5-30 minutes)",
            "Click 'Verify' to complete verification",
        ],
    )


def resolve_txt_records(name: str) -> list[str]:
    """
    Look up TXT records for a name.

    Records split into several character-strings are joined back into one
    value before being returned.

    Raises:
        DomainRecordNotFoundError: name does not exist or has no TXT records
        DNSResolverError: timeouts, no reachable nameservers, other DNS failures
    """
    resolver = dns.resolver.Resolver()
    resolver.lifetime = settings.DNS_RESOLVER_TIMEOUT_SECONDS

    try:
        answer = resolver.resolve(name, "TXT")
    except (dns.resolver.NXDOMAIN, dns.resolver.NoAnswer) as e:
        logger.info("domain_txt_record_missing", record=name)
        raise DomainRecordNotFoundError() from e
    except dns.exception.DNSException as e:
        logger.warning("domain_dns_lookup_failed", record=name, error=str(e))
        raise DNSResolverError(str(e) or type(e).__name__) from e

    return [
        b"".join(rdata.strings).decode("utf-8", errors="replace")
        for rdata in answer
    ]


def check_domain_ownership(domain: str, token: str) -> None:
    """
    Confirm a TXT record at the verification name equals the token.

    Raises:
        DomainRecordNotFoundError, TokenMismatchError, DNSResolverError
    """
    records = resolve_txt_records(verification_record_name(domain))
    if not any(record.strip() == token for record in records):
        logger.info(
            "domain_token_mismatch",
            domain=domain,
            records_found=len(records),
        )
        raise TokenMismatchError()


def _mirror_domain_to_directory(org: Organization, *, verified: bool) -> None:
    """
    Push the domain state to the directory organization.

    Failures are logged and recorded as an error in the ledger, never
    raised: the local state is already committed.
    """
    if not org.external_org_id:
        logger.warning("domain_mirror_skipped_unlinked", organization_id=org.pk)
        return

    try:
        directory = get_directory_client()
        directory_org = directory.get_organization(org.external_org_id)
        if directory_org is None:
            raise DirectoryError(
                f"Organization {org.external_org_id} not found",
                operation="get_organization",
                status_code=404,
            )

        if verified:
            directory_org.domains = [{"name": org.custom_domain, "verified": True}]
            directory_org.attributes.update(
                {
                    "custom_domain": [org.custom_domain],
                    "domain_verified": ["true"],
                    "domain_verified_at": [org.domain_verified_at.isoformat()],
                }
            )
        else:
            directory_org.domains = []
            directory_org.attributes.update(
                {
                    "custom_domain": [],
                    "domain_verified": ["false"],
                }
            )
            directory_org.attributes.pop("domain_verified_at", None)

        directory.update_organization(directory_org)
    except DirectoryError as e:
        logger.error(
            "domain_directory_mirror_failed",
            organization_id=org.pk,
            external_org_id=org.external_org_id,
            verified=verified,
            error=str(e),
        )
        record_sync_state(
            SyncState.EntityType.ORGANIZATION,
            org.pk,
            org.external_org_id,
            SyncState.Status.ERROR,
            error=f"domain mirror failed: {e}",
        )
        return

    record_sync_state(
        SyncState.EntityType.ORGANIZATION,
        org.pk,
        org.external_org_id,
        SyncState.Status.SYNCED,
    )


def add_domain(principal: User, organization_id: int, domain: str) -> DomainInstructions:
    """
    Start verification of a custom domain for an organization.

    Raises:
        InvalidDomainError: not a valid hostname
        OrganizationNotFoundError: no such organization or not a member
        PermissionDeniedError: principal is not the owner
        DomainAlreadySetError: a domain is already configured
    """
    domain = normalize_domain(domain)
    require_role(
        principal,
        organization_id,
        roles=OWNER_ONLY,
        denied_message="Only organization owners can manage custom domains",
    )

    token = generate_verification_token()
    expires_at = timezone.now() + timedelta(days=settings.DOMAIN_VERIFICATION_TOKEN_TTL_DAYS)

    with transaction.atomic():
        org = Organization.objects.select_for_update().filter(pk=organization_id).first()
        if org is None:
            raise OrganizationNotFoundError()
        if org.custom_domain:
            raise DomainAlreadySetError()

        org.custom_domain = domain
        org.domain_verified = False
        org.domain_verification_token = token
        org.domain_token_expires_at = expires_at
        org.domain_verified_at = None
        org.save(
            update_fields=[
                "custom_domain",
                "domain_verified",
                "domain_verification_token",
                "domain_token_expires_at",
                "domain_verified_at",
                "updated_at",
            ]
        )

    logger.info(
        "domain_added",
        organization_id=org.pk,
        domain=domain,
        token_expires_at=expires_at.isoformat(),
    )
    return get_verification_instructions(domain, token, expires_at)


def verify_domain(principal: User, organization_id: int) -> VerifyResult:
    """
    Verify the organization's pending custom domain via DNS.

    Already verified domains return immediately without a DNS lookup.

    Raises:
        OrganizationNotFoundError, PermissionDeniedError
        NoDomainError: no custom domain configured
        DomainTokenExpiredError: token missing or past its expiry
        DomainRecordNotFoundError, TokenMismatchError, DNSResolverError
    """
    membership = require_role(
        principal,
        organization_id,
        roles=OWNER_ONLY,
        denied_message="Only organization owners can manage custom domains",
    )
    org = membership.organization

    if not org.custom_domain:
        raise NoDomainError()

    if org.domain_verified:
        return VerifyResult(
            verified=True,
            domain=org.custom_domain,
            verified_at=org.domain_verified_at,
            already_verified=True,
        )

    if not org.has_live_domain_token:
        raise DomainTokenExpiredError()

    domain = org.custom_domain
    token = org.domain_verification_token
    check_domain_ownership(domain, token)

    verified_at = timezone.now()
    # Only flip the domain we checked; a concurrent remove wins
    updated = Organization.objects.filter(
        pk=org.pk,
        custom_domain=domain,
        domain_verification_token=token,
    ).update(domain_verified=True, domain_verified_at=verified_at, updated_at=verified_at)
    if not updated:
        raise NoDomainError("Custom domain changed during verification")

    org.domain_verified = True
    org.domain_verified_at = verified_at
    logger.info("domain_verified", organization_id=org.pk, domain=domain)

    _mirror_domain_to_directory(org, verified=True)

    return VerifyResult(verified=True, domain=domain, verified_at=verified_at)


def remove_domain(principal: User, organization_id: int) -> None:
    """
    Remove the custom domain and any verification state.

    Raises:
        OrganizationNotFoundError, PermissionDeniedError
    """
    membership = require_role(
        principal,
        organization_id,
        roles=OWNER_ONLY,
        denied_message="Only organization owners can manage custom domains",
    )
    org = membership.organization
    previous = org.custom_domain

    if previous:
        _mirror_domain_to_directory(org, verified=False)

    org.custom_domain = None
    org.domain_verified = False
    org.domain_verification_token = ""
    org.domain_token_expires_at = None
    org.domain_verified_at = None
    org.save(
        update_fields=[
            "custom_domain",
            "domain_verified",
            "domain_verification_token",
            "domain_token_expires_at",
            "domain_verified_at",
            "updated_at",
        ]
    )

    logger.info("domain_removed", organization_id=org.pk, domain=previous)
