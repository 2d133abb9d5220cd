"""
Exceptions for organization provisioning and custom domains.
"""

from apps.core.exceptions import (
    ConflictError,
    ExternalSystemError,
    NotFoundError,
    ValidationError,
)


class OrganizationNotFoundError(NotFoundError):
    """Organization does not exist or the principal is not a member."""

    code = "organization_not_found"
    default_message = "Organization not found"


class InvalidOrganizationNameError(ValidationError):
    """Organization name is empty or too long."""

    code = "invalid_name"
    default_message = "Organization name is required"


class InvalidSlugError(ValidationError):
    """Slug failed format, length or reserved-word validation."""

    code = "invalid_slug"


class SlugTakenError(ConflictError):
    """Slug already used locally or in the Identity Directory."""

    code = "slug_taken"


class OrganizationNotLinkedError(ExternalSystemError):
    """Organization has no Identity Directory id (provisioning never completed)."""

    code = "organization_not_linked"
    retryable = False


# --- Custom domains ---


class InvalidDomainError(ValidationError):
    """Domain is not a valid hostname."""

    code = "invalid_domain"
    default_message = "Invalid domain format"


class DomainAlreadySetError(ConflictError):
    """Organization already has a custom domain."""

    code = "domain_already_set"
    default_message = "Organization already has a custom domain. Remove it first."


class NoDomainError(ValidationError):
    """Organization has no custom domain to verify."""

    code = "no_domain"
    default_message = "No custom domain configured"


class DomainTokenExpiredError(ValidationError):
    """Verification token missing or expired; the domain must be added again."""

    code = "domain_token_expired"
    default_message = "Verification token expired. Remove the domain and add it again."


class DomainVerificationError(ValidationError):
    """DNS check did not confirm ownership. Callers may retry later."""

    code = "domain_verification_failed"
    retryable = True


class DomainRecordNotFoundError(DomainVerificationError):
    """No TXT record exists at the verification name."""

    code = "dns_record_not_found"
    default_message = (
        "DNS record not found. Please ensure you have created the TXT record "
        "and allow time for propagation."
    )


class TokenMismatchError(DomainVerificationError):
    """TXT records exist but none matches the verification token."""

    code = "token_mismatch"
    default_message = "Verification token not found in DNS TXT records"


class DNSResolverError(ExternalSystemError):
    """The resolver failed (timeout, no nameservers, malformed answer)."""

    code = "dns_error"
    default_message = "DNS lookup failed. Please try again."
