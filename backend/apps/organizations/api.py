"""
Organization API endpoints.

Provisioning, slug checks, custom domains and invitations scoped to an
organization. Services raise typed errors; config/api.py turns them into
responses, so endpoints stay thin.
"""

from django.http import HttpRequest
from ninja import Router

from apps.core.schemas import ErrorResponse, MessageResponse
from apps.core.security import PrincipalAuth, get_principal
from apps.invitations import services as invitation_services
from apps.invitations.schemas import InvitationListResponse, InvitationResponse
from apps.organizations import domains
from apps.organizations.models import Organization
from apps.organizations.schemas import (
    AddDomainRequest,
    CreateOrganizationRequest,
    DomainInstructionsResponse,
    InviteMemberRequest,
    OrganizationResponse,
    SlugCheckResponse,
    VerifyDomainResponse,
)
from apps.organizations.services import check_slug, create_organization

router = Router(tags=["organizations"])
principal_auth = PrincipalAuth()


def _organization_response(org: Organization) -> OrganizationResponse:
    return OrganizationResponse(
        id=org.pk,
        name=org.name,
        slug=org.slug,
        external_org_id=org.external_org_id,
        subscription_plan=org.subscription_plan,
        custom_domain=org.custom_domain,
        domain_verified=org.domain_verified,
        created_at=org.created_at,
    )


@router.post(
    "/",
    response={
        201: OrganizationResponse,
        400: ErrorResponse,
        401: ErrorResponse,
        409: ErrorResponse,
        500: ErrorResponse,
        502: ErrorResponse,
    },
    auth=principal_auth,
    operation_id="createOrganization",
    summary="Provision a new organization",
)
def create_organization_endpoint(
    request: HttpRequest, payload: CreateOrganizationRequest
) -> tuple[int, OrganizationResponse]:
    """
    Create the organization in the identity provider, then locally.

    The caller becomes its owner. A 409 carries alternative slugs.
    """
    principal = get_principal(request)
    org = create_organization(principal, payload.name, payload.slug)
    return 201, _organization_response(org)


@router.get(
    "/check-slug",
    response={200: SlugCheckResponse},
    operation_id="checkSlug",
    summary="Check slug availability",
)
def check_slug_endpoint(request: HttpRequest, slug: str) -> SlugCheckResponse:
    """Check whether a slug is valid and unused. Public."""
    result = check_slug(slug)
    return SlugCheckResponse(
        slug=result.slug,
        available=result.available,
        error=result.error,
        suggestions=result.suggestions,
    )


# --- Invitations ---


@router.post(
    "/{organization_id}/invitations",
    response={
        201: InvitationResponse,
        400: ErrorResponse,
        401: ErrorResponse,
        403: ErrorResponse,
        404: ErrorResponse,
        409: ErrorResponse,
        502: ErrorResponse,
    },
    auth=principal_auth,
    operation_id="inviteMember",
    summary="Invite a member",
)
def invite_member_endpoint(
    request: HttpRequest, organization_id: int, payload: InviteMemberRequest
) -> tuple[int, InvitationResponse]:
    """Send an invitation through the identity provider. Owners and admins only."""
    principal = get_principal(request)
    invitation = invitation_services.invite_member(
        principal,
        organization_id,
        email=payload.email,
        role=payload.role,
        first_name=payload.first_name,
        last_name=payload.last_name,
    )
    return 201, InvitationResponse.from_model(invitation)


@router.get(
    "/{organization_id}/invitations",
    response={200: InvitationListResponse, 400: ErrorResponse, 401: ErrorResponse, 404: ErrorResponse},
    auth=principal_auth,
    operation_id="listInvitations",
    summary="List invitations",
)
def list_invitations_endpoint(
    request: HttpRequest, organization_id: int, status: str | None = None
) -> InvitationListResponse:
    """List the organization's invitations, optionally filtered by status."""
    principal = get_principal(request)
    invitations = invitation_services.list_invitations(principal, organization_id, status=status)
    return InvitationListResponse(
        invitations=[InvitationResponse.from_model(inv) for inv in invitations]
    )


# --- Custom domain ---


@router.post(
    "/{organization_id}/domain",
    response={
        200: DomainInstructionsResponse,
        400: ErrorResponse,
        401: ErrorResponse,
        403: ErrorResponse,
        404: ErrorResponse,
        409: ErrorResponse,
    },
    auth=principal_auth,
    operation_id="addDomain",
    summary="Add a custom domain",
)
def add_domain_endpoint(
    request: HttpRequest, organization_id: int, payload: AddDomainRequest
) -> DomainInstructionsResponse:
    """Store the domain as pending and return the TXT record to publish."""
    principal = get_principal(request)
    result = domains.add_domain(principal, organization_id, payload.domain)
    return DomainInstructionsResponse(
        domain=result.domain,
        record=result.record,
        type=result.type,
        value=result.value,
        expires_at=result.expires_at,
        instructions=result.instructions,
    )


@router.post(
    "/{organization_id}/domain/verify",
    response={
        200: VerifyDomainResponse,
        400: ErrorResponse,
        401: ErrorResponse,
        403: ErrorResponse,
        404: ErrorResponse,
        422: ErrorResponse,
        503: ErrorResponse,
    },
    auth=principal_auth,
    operation_id="verifyDomain",
    summary="Verify the custom domain",
)
def verify_domain_endpoint(request: HttpRequest, organization_id: int) -> VerifyDomainResponse:
    """
    Check DNS for the verification record.

    422 and 503 responses are retryable: DNS changes take time to propagate.
    """
    principal = get_principal(request)
    result = domains.verify_domain(principal, organization_id)
    return VerifyDomainResponse(
        verified=result.verified,
        domain=result.domain,
        verified_at=result.verified_at,
        already_verified=result.already_verified,
    )


@router.delete(
    "/{organization_id}/domain",
    response={200: MessageResponse, 401: ErrorResponse, 403: ErrorResponse, 404: ErrorResponse},
    auth=principal_auth,
    operation_id="removeDomain",
    summary="Remove the custom domain",
)
def remove_domain_endpoint(request: HttpRequest, organization_id: int) -> MessageResponse:
    principal = get_principal(request)
    domains.remove_domain(principal, organization_id)
    return MessageResponse(message="Custom domain removed")
