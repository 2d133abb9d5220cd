"""
Organization API schemas - Pydantic models for request/response.
"""

from datetime import datetime

from pydantic import BaseModel, Field

# --- Request Schemas ---


class CreateOrganizationRequest(BaseModel):
    """Request to provision a new organization."""

    name: str = Field(
        ...,
        description="Display name for the new organization",
        examples=["Acme Corp"],
    )
    slug: str = Field(
        ...,
        description="URL-safe identifier (lowercase letters, digits, single hyphens)",
        examples=["acme-corp"],
    )


class AddDomainRequest(BaseModel):
    """Request to start custom domain verification."""

    domain: str = Field(
        ...,
        description="Hostname the organization wants to use",
        examples=["acme.com"],
    )


class InviteMemberRequest(BaseModel):
    """Request to invite someone into an organization."""

    # Plain str: format errors are reported as invalid_email, not schema errors
    email: str = Field(..., description="Invitee email address", examples=["new@acme.com"])
    role: str = Field("member", description="owner, admin or member", examples=["member"])
    first_name: str = Field("", description="Optional first name for the invitation email")
    last_name: str = Field("", description="Optional last name for the invitation email")


# --- Response Schemas ---


class OrganizationResponse(BaseModel):
    """A provisioned organization."""

    id: int
    name: str
    slug: str
    external_org_id: str | None = Field(None, description="Identity Directory organization id")
    subscription_plan: str
    custom_domain: str | None = None
    domain_verified: bool = False
    created_at: datetime


class SlugCheckResponse(BaseModel):
    """Slug availability."""

    slug: str
    available: bool
    error: str | None = None
    suggestions: list[str] = Field(default_factory=list)


class DomainInstructionsResponse(BaseModel):
    """DNS record the owner must publish."""

    domain: str
    record: str = Field(..., examples=["_jithub-verify.acme.com"])
    type: str = Field("TXT")
    value: str = Field(..., description="Verification token")
    expires_at: datetime | None = Field(None, description="Token expiry")
    instructions: list[str] = Field(default_factory=list)


class VerifyDomainResponse(BaseModel):
    """Domain verification outcome."""

    verified: bool
    domain: str
    verified_at: datetime | None = None
    already_verified: bool = False
