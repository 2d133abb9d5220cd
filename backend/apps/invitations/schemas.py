"""
Invitation API schemas.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from apps.invitations.models import Invitation


class InvitationResponse(BaseModel):
    """An invitation with expiry applied to its status."""

    id: int
    organization_id: int
    email: str
    role: str
    status: str = Field(..., description="pending, accepted, cancelled or expired")
    expires_at: datetime
    accepted_at: datetime | None = None
    inviter_email: str | None = None
    created_at: datetime

    @classmethod
    def from_model(cls, invitation: Invitation) -> "InvitationResponse":
        return cls(
            id=invitation.pk,
            organization_id=invitation.organization_id,
            email=invitation.email,
            role=invitation.role,
            status=invitation.effective_status,
            expires_at=invitation.expires_at,
            accepted_at=invitation.accepted_at,
            inviter_email=invitation.inviter.email if invitation.inviter else None,
            created_at=invitation.created_at,
        )


class InvitationListResponse(BaseModel):
    invitations: list[InvitationResponse]


class CancelInvitationResponse(BaseModel):
    """Cancellation outcome."""

    invitation: InvitationResponse
    external_revoked: bool = Field(
        ...,
        description="Always false: the identity provider cannot revoke a sent invitation",
    )
    message: str
