"""
Auth API schemas - Pydantic models for request/response.
"""

from pydantic import BaseModel, Field


class ReconcileResponse(BaseModel):
    """Outcome of a membership reconciliation pass."""

    new_organizations: int = Field(..., description="Organizations mirrored for the first time")
    new_memberships: int = Field(..., description="Memberships created locally")
    accepted_invitations: int = Field(..., description="Pending invitations marked accepted")
    errors: list[str] = Field(default_factory=list, description="Per-organization failures")
