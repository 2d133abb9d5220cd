"""
Invitation API endpoints not scoped under an organization path.

Creating and listing live in the organizations router.
"""

from django.http import HttpRequest
from ninja import Router

from apps.core.schemas import ErrorResponse
from apps.core.security import PrincipalAuth, get_principal
from apps.invitations.schemas import CancelInvitationResponse, InvitationResponse
from apps.invitations.services import cancel_invitation

router = Router(tags=["invitations"])
principal_auth = PrincipalAuth()


@router.post(
    "/{invitation_id}/cancel",
    response={
        200: CancelInvitationResponse,
        401: ErrorResponse,
        403: ErrorResponse,
        404: ErrorResponse,
        409: ErrorResponse,
    },
    auth=principal_auth,
    operation_id="cancelInvitation",
    summary="Cancel a pending invitation",
)
def cancel_invitation_endpoint(request: HttpRequest, invitation_id: int) -> CancelInvitationResponse:
    """
    Cancel locally. The identity provider cannot revoke an invitation it
    already emailed, so external_revoked is always false.
    """
    principal = get_principal(request)
    result = cancel_invitation(principal, invitation_id)
    return CancelInvitationResponse(
        invitation=InvitationResponse.from_model(result.invitation),
        external_revoked=result.external_revoked,
        message=result.message,
    )
