"""
Auth API endpoints.

Sign-in itself is handled by Django's session framework. This router only
exposes an explicit membership resync for the signed-in user, the same
pass that runs on every login.
"""

from django.http import HttpRequest
from ninja import Router

from apps.accounts.schemas import ReconcileResponse
from apps.core.schemas import ErrorResponse
from apps.core.security import PrincipalAuth, get_principal
from apps.sync.reconcile import reconcile_user

router = Router(tags=["auth"])
principal_auth = PrincipalAuth()


@router.post(
    "/sync",
    response={200: ReconcileResponse, 401: ErrorResponse},
    auth=principal_auth,
    operation_id="syncMemberships",
    summary="Sync organization memberships from the identity provider",
)
def sync_memberships(request: HttpRequest) -> ReconcileResponse:
    """
    Mirror the caller's identity provider memberships locally.

    Never fails on directory errors: they are reported in `errors`.
    """
    principal = get_principal(request)
    result = reconcile_user(principal.pk, principal.email)
    return ReconcileResponse(
        new_organizations=result.new_organizations,
        new_memberships=result.new_memberships,
        accepted_invitations=result.accepted_invitations,
        errors=result.errors,
    )
