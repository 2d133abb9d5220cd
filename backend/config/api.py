"""
Django Ninja API configuration.

Services raise EngineError subclasses; the handler below is the single
place where they become HTTP responses.
"""

from django.http import HttpRequest, HttpResponse
from ninja import NinjaAPI

from apps.accounts.api import router as auth_router
from apps.core.exceptions import (
    AuthorizationError,
    ConflictError,
    EngineError,
    ExternalSystemError,
    NotFoundError,
    PartialProvisioningError,
    ValidationError,
)
from apps.core.logging import get_logger
from apps.core.schemas import ErrorResponse
from apps.invitations.api import router as invitations_router
from apps.organizations.api import router as organizations_router
from apps.organizations.exceptions import (
    DNSResolverError,
    DomainVerificationError,
    OrganizationNotLinkedError,
)

logger = get_logger(__name__)

# First match wins, so subclasses come before their bases
ERROR_STATUS_CODES: list[tuple[type[EngineError], int]] = [
    (PartialProvisioningError, 500),
    (DomainVerificationError, 422),
    (DNSResolverError, 503),
    (OrganizationNotLinkedError, 409),
    (ValidationError, 400),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
    (ExternalSystemError, 502),
]


def status_code_for(exc: EngineError) -> int:
    for error_class, status in ERROR_STATUS_CODES:
        if isinstance(exc, error_class):
            return status
    return 500


api = NinjaAPI(
    title="Organization Sync API",
    version="1.0.0",
    description="Organizations, invitations and custom domains mirrored from the identity provider.",
    openapi_extra={
        "info": {
            "contact": {"name": "API Support"},
        },
        "tags": [
            {
                "name": "auth",
                "description": "Membership sync for the signed-in user",
            },
            {
                "name": "organizations",
                "description": "Provisioning, slugs, custom domains and invitations",
            },
            {
                "name": "invitations",
                "description": "Invitation lifecycle",
            },
            {
                "name": "health",
                "description": "Service health and readiness checks",
            },
        ],
    },
)


@api.exception_handler(EngineError)
def engine_error_handler(request: HttpRequest, exc: EngineError) -> HttpResponse:
    """Translate a typed service error into an ErrorResponse body."""
    status = status_code_for(exc)
    if status >= 500:
        logger.warning(
            "api_request_failed",
            path=request.path,
            status_code=status,
            code=exc.code,
            error=str(exc),
        )

    body = ErrorResponse(
        detail=exc.public_message,
        code=exc.code,
        retryable=exc.retryable,
        suggestions=getattr(exc, "suggestions", []),
    )
    return api.create_response(request, body.model_dump(), status=status)


# Register routers
api.add_router("/auth", auth_router)
api.add_router("/organizations", organizations_router)
api.add_router("/invitations", invitations_router)


@api.get("/health", tags=["health"], operation_id="healthCheck", summary="Health check")
def health_check(request: HttpRequest) -> dict:
    """Health check endpoint for load balancer."""
    return {"status": "ok"}
