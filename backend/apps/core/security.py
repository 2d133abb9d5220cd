"""
Core security - request principal helpers for the API.

Authentication itself is handled by Django's session middleware;
endpoints only need the authenticated user as the acting principal.
"""

from typing import TYPE_CHECKING

from django.http import HttpRequest
from ninja.errors import HttpError
from ninja.security import SessionAuth

if TYPE_CHECKING:
    from apps.accounts.models import User


class PrincipalAuth(SessionAuth):
    """
    Session authentication for API endpoints.

    Returns the authenticated user, which ninja stores on request.auth.
    """

    def authenticate(self, request: HttpRequest, key: str | None) -> "User | None":
        user = getattr(request, "user", None)
        if user is not None and user.is_authenticated:
            return user
        return None


def get_principal(request: HttpRequest) -> "User":
    """
    Get the acting user for a request or raise 401.

    Prefers request.auth (set by ninja auth classes), falling back to
    request.user for views called outside the ninja auth pipeline.
    """
    user = getattr(request, "auth", None) or getattr(request, "user", None)
    if user is None or not getattr(user, "is_authenticated", False):
        raise HttpError(401, "Not authenticated")
    return user
