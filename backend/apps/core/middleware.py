"""
Core middleware.
"""

import uuid
from collections.abc import Callable

from django.http import HttpRequest, HttpResponse

from apps.core.logging import bind_contextvars, clear_contextvars

CORRELATION_HEADER = "HTTP_X_REQUEST_ID"


class RequestContextMiddleware:
    """
    Binds per-request logging context.

    Every log line emitted while handling the request carries correlation_id
    and, once authenticated, usr.id. Context is cleared after the response
    so values never leak into the next request on the same worker.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        clear_contextvars()
        correlation_id = request.META.get(CORRELATION_HEADER) or str(uuid.uuid4())
        bind_contextvars(correlation_id=correlation_id)

        user = getattr(request, "user", None)
        if user is not None and user.is_authenticated:
            bind_contextvars(**{"usr.id": str(user.pk), "usr.email": user.email})

        try:
            response = self.get_response(request)
        finally:
            clear_contextvars()

        response["X-Request-ID"] = correlation_id
        return response
