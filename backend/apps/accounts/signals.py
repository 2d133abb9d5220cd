"""
Signal receivers for accounts.

Every successful sign-in reconciles the user's directory memberships so
organizations they joined by invitation show up immediately.
"""

from django.contrib.auth.signals import user_logged_in
from django.dispatch import receiver

from apps.core.logging import get_logger
from apps.sync.reconcile import reconcile_user

logger = get_logger(__name__)


@receiver(user_logged_in, dispatch_uid="accounts_reconcile_on_login")
def reconcile_on_login(sender, request, user, **kwargs) -> None:
    """Run membership reconciliation after login. Never blocks the login."""
    result = reconcile_user(user.pk, user.email)
    if result.errors:
        logger.warning(
            "login_reconcile_incomplete",
            errors=result.errors,
            **{"usr.id": str(user.pk)},
        )
