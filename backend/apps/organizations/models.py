"""
Organizations models - multi-tenancy foundation.
"""

from django.conf import settings
from django.db import models
from django.utils import timezone

from apps.core.models import TimestampedModel


class Organization(TimestampedModel):
    """
    Local replica of an Identity Directory organization.

    The directory is the source of truth for organization existence and
    membership. This model caches it and owns app-specific fields:
    slug, custom domain and subscription plan.
    """

    class Plan(models.TextChoices):
        FREE = "free", "Free"
        PRO = "pro", "Pro"
        ENTERPRISE = "enterprise", "Enterprise"

    # Identity Directory link - set once at provisioning, never changed
    external_org_id = models.CharField(
        max_length=255,
        unique=True,
        null=True,
        blank=True,
        help_text="Identity Directory organization id",
    )

    name = models.CharField(max_length=255)
    slug = models.SlugField(
        max_length=50,
        unique=True,
        help_text="URL-safe identifier, e.g. 'acme-corp'",
    )

    subscription_plan = models.CharField(
        max_length=20,
        choices=Plan.choices,
        default=Plan.FREE,
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_organizations",
    )

    # Custom domain: none -> pending(token) -> verified
    custom_domain = models.CharField(max_length=253, null=True, blank=True)
    domain_verified = models.BooleanField(default=False)
    domain_verification_token = models.CharField(max_length=64, blank=True)
    domain_token_expires_at = models.DateTimeField(null=True, blank=True)
    domain_verified_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.name

    @property
    def is_provisioned(self) -> bool:
        """True once the organization exists in the Identity Directory."""
        return bool(self.external_org_id)

    @property
    def has_live_domain_token(self) -> bool:
        """True when a verification token exists and has not expired."""
        if not self.domain_verification_token:
            return False
        if self.domain_token_expires_at is None:
            return True
        return timezone.now() < self.domain_token_expires_at
