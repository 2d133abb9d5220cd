"""
Invitation models - pending organization invitations.
"""

from django.conf import settings
from django.db import models
from django.utils import timezone

from apps.accounts.models import Member
from apps.core.models import TenantScopedModel


class Invitation(TenantScopedModel):
    """
    Invitation of an email address into an organization.

    The Identity Directory sends the actual email and adds the user once
    they register. This row tracks the invitation so reconciliation can
    mark it accepted when the membership appears.

    Transitions: pending -> accepted | cancelled | expired. Terminal
    states never change again.
    """

    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        ACCEPTED = "accepted", "Accepted"
        CANCELLED = "cancelled", "Cancelled"
        EXPIRED = "expired", "Expired"

    email = models.EmailField(help_text="Lowercased invitee email")
    role = models.CharField(
        max_length=20,
        choices=Member.Role.choices,
        default=Member.Role.MEMBER,
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
    )
    expires_at = models.DateTimeField()
    inviter = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sent_invitations",
    )
    accepted_at = models.DateTimeField(null=True, blank=True)
    external_invitation_id = models.CharField(
        max_length=255,
        null=True,
        blank=True,
        help_text="Identity Directory invitation id, when the directory returns one",
    )

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["organization", "email"],
                condition=models.Q(status="pending"),
                name="unique_pending_invitation_per_email",
            ),
        ]
        indexes = [
            models.Index(fields=["email", "status"], name="invitation_email_status_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.email} -> {self.organization_id} ({self.status})"

    @property
    def is_expired(self) -> bool:
        """Pending but past its expiry time."""
        return self.status == self.Status.PENDING and self.expires_at <= timezone.now()

    @property
    def is_live(self) -> bool:
        """Pending and still within its expiry window."""
        return self.status == self.Status.PENDING and not self.is_expired

    @property
    def effective_status(self) -> str:
        """Status as callers should see it, with expiry applied."""
        if self.is_expired:
            return self.Status.EXPIRED
        return self.status
