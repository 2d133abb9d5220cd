"""Admin configuration for invitations app."""

from django.contrib import admin

from apps.invitations.models import Invitation


@admin.register(Invitation)
class InvitationAdmin(admin.ModelAdmin):
    """Admin for Invitation model."""

    list_display = ["email", "organization", "role", "status", "effective", "expires_at"]
    list_filter = ["status", "role"]
    search_fields = ["email", "organization__name", "organization__slug"]
    readonly_fields = ["inviter", "accepted_at", "external_invitation_id", "created_at", "updated_at"]
    ordering = ["-created_at"]

    @admin.display(description="Effective status")
    def effective(self, obj: Invitation) -> str:
        """Status with expiry applied."""
        return obj.effective_status
