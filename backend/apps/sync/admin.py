"""Django admin for inspecting the sync ledger."""

from django.contrib import admin

from apps.sync.models import SyncState


@admin.register(SyncState)
class SyncStateAdmin(admin.ModelAdmin):
    """Read-only view of sync ledger entries."""

    list_display = [
        "entity_type",
        "entity_id",
        "external_id",
        "sync_status",
        "last_synced_at",
    ]
    list_filter = [
        "sync_status",
        "entity_type",
    ]
    search_fields = [
        "entity_id",
        "external_id",
    ]
    readonly_fields = [
        "entity_type",
        "entity_id",
        "external_id",
        "sync_status",
        "sync_error",
        "last_synced_at",
        "created_at",
    ]
    ordering = ["-last_synced_at"]

    def has_add_permission(self, request):
        """Ledger entries are written by the services, not admin."""
        return False

    def has_change_permission(self, request, obj=None):
        return False
