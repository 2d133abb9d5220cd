"""
Sync state ledger models.

One row per locally cached entity that has an Identity Directory
counterpart, recording the mapping and the outcome of the last sync.
"""

from django.db import models


class SyncState(models.Model):
    """
    Mapping between a Local Store entity and its Identity Directory id.

    Rows in status pending or error mark entities whose external
    provisioning never completed. Nothing retries them automatically;
    operators find them with the sync_status management command.
    """

    class EntityType(models.TextChoices):
        ORGANIZATION = "organization"
        MEMBER = "member"
        USER = "user"

    class Status(models.TextChoices):
        SYNCED = "synced"
        PENDING = "pending"
        ERROR = "error"

    entity_type = models.CharField(max_length=20, choices=EntityType.choices)
    entity_id = models.CharField(
        max_length=64,
        help_text="Local primary key of the entity",
    )
    external_id = models.CharField(
        max_length=255,
        blank=True,
        help_text="Identity Directory id (organization id, or user id for members)",
    )
    sync_status = models.CharField(
        max_length=16,
        choices=Status.choices,
        default=Status.PENDING,
    )
    sync_error = models.TextField(blank=True)
    last_synced_at = models.DateTimeField()

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-last_synced_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["entity_type", "entity_id"],
                name="unique_sync_state_per_entity",
            ),
        ]
        indexes = [
            models.Index(fields=["sync_status", "entity_type"], name="sync_state_status_type_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.entity_type}:{self.entity_id} -> {self.external_id} ({self.sync_status})"
