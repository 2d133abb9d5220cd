"""
Sync state ledger services.

record_sync_state is an idempotent upsert keyed by (entity_type, entity_id):
recording the same entity twice updates status, error and time in place.
"""

from django.db import IntegrityError, transaction
from django.db.models import QuerySet
from django.utils import timezone

from apps.core.logging import get_logger
from apps.sync.models import SyncState

logger = get_logger(__name__)


def record_sync_state(
    entity_type: str,
    entity_id: str | int,
    external_id: str,
    status: str = SyncState.Status.SYNCED,
    error: str = "",
) -> SyncState:
    """
    Create or update the ledger row for an entity.

    Args:
        entity_type: SyncState.EntityType value
        entity_id: Local primary key
        external_id: Identity Directory id
        status: SyncState.Status value
        error: Error detail for status=error, cleared otherwise
    """
    defaults = {
        "external_id": external_id,
        "sync_status": status,
        "sync_error": error,
        "last_synced_at": timezone.now(),
    }

    try:
        with transaction.atomic():
            state, created = SyncState.objects.update_or_create(
                entity_type=entity_type,
                entity_id=str(entity_id),
                defaults=defaults,
            )
    except IntegrityError:
        # Concurrent insert for the same entity won, update it instead
        SyncState.objects.filter(entity_type=entity_type, entity_id=str(entity_id)).update(
            **defaults
        )
        state = SyncState.objects.get(entity_type=entity_type, entity_id=str(entity_id))
        created = False

    if status == SyncState.Status.ERROR:
        logger.warning(
            "sync_state_error_recorded",
            entity_type=entity_type,
            entity_id=str(entity_id),
            external_id=external_id,
            sync_error=error,
        )
    else:
        logger.debug(
            "sync_state_recorded",
            entity_type=entity_type,
            entity_id=str(entity_id),
            external_id=external_id,
            sync_status=status,
            created=created,
        )

    return state


def get_sync_state(entity_type: str, entity_id: str | int) -> SyncState | None:
    """Return the ledger row for an entity, if one exists."""
    return SyncState.objects.filter(entity_type=entity_type, entity_id=str(entity_id)).first()


def list_unsynced(entity_type: str | None = None) -> QuerySet[SyncState]:
    """Ledger rows whose last sync did not complete (pending or error)."""
    qs = SyncState.objects.exclude(sync_status=SyncState.Status.SYNCED)
    if entity_type:
        qs = qs.filter(entity_type=entity_type)
    return qs.order_by("last_synced_at")
