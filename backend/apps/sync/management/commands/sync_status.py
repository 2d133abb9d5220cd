"""
Management command to list entities whose directory sync did not complete.

Nothing retries these automatically. Operators review them here and repair
by hand, e.g. with ./manage.py sync_organization <external_id>.
Example: ./manage.py sync_status --entity-type organization
"""

from django.core.management.base import BaseCommand
from django.db.models import Count

from apps.sync.models import SyncState
from apps.sync.services import list_unsynced


class Command(BaseCommand):
    help = "List sync ledger entries in pending or error state"

    def add_arguments(self, parser):
        parser.add_argument(
            "--entity-type",
            type=str,
            choices=SyncState.EntityType.values,
            default=None,
            help="Only show entries of this entity type",
        )
        parser.add_argument(
            "--limit",
            type=int,
            default=100,
            help="Maximum number of entries to print (default: 100)",
        )

    def handle(self, *args, **options):
        entity_type = options["entity_type"]
        limit = options["limit"]

        qs = list_unsynced(entity_type)
        total_count = qs.count()

        if total_count == 0:
            self.stdout.write(self.style.SUCCESS("All ledger entries are synced"))
            return

        self.stdout.write(self.style.WARNING(f"Found {total_count} unsynced ledger entries"))

        breakdown = (
            qs.order_by().values("entity_type", "sync_status").annotate(count=Count("id"))
        )
        for row in breakdown:
            self.stdout.write(f"  {row['entity_type']} {row['sync_status']}: {row['count']}")

        self.stdout.write("")
        for state in qs[:limit]:
            line = (
                f"{state.entity_type}:{state.entity_id} external={state.external_id or '-'} "
                f"status={state.sync_status} last_synced_at={state.last_synced_at.isoformat()}"
            )
            if state.sync_error:
                line += f" error={state.sync_error}"
            self.stdout.write(line)
