"""
Management command to mark pending invitations past their expiry as expired.

Reads already treat such invitations as expired, so this only keeps the
stored status accurate for reporting.
Example: ./manage.py expire_invitations --dry-run
"""

from django.core.management.base import BaseCommand

from apps.invitations.services import expire_stale_invitations, stale_invitations


class Command(BaseCommand):
    help = "Mark pending invitations past their expiry as expired"

    def add_arguments(self, parser):
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show how many would be expired without changing them",
        )

    def handle(self, *args, **options):
        if options["dry_run"]:
            count = stale_invitations().count()
            self.stdout.write(
                self.style.WARNING(f"[DRY RUN] Would expire {count} pending invitations")
            )
            return

        count = expire_stale_invitations()
        self.stdout.write(self.style.SUCCESS(f"Expired {count} pending invitations"))
