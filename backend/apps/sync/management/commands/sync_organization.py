"""
Management command to mirror one directory organization into the local store.

Adopts an organization left orphaned by a failed provisioning. The owner
membership is picked up by reconciliation on their next sign-in.
Example: ./manage.py sync_organization 3f0c2a5e-...
"""

from django.core.management.base import BaseCommand, CommandError

from apps.core.exceptions import EngineError
from apps.sync.reconcile import sync_organization


class Command(BaseCommand):
    help = "Create the local mirror of an Identity Directory organization"

    def add_arguments(self, parser):
        parser.add_argument("external_org_id", type=str, help="Identity Directory organization id")

    def handle(self, *args, **options):
        external_org_id = options["external_org_id"]

        try:
            org = sync_organization(external_org_id)
        except EngineError as e:
            raise CommandError(str(e)) from e

        self.stdout.write(
            self.style.SUCCESS(f"Organization {org.pk} ({org.slug}) mirrors {external_org_id}")
        )
