# payables/management/commands/refresh_payable_statuses.py

from __future__ import annotations

from datetime import datetime

from django.core.management.base import BaseCommand, CommandError

from catalog.models import Tenant
from payables.services.payable_service import refresh_payable_statuses


class Command(BaseCommand):
    help = "Recompute CURRENT / DUE_SOON / OVERDUE for every unpaid payable (run daily)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--tenant",
            dest="tenant",
            help="Tenant slug (optional, defaults to all tenants)",
        )
        parser.add_argument(
            "--today",
            dest="today",
            help="Reference date YYYY-MM-DD (optional)",
        )

    def handle(self, *args, **options):
        tenant = None
        slug = options.get("tenant")
        if slug:
            tenant = Tenant.objects.filter(slug=slug).first()
            if tenant is None:
                raise CommandError(f"Unknown tenant: {slug}")

        today = None
        if options.get("today"):
            try:
                today = datetime.strptime(options["today"], "%Y-%m-%d").date()
            except ValueError:
                raise CommandError("Invalid --today date. Use YYYY-MM-DD")

        result = refresh_payable_statuses(tenant, today=today)

        self.stdout.write(self.style.MIGRATE_HEADING("Payable status refresh"))
        self.stdout.write(f"Overdue:  {result['overdue_updated']}")
        self.stdout.write(f"Due soon: {result['due_soon_updated']}")
        self.stdout.write(f"Current:  {result['current_updated']}")
        self.stdout.write(self.style.SUCCESS("[OK] Payable statuses refreshed"))
