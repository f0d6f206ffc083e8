from datetime import date

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from common.persistence import DjangoStore
from insurance.services.policy_service import PolicyService
from insurance.services.quote_service import QuoteService
from reminders.services import ReminderService


class Command(BaseCommand):
    help = (
        "Expire stale quotes and ended policies, then send due reminders. "
        "Meant to be run once a day by an external scheduler."
    )

    def add_arguments(self, parser):
        parser.add_argument(
            "--date",
            default=None,
            help="Run as of this date (YYYY-MM-DD). Defaults to today.",
        )
        parser.add_argument(
            "--skip-reminders",
            action="store_true",
            help="Only run the expiry sweeps.",
        )

    def handle(self, *args, **options):
        today = timezone.localdate()
        if options.get("date"):
            try:
                today = date.fromisoformat(options["date"])
            except ValueError as exc:
                raise CommandError(f"Invalid --date: {exc}") from exc

        store = DjangoStore()
        quotes = QuoteService(store=store).expire_stale()
        policies = PolicyService(store=store).expire_ended_policies(on=today)
        reminders = 0
        if not options.get("skip_reminders"):
            reminders = ReminderService(store=store).dispatch_due_reminders(today)["total"]

        self.stdout.write(
            self.style.SUCCESS(
                f"[{today}] quotes_expired={quotes} policies_expired={policies} "
                f"reminders_sent={reminders}"
            )
        )
