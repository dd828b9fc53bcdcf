"""
notifications/management/commands/send_target_audit_reminders.py

Runs exactly one target-audit reminder cycle.

Safe to run as often as you like: each auditor gets at most one
reminder per calendar day.
"""

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from notifications.exceptions import DataUnavailable
from notifications.services.reminders import run_target_audit_reminder_cycle
from notifications.services.reminders.target_audit import OutcomeStatus


class Command(BaseCommand):
    help = "Evaluate target audit reminders once (at most one reminder per auditor per day)"

    def add_arguments(self, parser):
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show who would be reminded without sending or recording anything",
        )

    def handle(self, *args, **options):
        now = timezone.now()
        stamp = f"{timezone.localtime(now):%Y-%m-%d %H:%M:%S}"
        dry_run = options["dry_run"]

        self.stdout.write(
            self.style.NOTICE(
                f"[{stamp}] Starting target audit reminders"
                + (" (dry run)" if dry_run else "")
            )
        )

        try:
            result = run_target_audit_reminder_cycle(now, dry_run=dry_run)
        except DataUnavailable as exc:
            raise CommandError(f"Could not list reminder candidates: {exc}") from exc

        if dry_run:
            for outcome in result.outcomes:
                if outcome.status == OutcomeStatus.WOULD_REMIND:
                    self.stdout.write(
                        f"  would remind auditor {outcome.auditor_id}: "
                        f"pending={outcome.decision.pending} "
                        f"escalated={outcome.decision.escalated}"
                    )

        self.stdout.write(
            self.style.SUCCESS(
                f"[{stamp}] Completed: "
                f"{result.candidates} candidates, "
                f"{result.reminded} reminded, "
                f"{result.escalated} escalated, "
                f"{result.skipped} skipped, "
                f"{result.failed} failed"
            )
        )
