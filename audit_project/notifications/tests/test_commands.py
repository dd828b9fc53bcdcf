from io import StringIO
from unittest import mock

from django.core import mail
from django.core.management import CommandError, call_command
from django.test import TestCase, override_settings

from notifications.exceptions import DataUnavailable

from .helpers import local, make_auditor


@override_settings(TIME_ZONE="Asia/Kolkata")
class SendTargetAuditRemindersCommandTests(TestCase):
    def setUp(self):
        self.auditor = make_auditor("ravi")
        patcher = mock.patch(
            "notifications.management.commands.send_target_audit_reminders.timezone.now",
            return_value=local(2024, 1, 5, 9, 1),
        )
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_reports_cycle_summary(self):
        out = StringIO()
        call_command("send_target_audit_reminders", stdout=out)

        self.assertIn(
            "Completed: 1 candidates, 1 reminded, 0 escalated, 0 skipped, 0 failed",
            out.getvalue(),
        )
        self.assertEqual(len(mail.outbox), 1)

    def test_dry_run_lists_without_sending(self):
        out = StringIO()
        call_command("send_target_audit_reminders", "--dry-run", stdout=out)

        output = out.getvalue()
        self.assertIn("(dry run)", output)
        self.assertIn(f"would remind auditor {self.auditor.pk}: pending=10", output)
        self.assertEqual(len(mail.outbox), 0)

        self.auditor.refresh_from_db()
        self.assertIsNone(self.auditor.last_reminder_date)

    def test_listing_failure_becomes_command_error(self):
        with mock.patch(
            "notifications.services.reminders.target_audit.list_active_reminder_candidates",
            side_effect=DataUnavailable("db down"),
        ):
            with self.assertRaises(CommandError):
                call_command("send_target_audit_reminders", stdout=StringIO())
