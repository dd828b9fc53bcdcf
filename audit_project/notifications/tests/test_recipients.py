from django.contrib.auth import get_user_model
from django.test import TestCase

from accounts.models import Department
from audit_settings.models import AuditEmailSetting, DepartmentRecipient
from notifications.services.reminders.recipients import (
    get_escalation_recipients,
    resolve_recipients,
)

from .helpers import make_auditor

User = get_user_model()


class EscalationRecipientLookupTests(TestCase):
    def setUp(self):
        self.quality = Department.objects.create(name="Quality")
        self.stores = Department.objects.create(name="Stores")

    def test_no_setting_returns_none(self):
        self.assertIsNone(get_escalation_recipients(self.quality.pk))

    def test_missing_department_returns_none(self):
        self.assertIsNone(get_escalation_recipients(None))

    def test_uses_latest_setting(self):
        old = AuditEmailSetting.objects.create(name="Old")
        DepartmentRecipient.objects.create(
            setting=old, department=self.quality, to="old-head@example.com"
        )
        new = AuditEmailSetting.objects.create(name="New")
        DepartmentRecipient.objects.create(
            setting=new,
            department=self.quality,
            to="head@example.com, deputy@example.com",
            cc="plant@example.com",
        )

        self.assertEqual(
            get_escalation_recipients(self.quality.pk),
            {
                "to": ["head@example.com", "deputy@example.com"],
                "cc": ["plant@example.com"],
            },
        )
        self.assertIsNone(get_escalation_recipients(self.stores.pk))


class ResolveRecipientsTests(TestCase):
    def setUp(self):
        self.department = Department.objects.create(name="Quality")
        self.auditor = make_auditor("ravi", department=self.department)
        # create_user lowercases the domain; store the address as typed.
        User.objects.filter(pk=self.auditor.pk).update(email="Ravi@Example.com")
        self.auditor.refresh_from_db()

    def test_not_escalated_is_self_only(self):
        lookup_calls = []

        recipients = resolve_recipients(
            self.auditor, False, lookup=lambda dept: lookup_calls.append(dept)
        )

        self.assertEqual(recipients.to, ("Ravi@Example.com",))
        self.assertEqual(recipients.cc, ())
        self.assertFalse(recipients.escalated)
        self.assertEqual(lookup_calls, [])

    def test_escalated_unions_department_recipients(self):
        recipients = resolve_recipients(
            self.auditor,
            True,
            lookup=lambda dept: {
                "to": ["head@example.com", " ravi@example.com "],
                "cc": ["HEAD@example.com", "plant@example.com", "", "  "],
            },
        )

        self.assertEqual(recipients.to, ("Ravi@Example.com", "head@example.com"))
        self.assertEqual(recipients.cc, ("plant@example.com",))
        self.assertTrue(recipients.escalated)

    def test_escalated_without_department_config_degrades_to_self(self):
        recipients = resolve_recipients(self.auditor, True, lookup=lambda dept: None)

        self.assertEqual(recipients.to, ("Ravi@Example.com",))
        self.assertEqual(recipients.cc, ())
        self.assertTrue(recipients.escalated)

    def test_escalated_reads_the_settings_store(self):
        setting = AuditEmailSetting.objects.create()
        DepartmentRecipient.objects.create(
            setting=setting,
            department=self.department,
            to="head@example.com",
            cc="plant@example.com,head@example.com",
        )

        recipients = resolve_recipients(self.auditor, True)

        self.assertEqual(recipients.to, ("Ravi@Example.com", "head@example.com"))
        self.assertEqual(recipients.cc, ("plant@example.com",))

    def test_auditor_without_email_has_no_primary_recipient(self):
        self.auditor.email = ""

        recipients = resolve_recipients(self.auditor, False)

        self.assertEqual(recipients.to, ())
        self.assertFalse(recipients)
