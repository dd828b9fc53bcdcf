from django.test import SimpleTestCase, TestCase

from accounts.models import Department
from audit_settings.models import (
    AuditEmailSetting,
    DepartmentRecipient,
    split_addresses,
)


class SplitAddressesTests(SimpleTestCase):
    def test_splits_and_strips(self):
        self.assertEqual(
            split_addresses(" a@example.com, ,b@example.com ,"),
            ["a@example.com", "b@example.com"],
        )

    def test_empty_values(self):
        self.assertEqual(split_addresses(""), [])
        self.assertEqual(split_addresses(None), [])


class AuditEmailSettingTests(TestCase):
    def test_latest_setting_is_active(self):
        AuditEmailSetting.objects.create(name="Old")
        newest = AuditEmailSetting.objects.create(name="New")

        self.assertEqual(AuditEmailSetting.get_active(), newest)

    def test_no_setting(self):
        self.assertIsNone(AuditEmailSetting.get_active())

    def test_department_recipient_addresses(self):
        setting = AuditEmailSetting.objects.create()
        department = Department.objects.create(name="Quality")
        entry = DepartmentRecipient.objects.create(
            setting=setting,
            department=department,
            to="head@example.com, deputy@example.com",
            cc="",
        )

        self.assertEqual(entry.to_addresses, ["head@example.com", "deputy@example.com"])
        self.assertEqual(entry.cc_addresses, [])
        self.assertEqual(list(setting.department_recipients.all()), [entry])
