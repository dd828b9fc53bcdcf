from django.test import SimpleTestCase

from notifications.apps import should_start_scheduler


class ShouldStartSchedulerTests(SimpleTestCase):
    def test_runserver_starts_only_in_reloader_child(self):
        argv = ["manage.py", "runserver"]

        self.assertFalse(should_start_scheduler(argv, {}))
        self.assertTrue(should_start_scheduler(argv, {"RUN_MAIN": "true"}))

    def test_runserver_without_reloader(self):
        self.assertTrue(
            should_start_scheduler(["manage.py", "runserver", "--noreload"], {})
        )

    def test_wsgi_server_starts(self):
        self.assertTrue(
            should_start_scheduler(["/venv/bin/gunicorn", "audit_project.wsgi"], {})
        )

    def test_other_management_commands_do_not_start(self):
        for argv in (
            ["manage.py", "migrate"],
            ["manage.py", "send_target_audit_reminders"],
            ["manage.py", "run_reminder_scheduler"],
            ["/venv/bin/django-admin", "shell"],
            ["/venv/bin/pytest"],
            ["/venv/lib/python3.12/site-packages/pytest/__main__.py"],
        ):
            with self.subTest(argv=argv):
                self.assertFalse(should_start_scheduler(argv, {"RUN_MAIN": "true"}))
