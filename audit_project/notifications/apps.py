import os
import sys

from django.apps import AppConfig

NON_SERVER_PROGRAMS = {"manage.py", "django-admin", "django-admin.py", "__main__.py", "pytest"}


def should_start_scheduler(argv=None, environ=None):
    """
    Decide whether this process hosts the in-process reminder scheduler.

    - ``runserver``: only the autoreloader child (or ``--noreload``)
    - any other management command or the test runner: never
    - WSGI servers (gunicorn, uwsgi, ...): yes

    ``ENABLE_SCHEDULER`` is still checked by ``start_scheduler``.
    """
    argv = sys.argv if argv is None else argv
    environ = os.environ if environ is None else environ

    program = os.path.basename(argv[0]) if argv else ""
    command = argv[1] if len(argv) > 1 else ""

    if command == "runserver":
        return environ.get("RUN_MAIN") == "true" or "--noreload" in argv

    return program not in NON_SERVER_PROGRAMS


class NotificationsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "notifications"

    def ready(self):
        # --------------------------------------------------
        # Load signals (REQUIRED)
        # --------------------------------------------------
        import notifications.signals  # noqa

        # --------------------------------------------------
        # Start APScheduler SAFELY
        # --------------------------------------------------
        if not should_start_scheduler():
            return

        from .scheduler import start_scheduler
        start_scheduler()
