"""
notifications/management/commands/run_reminder_scheduler.py

Dedicated reminder worker process.

Starts the APScheduler job regardless of ENABLE_SCHEDULER and blocks
until SIGINT / SIGTERM, then shuts down gracefully.
"""

import signal
import threading

from django.core.management.base import BaseCommand

from notifications.scheduler import start_scheduler, stop_scheduler


class Command(BaseCommand):
    help = "Run the target audit reminder scheduler in the foreground"

    def add_arguments(self, parser):
        parser.add_argument(
            "--grace",
            type=float,
            default=None,
            help="Seconds to let an in-flight cycle finish on shutdown",
        )

    def handle(self, *args, **options):
        stop_event = threading.Event()

        def _request_stop(signum, frame):
            self.stdout.write(self.style.WARNING(f"Received signal {signum}, shutting down..."))
            stop_event.set()

        signal.signal(signal.SIGINT, _request_stop)
        signal.signal(signal.SIGTERM, _request_stop)

        start_scheduler(force=True)
        self.stdout.write(self.style.SUCCESS("Reminder scheduler running. Press Ctrl+C to stop."))

        while not stop_event.wait(timeout=1):
            pass

        stop_scheduler(grace_seconds=options["grace"])
        self.stdout.write(self.style.SUCCESS("Reminder scheduler stopped."))
