from apscheduler.schedulers.background import BackgroundScheduler
from django.conf import settings
from django.core.mail import mail_admins
from django.db import close_old_connections
from django.utils import timezone
import atexit
import logging
import threading

from notifications.exceptions import DataUnavailable
from notifications.services.reminders import (
    ReminderConfig,
    run_target_audit_reminder_cycle,
)

logger = logging.getLogger(__name__)

JOB_ID = "send_target_audit_reminders"

# ============================================================
# GLOBAL SAFETY LOCK
# Prevents scheduler from starting more than once
# ============================================================
_scheduler = None

# Held while a cycle runs; shutdown waits on it.
_cycle_lock = threading.Lock()
_shutdown_requested = threading.Event()

_listing_failures = 0


def start_scheduler(force=False):
    """
    Start APScheduler safely.

    - Respects ENABLE_SCHEDULER setting (unless force=True)
    - Prevents double start (Django autoreload, imports)
    - First cycle runs immediately, then every
      TARGET_AUDIT_REMINDER_INTERVAL_SECONDS
    """
    global _scheduler

    # --------------------------------------------
    # DEV / PROD TOGGLE
    # --------------------------------------------
    if not force and not getattr(settings, "ENABLE_SCHEDULER", False):
        logger.info("APScheduler disabled via settings (ENABLE_SCHEDULER=False)")
        return None

    # --------------------------------------------
    # SAFETY LOCK (NO DOUBLE START)
    # --------------------------------------------
    if _scheduler is not None:
        logger.info("APScheduler already running, skipping initialization")
        return _scheduler

    config = ReminderConfig.from_settings()
    interval_seconds = int(config.interval.total_seconds())

    logger.info("Starting APScheduler...")
    _shutdown_requested.clear()

    _scheduler = BackgroundScheduler(
        timezone=settings.TIME_ZONE
    )

    _scheduler.add_job(
        run_target_audit_reminders,
        trigger="interval",
        seconds=interval_seconds,
        id=JOB_ID,
        replace_existing=True,
        max_instances=1,      # Prevent overlapping runs
        coalesce=True,        # Merge missed runs if server was down
        next_run_time=timezone.now(),
    )

    _scheduler.start()
    atexit.register(stop_scheduler)

    logger.info(
        "APScheduler started: target audit reminders evaluated every %s seconds",
        interval_seconds,
    )
    return _scheduler


def stop_scheduler(grace_seconds=None):
    """
    Graceful shutdown: no new cycles, and the in-flight cycle gets
    ``grace_seconds`` to finish (it stops between auditors).
    """
    global _scheduler

    if _scheduler is None:
        return

    if grace_seconds is None:
        grace_seconds = ReminderConfig.from_settings().shutdown_grace.total_seconds()

    logger.info("Stopping APScheduler (grace period %ss)...", grace_seconds)

    _shutdown_requested.set()
    _scheduler.shutdown(wait=False)
    _scheduler = None

    if _cycle_lock.acquire(timeout=grace_seconds):
        _cycle_lock.release()
        logger.info("APScheduler stopped")
    else:
        logger.warning(
            "In-flight reminder cycle still running after %ss grace period; abandoning it",
            grace_seconds,
        )


def _alert_operators(exc, failures):
    subject = "Target audit reminder job cannot list candidates"
    message = (
        f"The reminder candidate query failed {failures} times in a row.\n\n"
        f"Last error: {exc}\n"
    )
    logger.critical("%s (%s consecutive failures): %s", subject, failures, exc)
    mail_admins(subject, message, fail_silently=True)


def run_target_audit_reminders():
    """
    Wrapper job around one reminder cycle.
    Keeps all business logic out of the scheduler.
    """
    global _listing_failures

    if _shutdown_requested.is_set():
        return None

    now = timezone.now()
    logger.debug("Running target audit reminders at %s", timezone.localtime(now))

    config = ReminderConfig.from_settings()

    # No request signals fire in the job thread.
    close_old_connections()

    with _cycle_lock:
        try:
            result = run_target_audit_reminder_cycle(
                now,
                config=config,
                should_stop=_shutdown_requested.is_set,
            )
        except DataUnavailable as exc:
            _listing_failures += 1
            logger.error(
                "Target audit reminder job failed (%s consecutive): %s",
                _listing_failures, exc,
            )
            if _listing_failures == config.listing_failure_alert_threshold:
                _alert_operators(exc, _listing_failures)
            return None
        finally:
            close_old_connections()

    _listing_failures = 0

    if result.reminded or result.failed:
        logger.info(
            "Target audit reminder cycle: %s candidates, %s reminded (%s escalated), %s failed",
            result.candidates, result.reminded, result.escalated, result.failed,
        )
    return result
