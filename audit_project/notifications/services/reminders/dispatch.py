"""
notifications/services/reminders/dispatch.py

Delivers a target-audit reminder over two independent channels:

- Broadcast: a ``target_audit_reminder`` signal for live listeners
  (in-app toast). Fire-and-forget.
- Email: HTML + plain text to the resolved to/cc recipients.

Every channel failure is logged and reported in the DispatchResult,
never raised. Once a reminder has been claimed for the day it stays
claimed whatever happens here: a lost email is preferred over a
duplicate one.
"""

import logging
from dataclasses import dataclass, field

from django.conf import settings
from django.core.mail import EmailMultiAlternatives, get_connection
from django.template.loader import render_to_string
from django.utils import timezone

from notifications.exceptions import TransportFailure
from notifications.signals import target_audit_reminder

logger = logging.getLogger(__name__)


REMINDER_EVENT_TYPE = "target-audit-reminder"


@dataclass
class DispatchResult:
    broadcast_ok: bool = False
    email_ok: bool = False
    failures: list = field(default_factory=list)


# ============================================================
# CONTENT
# ============================================================

def build_reminder_message(auditor, decision, quota):
    message = (
        f"{auditor.display_name}, you have {decision.pending} pending audits "
        f"out of a target of {quota}."
    )
    if decision.escalated:
        message += " (Escalated Reminder)"
    return message


def build_reminder_event(auditor, decision, now=None):
    now = now or timezone.now()
    return {
        "type": REMINDER_EVENT_TYPE,
        "employee_id": auditor.pk,
        "message": build_reminder_message(auditor, decision, auditor.target_quota),
        "timestamp": now.isoformat(),
        "escalated": decision.escalated,
        "pending": decision.pending,
    }


def _logo_url():
    client_url = (getattr(settings, "AUDIT_CLIENT_URL", "") or "").strip()
    return client_url.rstrip("/") or None


def render_reminder_email(auditor, decision):
    """Return (subject, text_body, html_body)."""
    subject = "Audit Target Reminder"
    if decision.escalated:
        subject += " - Escalated"

    context = {
        "auditor": auditor,
        "full_name": auditor.display_name,
        "quota": auditor.target_quota,
        "completed": decision.completed_count,
        "pending": decision.pending,
        "start_date": auditor.target_start_date,
        "end_date": auditor.target_end_date,
        "escalated": decision.escalated,
        "organization_name": getattr(settings, "AUDIT_ORGANIZATION_NAME", ""),
        "logo_url": _logo_url(),
    }

    text_body = render_to_string(
        "notifications/email/target_audit_reminder.txt", context
    )
    html_body = render_to_string(
        "notifications/email/target_audit_reminder.html", context
    )
    return subject, text_body, html_body


# ============================================================
# CHANNELS
# ============================================================

def broadcast_reminder(event):
    """
    Emit the reminder event to every connected receiver.
    Receiver errors are logged and swallowed.
    """
    failures = []

    for receiver, response in target_audit_reminder.send_robust(
        sender=REMINDER_EVENT_TYPE, event=event
    ):
        if isinstance(response, Exception):
            logger.error(
                "Reminder broadcast receiver %r failed for employee %s: %s",
                receiver, event.get("employee_id"), response,
            )
            failures.append(TransportFailure("broadcast", str(response)))

    return failures


def send_reminder_email(recipients, subject, text_body, html_body, *, timeout=None):
    if not recipients.to:
        raise TransportFailure("email", "no primary recipient address")

    timeout = timeout or getattr(settings, "TARGET_AUDIT_EMAIL_TIMEOUT", None)

    try:
        connection = get_connection(timeout=timeout)
        message = EmailMultiAlternatives(
            subject=subject,
            body=text_body,
            from_email=settings.DEFAULT_FROM_EMAIL,
            to=list(recipients.to),
            cc=list(recipients.cc),
            connection=connection,
        )
        message.attach_alternative(html_body, "text/html")
        message.send(fail_silently=False)
    except Exception as exc:
        raise TransportFailure("email", str(exc)) from exc


def dispatch(auditor, decision, recipients, *, now=None, email_timeout=None):
    result = DispatchResult()

    # --------------------------------------------------
    # BROADCAST (LIVE UI)
    # --------------------------------------------------
    try:
        event = build_reminder_event(auditor, decision, now=now)
        failures = broadcast_reminder(event)
        result.failures.extend(failures)
        result.broadcast_ok = not failures
    except Exception as exc:
        logger.exception("Reminder broadcast failed for employee %s", auditor.pk)
        result.failures.append(TransportFailure("broadcast", str(exc)))

    # --------------------------------------------------
    # EMAIL
    # --------------------------------------------------
    to_label = ", ".join(recipients.to)
    cc_label = ", ".join(recipients.cc)

    try:
        subject, text_body, html_body = render_reminder_email(auditor, decision)
        send_reminder_email(
            recipients, subject, text_body, html_body, timeout=email_timeout
        )
        result.email_ok = True
        logger.info(
            "Target audit reminder email sent to %s (CC: %s)", to_label, cc_label or "-"
        )
    except TransportFailure as exc:
        logger.error(
            "Failed to send target audit reminder to %s: %s", to_label or auditor.pk, exc
        )
        result.failures.append(exc)
    except Exception as exc:
        logger.exception("Could not build target audit reminder for %s", auditor.pk)
        result.failures.append(TransportFailure("email", str(exc)))

    return result
