"""
notifications/signals/reminders.py

Live listeners of target-audit reminder broadcasts.
"""

from django.dispatch import receiver

from notifications.models import Notification
from notifications.signals import target_audit_reminder



# ============================================================
# IN-APP TOAST FOR THE AUDITOR
# ============================================================

@receiver(target_audit_reminder, dispatch_uid="target_audit_reminder_in_app")
def store_in_app_reminder(sender, event, **kwargs):
    """
    Persist the broadcast as an in-app REMINDER notification so the
    dashboard can show it as a toast.
    """
    escalated = bool(event.get("escalated"))

    Notification.objects.create(
        recipient_id=event["employee_id"],
        category=Notification.Category.REMINDER,
        priority=(
            Notification.Priority.DANGER
            if escalated
            else Notification.Priority.WARNING
        ),
        title=(
            "Audit target reminder (escalated)"
            if escalated
            else "Audit target reminder"
        ),
        message=event.get("message", ""),
        event_type=event.get("type", ""),
    )
