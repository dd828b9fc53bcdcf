"""
Notification signals.

``target_audit_reminder`` is the broadcast channel of the reminder
job. It is sent with ``send_robust`` and receives a single ``event``
kwarg: ``{"type", "employee_id", "message", "timestamp", ...}``.
"""

from django.dispatch import Signal

target_audit_reminder = Signal()

from . import reminders  # noqa: E402,F401
