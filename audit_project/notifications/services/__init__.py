"""
Notification service layer.

Each subpackage emits notifications for one concern. Delivery
(broadcast + email) is best-effort; callers never see transport
errors.
"""

# =====================================================
# REMINDERS
# =====================================================
from .reminders import (
    run_target_audit_reminder_cycle,
)

# =====================================================
# PUBLIC EXPORTS
# =====================================================
__all__ = [
    # Reminders
    "run_target_audit_reminder_cycle",
]
