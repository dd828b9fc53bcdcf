"""
Reminder notification service layer.

Time-based reminder emitters triggered by the scheduler
(management command or APScheduler job).

Reminder logic is:
- service-layer only
- date-based
- deduplicated (at most one reminder per auditor per day)
- decided by a pure engine, persisted separately
"""

# =====================================================
# TARGET AUDIT REMINDERS
# =====================================================
from .target_audit import (
    ReminderConfig,
    run_target_audit_reminder_cycle,
)

__all__ = [
    "ReminderConfig",
    "run_target_audit_reminder_cycle",
]
