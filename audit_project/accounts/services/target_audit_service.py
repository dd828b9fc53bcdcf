import logging

from django.core.exceptions import ValidationError
from django.db import transaction

from accounts.forms import TargetAuditForm
from accounts.models import User

logger = logging.getLogger(__name__)


TARGET_FIELDS = [
    "target_quota",
    "target_start_date",
    "target_end_date",
    "target_reminder_time",
]

REMINDER_STATE_FIELDS = [
    "last_reminder_date",
    "last_completed_count_at_reminder",
    "stagnant_streak",
]


def _actor_label(actor):
    if actor is None:
        return "system"
    return f"{actor.display_name} ({actor.employee_id or actor.username})"


@transaction.atomic
def assign_target_audit(
    *,
    user,
    total,
    start_date,
    end_date,
    reminder_time=None,
    assigned_by=None,
):
    """
    Create or replace the audit target window of an auditor.

    - Only employee (auditor) users can carry a target
    - Replacing a target starts a fresh reminder history
    """

    if user.role != User.Role.EMPLOYEE:
        raise ValidationError(
            "Target audits can only be set for employee (auditor) users."
        )

    form = TargetAuditForm(
        data={
            "target_quota": total,
            "target_start_date": start_date,
            "target_end_date": end_date,
            "target_reminder_time": reminder_time or "",
        },
        instance=user,
    )

    if not form.is_valid():
        raise ValidationError(form.errors)

    user = form.save(commit=False)
    user.reset_reminder_state(save=False)
    user.save(update_fields=TARGET_FIELDS + REMINDER_STATE_FIELDS)

    logger.info(
        "Target audit updated for %s (%s) by %s: total=%s window=%s..%s reminder=%s",
        user.display_name,
        user.employee_id or user.username,
        _actor_label(assigned_by),
        user.target_quota,
        user.target_start_date,
        user.target_end_date,
        user.target_reminder_time or "-",
    )

    return user


@transaction.atomic
def clear_target_audit(*, user, cleared_by=None):
    """Remove the target window and forget its reminder history."""

    user.target_quota = None
    user.target_start_date = None
    user.target_end_date = None
    user.target_reminder_time = ""
    user.reset_reminder_state(save=False)
    user.save(update_fields=TARGET_FIELDS + REMINDER_STATE_FIELDS)

    logger.info(
        "Target audit cleared for %s by %s",
        user.display_name,
        _actor_label(cleared_by),
    )

    return user
