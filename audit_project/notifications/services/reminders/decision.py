"""
notifications/services/reminders/decision.py

Pure decision engine for target-audit reminders.

Given the current instant, the auditor's target window, the reminder
state persisted by the previous send, and the number of audits
completed in the window, decide whether today's reminder is due and
what state to persist if it is. No database, no settings, no clock:
everything comes in through the arguments.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional, Union

from notifications.exceptions import ConfigurationError


DEFAULT_SAFETY_OFFSET = timedelta(seconds=15)
DEFAULT_STAGNATION_THRESHOLD = 2

_REMINDER_TIME_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


# ============================================================
# VALUE TYPES
# ============================================================

@dataclass(frozen=True)
class TargetWindow:
    quota: int
    start_date: date
    end_date: date
    reminder_time: str


@dataclass(frozen=True)
class ReminderState:
    last_reminder_date: date
    last_completed_count_at_reminder: int = 0
    stagnant_streak: int = 0


class SkipReason(str, enum.Enum):
    WINDOW_INACTIVE = "window_inactive"
    TARGET_MET = "target_met"
    TOO_EARLY = "too_early"
    ALREADY_SENT_TODAY = "already_sent_today"


class ReminderPhase(str, enum.Enum):
    INACTIVE = "inactive"
    WAITING_FOR_TIME = "waiting_for_time"
    ARMED = "armed"
    SENT = "sent"


@dataclass(frozen=True)
class Skip:
    reason: SkipReason

    should_remind = False


@dataclass(frozen=True)
class Remind:
    pending: int
    escalated: bool
    completed_count: int
    new_state: ReminderState

    should_remind = True


Decision = Union[Skip, Remind]


# ============================================================
# VALIDATION
# ============================================================

def parse_reminder_time(value) -> time:
    """Parse a strict 24h ``HH:mm`` string."""
    match = _REMINDER_TIME_RE.match(str(value or "").strip())
    if not match:
        raise ConfigurationError(
            f"reminder time {value!r} is not in HH:mm (24-hour) format"
        )
    return time(int(match.group(1)), int(match.group(2)))


def validate_window(window: TargetWindow) -> time:
    if window.quota is None or window.quota < 1:
        raise ConfigurationError(f"target quota must be positive, got {window.quota!r}")

    if window.start_date is None or window.end_date is None:
        raise ConfigurationError("target window is missing a start or end date")

    if window.start_date > window.end_date:
        raise ConfigurationError(
            f"inverted target window {window.start_date} > {window.end_date}"
        )

    return parse_reminder_time(window.reminder_time)


def _require_aware(now: datetime) -> None:
    if now.tzinfo is None or now.utcoffset() is None:
        raise ValueError("now must be a timezone-aware datetime")


def eligible_instant(now: datetime, reminder_at: time, safety_offset: timedelta) -> datetime:
    """Today's reminder time in ``now``'s own zone, plus the safety offset."""
    start_of_day = datetime.combine(now.date(), time.min)
    nominal = start_of_day + timedelta(hours=reminder_at.hour, minutes=reminder_at.minute)
    return nominal.replace(tzinfo=now.tzinfo) + safety_offset


# ============================================================
# DECISION
# ============================================================

def next_streak(prior_state: Optional[ReminderState], completed_count: int) -> int:
    if prior_state is None:
        return 0
    if completed_count > prior_state.last_completed_count_at_reminder:
        return 0
    return prior_state.stagnant_streak + 1


def decide(
    now: datetime,
    window: TargetWindow,
    prior_state: Optional[ReminderState],
    completed_count: int,
    *,
    safety_offset: timedelta = DEFAULT_SAFETY_OFFSET,
    stagnation_threshold: int = DEFAULT_STAGNATION_THRESHOLD,
) -> Decision:
    """
    Decide whether the auditor gets today's reminder.

    ``now`` must be aware; its own zone defines the local calendar day.
    Raises ConfigurationError for a malformed window.
    """
    _require_aware(now)
    reminder_at = validate_window(window)

    today = now.date()

    if not (window.start_date <= today <= window.end_date):
        return Skip(SkipReason.WINDOW_INACTIVE)

    pending = max(0, window.quota - completed_count)
    if pending == 0:
        return Skip(SkipReason.TARGET_MET)

    if now < eligible_instant(now, reminder_at, safety_offset):
        return Skip(SkipReason.TOO_EARLY)

    # Only exact same-day equality counts as "already sent". A date in
    # the future (clock skew) must not suppress reminders forever.
    if prior_state is not None and prior_state.last_reminder_date == today:
        return Skip(SkipReason.ALREADY_SENT_TODAY)

    streak = next_streak(prior_state, completed_count)

    return Remind(
        pending=pending,
        escalated=streak >= stagnation_threshold,
        completed_count=completed_count,
        new_state=ReminderState(
            last_reminder_date=today,
            last_completed_count_at_reminder=completed_count,
            stagnant_streak=streak,
        ),
    )


def reminder_phase(
    now: datetime,
    window: TargetWindow,
    prior_state: Optional[ReminderState],
    completed_count: int,
    *,
    safety_offset: timedelta = DEFAULT_SAFETY_OFFSET,
) -> ReminderPhase:
    """Where the auditor sits in today's reminder lifecycle (display only)."""
    decision = decide(
        now,
        window,
        prior_state,
        completed_count,
        safety_offset=safety_offset,
    )

    if isinstance(decision, Remind):
        return ReminderPhase.ARMED

    return {
        SkipReason.WINDOW_INACTIVE: ReminderPhase.INACTIVE,
        SkipReason.TARGET_MET: ReminderPhase.INACTIVE,
        SkipReason.TOO_EARLY: ReminderPhase.WAITING_FOR_TIME,
        SkipReason.ALREADY_SENT_TODAY: ReminderPhase.SENT,
    }[decision.reason]
