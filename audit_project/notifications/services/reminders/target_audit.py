"""
notifications/services/reminders/target_audit.py

One evaluation cycle of the target-audit reminder job.

For every auditor with an active target window:
count completions -> decide -> resolve recipients -> claim the day
-> dispatch. The day is claimed with a conditional update before any
message goes out, so overlapping runs cannot both send and a failed
transport never leads to a second send on the same day.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Callable, Optional

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import Error as DBError
from django.db.models import Q
from django.utils import timezone

from notifications.exceptions import ConfigurationError, DataUnavailable
from notifications.services.reminders.completion import count_completions
from notifications.services.reminders.decision import (
    ReminderState,
    Skip,
    decide,
)
from notifications.services.reminders.dispatch import dispatch
from notifications.services.reminders.recipients import resolve_recipients

logger = logging.getLogger(__name__)

User = get_user_model()


# ============================================================
# CONFIGURATION
# ============================================================

@dataclass(frozen=True)
class ReminderConfig:
    interval: timedelta = timedelta(seconds=10)
    safety_offset: timedelta = timedelta(seconds=15)
    stagnation_threshold: int = 2
    email_timeout: int = 20
    listing_failure_alert_threshold: int = 3
    shutdown_grace: timedelta = timedelta(seconds=30)

    @classmethod
    def from_settings(cls):
        return cls(
            interval=timedelta(
                seconds=getattr(settings, "TARGET_AUDIT_REMINDER_INTERVAL_SECONDS", 10)
            ),
            safety_offset=timedelta(
                seconds=getattr(settings, "TARGET_AUDIT_REMINDER_SAFETY_OFFSET_SECONDS", 15)
            ),
            stagnation_threshold=getattr(settings, "TARGET_AUDIT_STAGNATION_THRESHOLD", 2),
            email_timeout=getattr(settings, "TARGET_AUDIT_EMAIL_TIMEOUT", 20),
            listing_failure_alert_threshold=getattr(
                settings, "TARGET_AUDIT_LISTING_FAILURE_ALERT_THRESHOLD", 3
            ),
            shutdown_grace=timedelta(
                seconds=getattr(settings, "TARGET_AUDIT_SHUTDOWN_GRACE_SECONDS", 30)
            ),
        )


# ============================================================
# RESULTS
# ============================================================

class OutcomeStatus(str, enum.Enum):
    SKIPPED = "skipped"
    REMINDED = "reminded"
    WOULD_REMIND = "would_remind"
    CLAIMED_ELSEWHERE = "claimed_elsewhere"
    FAILED = "failed"


@dataclass
class AuditorOutcome:
    auditor_id: int
    status: OutcomeStatus
    reason: str = ""
    decision: object = None
    dispatch: object = None


@dataclass
class CycleResult:
    candidates: int = 0
    outcomes: list = field(default_factory=list)
    interrupted: bool = False

    def count(self, status):
        return sum(1 for o in self.outcomes if o.status == status)

    @property
    def reminded(self):
        return self.count(OutcomeStatus.REMINDED)

    @property
    def escalated(self):
        return sum(
            1 for o in self.outcomes
            if o.status == OutcomeStatus.REMINDED and o.decision.escalated
        )

    @property
    def skipped(self):
        return self.count(OutcomeStatus.SKIPPED)

    @property
    def failed(self):
        return self.count(OutcomeStatus.FAILED)


# ============================================================
# STORE ACCESS
# ============================================================

def list_active_reminder_candidates(now):
    """
    Coarse filter of auditors who may need a reminder today.
    Exact timing is left to the decision engine.
    """
    today = timezone.localtime(now).date()

    try:
        return list(
            User.objects
            .select_related("department")
            .filter(
                is_active=True,
                role=User.Role.EMPLOYEE,
                target_quota__gt=0,
                target_start_date__lte=today,
                target_end_date__gte=today,
            )
            .exclude(target_reminder_time="")
            .filter(
                Q(last_reminder_date__isnull=True)
                | ~Q(last_reminder_date=today)
            )
            .order_by("pk")
        )
    except DBError as exc:
        raise DataUnavailable(f"could not list reminder candidates: {exc}") from exc


def persist_reminder_state(auditor_id, prior_state: Optional[ReminderState], new_state: ReminderState):
    """
    Compare-and-set on ``last_reminder_date``.
    Returns False when another run already moved the state.
    """
    qs = User.objects.filter(pk=auditor_id)
    if prior_state is None:
        qs = qs.filter(last_reminder_date__isnull=True)
    else:
        qs = qs.filter(last_reminder_date=prior_state.last_reminder_date)

    try:
        updated = qs.update(
            last_reminder_date=new_state.last_reminder_date,
            last_completed_count_at_reminder=new_state.last_completed_count_at_reminder,
            stagnant_streak=new_state.stagnant_streak,
        )
    except DBError as exc:
        raise DataUnavailable(
            f"could not persist reminder state for auditor {auditor_id}: {exc}"
        ) from exc

    return updated == 1


# ============================================================
# PER-AUDITOR UNIT OF WORK
# ============================================================

def process_auditor(auditor, now, *, config: ReminderConfig, dry_run=False) -> AuditorOutcome:
    """
    Raises DataUnavailable / ConfigurationError; the cycle isolates them.
    """
    local_now = timezone.localtime(now)
    window = auditor.target_window()
    prior_state = auditor.reminder_state()

    completed = count_completions(auditor.pk, window.start_date, window.end_date)

    decision = decide(
        local_now,
        window,
        prior_state,
        completed,
        safety_offset=config.safety_offset,
        stagnation_threshold=config.stagnation_threshold,
    )

    if isinstance(decision, Skip):
        return AuditorOutcome(auditor.pk, OutcomeStatus.SKIPPED, decision.reason.value, decision)

    recipients = resolve_recipients(auditor, decision.escalated)

    if dry_run:
        return AuditorOutcome(auditor.pk, OutcomeStatus.WOULD_REMIND, decision=decision)

    if not persist_reminder_state(auditor.pk, prior_state, decision.new_state):
        logger.info(
            "Reminder for auditor %s already claimed by another run today.", auditor.pk
        )
        return AuditorOutcome(auditor.pk, OutcomeStatus.CLAIMED_ELSEWHERE, decision=decision)

    result = dispatch(
        auditor,
        decision,
        recipients,
        now=now,
        email_timeout=config.email_timeout,
    )

    logger.info(
        "Target audit reminder for auditor %s: pending=%s escalated=%s streak=%s "
        "broadcast=%s email=%s",
        auditor.pk,
        decision.pending,
        decision.escalated,
        decision.new_state.stagnant_streak,
        "ok" if result.broadcast_ok else "failed",
        "ok" if result.email_ok else "failed",
    )

    return AuditorOutcome(auditor.pk, OutcomeStatus.REMINDED, decision=decision, dispatch=result)


# ============================================================
# CYCLE
# ============================================================

def run_target_audit_reminder_cycle(
    now=None,
    *,
    config: Optional[ReminderConfig] = None,
    should_stop: Optional[Callable[[], bool]] = None,
    dry_run=False,
) -> CycleResult:
    """
    Evaluate every active candidate once.

    Per-auditor failures are logged and isolated. A failure of the
    candidate query itself raises DataUnavailable.
    """
    now = now or timezone.now()
    config = config or ReminderConfig.from_settings()

    candidates = list_active_reminder_candidates(now)
    result = CycleResult(candidates=len(candidates))

    for auditor in candidates:
        if should_stop is not None and should_stop():
            logger.warning(
                "Reminder cycle interrupted by shutdown after %s of %s auditors.",
                len(result.outcomes), len(candidates),
            )
            result.interrupted = True
            break

        try:
            outcome = process_auditor(auditor, now, config=config, dry_run=dry_run)
        except ConfigurationError as exc:
            logger.warning("Skipping auditor %s: invalid target configuration: %s", auditor.pk, exc)
            outcome = AuditorOutcome(auditor.pk, OutcomeStatus.FAILED, reason=str(exc))
        except DataUnavailable as exc:
            logger.error("Skipping auditor %s this cycle: %s", auditor.pk, exc)
            outcome = AuditorOutcome(auditor.pk, OutcomeStatus.FAILED, reason=str(exc))
        except Exception as exc:
            logger.exception("Unexpected error while processing auditor %s", auditor.pk)
            outcome = AuditorOutcome(auditor.pk, OutcomeStatus.FAILED, reason=str(exc))

        result.outcomes.append(outcome)

    return result
