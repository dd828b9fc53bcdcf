"""
notifications/services/reminders/completion.py

Counts the audits an auditor completed inside a target window.
"""

import logging

from django.db import Error as DBError
from django.db.models import Count, F, Q

from audits.models import Audit
from notifications.exceptions import DataUnavailable

logger = logging.getLogger(__name__)


def count_completions(auditor_id, start_date, end_date):
    """
    Number of audits owned by ``auditor_id`` dated within
    [start_date, end_date], both ends inclusive.
    """
    try:
        return Audit.objects.filter(
            auditor_id=auditor_id,
            date__gte=start_date,
            date__lte=end_date,
        ).count()
    except DBError as exc:
        raise DataUnavailable(
            f"could not count audits for auditor {auditor_id}: {exc}"
        ) from exc


def window_completions():
    """
    Per-row count of audits inside the auditor's own target window,
    for ``annotate()`` on a User queryset.
    """
    return Count(
        "audits",
        filter=Q(
            audits__date__gte=F("target_start_date"),
            audits__date__lte=F("target_end_date"),
        ),
    )
