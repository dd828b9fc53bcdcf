"""
notifications/services/reminders/recipients.py

Resolves who receives a target-audit reminder.

The auditor is always addressed. Escalated reminders are widened
with the supervisory contacts configured for the auditor's
department in the active AuditEmailSetting.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from django.db import Error as DBError

from audit_settings.models import AuditEmailSetting, split_addresses
from notifications.exceptions import DataUnavailable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecipientSet:
    to: tuple
    cc: tuple
    escalated: bool = False

    def __bool__(self):
        return bool(self.to)


def get_escalation_recipients(department_id) -> Optional[dict]:
    """
    Supervisory ``{"to": [...], "cc": [...]}`` for a department,
    or None when the active setting has no entry for it.
    """
    if department_id is None:
        return None

    try:
        setting = AuditEmailSetting.get_active()
        if setting is None:
            return None

        entry = (
            setting.department_recipients
            .filter(department_id=department_id)
            .first()
        )
    except DBError as exc:
        raise DataUnavailable(
            f"could not load escalation recipients for department {department_id}: {exc}"
        ) from exc

    if entry is None:
        return None

    return {
        "to": entry.to_addresses,
        "cc": entry.cc_addresses,
    }


def _normalize(addresses: Iterable[str], seen: set) -> list:
    result = []
    for raw in addresses:
        for address in split_addresses(raw):
            key = address.lower()
            if key in seen:
                continue
            seen.add(key)
            result.append(address)
    return result


def resolve_recipients(auditor, escalated, *, lookup=get_escalation_recipients) -> RecipientSet:
    to = [auditor.email or ""]
    cc = []

    if escalated:
        config = lookup(auditor.department_id)
        if config:
            to.extend(config.get("to") or [])
            cc.extend(config.get("cc") or [])
        else:
            logger.info(
                "No escalation recipients configured for department %s; "
                "escalated reminder for auditor %s goes to the auditor only.",
                auditor.department_id, auditor.pk,
            )

    # Case-insensitive dedupe across both lists; "to" wins over "cc".
    seen = set()
    to_addresses = _normalize(to, seen)
    cc_addresses = _normalize(cc, seen)

    return RecipientSet(
        to=tuple(to_addresses),
        cc=tuple(cc_addresses),
        escalated=bool(escalated),
    )
