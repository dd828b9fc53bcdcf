from datetime import date, datetime

from django.contrib.auth import get_user_model
from django.utils import timezone

from audits.models import Audit

User = get_user_model()


def make_auditor(username="auditor", **overrides):
    fields = {
        "email": f"{username}@example.com",
        "full_name": username.title(),
        "employee_id": username.upper(),
        "role": User.Role.EMPLOYEE,
        "target_quota": 10,
        "target_start_date": date(2024, 1, 1),
        "target_end_date": date(2024, 1, 10),
        "target_reminder_time": "09:00",
    }
    fields.update(overrides)
    return User.objects.create_user(username=username, password="pass12345", **fields)


def make_audits(auditor, count, on=date(2024, 1, 2)):
    Audit.objects.bulk_create([
        Audit(auditor=auditor, department=auditor.department, date=on)
        for _ in range(count)
    ])


def local(year, month, day, hour=0, minute=0, second=0):
    """Aware datetime in the active TIME_ZONE."""
    return timezone.make_aware(datetime(year, month, day, hour, minute, second))
