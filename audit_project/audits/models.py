from django.conf import settings
from django.db import models

from accounts.models import Department


class Audit(models.Model):
    """
    A completed shop-floor audit.

    Counts toward the auditor's target when ``date`` falls inside
    the auditor's target window.
    """

    class Shift(models.TextChoices):
        SHIFT_1 = "Shift 1", "Shift 1"
        SHIFT_2 = "Shift 2", "Shift 2"
        SHIFT_3 = "Shift 3", "Shift 3"

    auditor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="audits"
    )

    # Employee department at time of audit (optional)
    department = models.ForeignKey(
        Department,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="audits"
    )

    date = models.DateField(db_index=True)

    line_leader = models.CharField(max_length=100, blank=True)
    shift = models.CharField(
        max_length=10,
        choices=Shift.choices,
        blank=True,
    )
    shift_incharge = models.CharField(max_length=100, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-date", "-created_at"]
        indexes = [
            models.Index(fields=["auditor", "date"], name="audit_auditor_date_idx"),
        ]

    def __str__(self):
        return f"Audit by {self.auditor} on {self.date}"
