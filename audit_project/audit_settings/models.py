from django.db import models

from accounts.models import Department


def split_addresses(value):
    """Split a comma-separated address string, dropping blanks."""
    return [part.strip() for part in (value or "").split(",") if part.strip()]


class AuditEmailSetting(models.Model):
    """
    Email recipient configuration for audit notifications.

    The most recently created row is treated as the active configuration.
    """

    name = models.CharField(max_length=150, default="Default")
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.name} ({self.created_at:%Y-%m-%d})" if self.created_at else self.name

    @classmethod
    def get_active(cls):
        return cls.objects.order_by("-created_at", "-id").first()


class DepartmentRecipient(models.Model):
    """
    Supervisory contacts of one department, copied on escalated reminders.
    """

    setting = models.ForeignKey(
        AuditEmailSetting,
        on_delete=models.CASCADE,
        related_name="department_recipients"
    )
    department = models.ForeignKey(
        Department,
        on_delete=models.CASCADE,
        related_name="email_recipients"
    )

    to = models.CharField(
        max_length=500,
        help_text="Primary recipient email(s), comma-separated"
    )
    cc = models.CharField(
        max_length=500,
        blank=True,
        help_text="CC email(s), comma-separated"
    )

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["setting", "department"],
                name="unique_department_recipient_per_setting",
            ),
        ]

    def __str__(self):
        return f"{self.department.name} → {self.to}"

    @property
    def to_addresses(self):
        return split_addresses(self.to)

    @property
    def cc_addresses(self):
        return split_addresses(self.cc)
