from django.contrib.auth.models import AbstractUser
from django.core.exceptions import ValidationError
from django.core.validators import RegexValidator
from django.db import models


REMINDER_TIME_VALIDATOR = RegexValidator(
    regex=r"^([01]\d|2[0-3]):[0-5]\d$",
    message="Reminder time must be in HH:mm format (24-hour).",
)


class Department(models.Model):
    name = models.CharField(max_length=150, unique=True)
    description = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name


class User(AbstractUser):
    """
    Employee account. Users with the ``employee`` role are auditors
    and may carry an audit target window plus its reminder state.
    """

    class Role(models.TextChoices):
        EMPLOYEE = "employee", "Employee (Auditor)"
        ADMIN = "admin", "Admin"
        SUPERADMIN = "superadmin", "Super Admin"

    full_name = models.CharField(max_length=150, blank=True)
    employee_id = models.CharField(max_length=50, blank=True, db_index=True)

    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.EMPLOYEE,
        db_index=True,
    )

    department = models.ForeignKey(
        Department,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="users"
    )

    # =====================================================
    # TARGET WINDOW (set by an administrator)
    # =====================================================
    target_quota = models.PositiveIntegerField(
        null=True,
        blank=True,
        help_text="Number of audits expected inside the target window"
    )
    target_start_date = models.DateField(null=True, blank=True)
    target_end_date = models.DateField(null=True, blank=True)
    target_reminder_time = models.CharField(
        max_length=5,
        blank=True,
        validators=[REMINDER_TIME_VALIDATOR],
        help_text="Daily reminder time in HH:mm (24h, server local time)"
    )

    # =====================================================
    # REMINDER STATE (written only by the reminder job)
    # =====================================================
    last_reminder_date = models.DateField(
        null=True,
        blank=True,
        help_text="Local calendar date of the last reminder sent"
    )
    last_completed_count_at_reminder = models.PositiveIntegerField(default=0)
    stagnant_streak = models.PositiveIntegerField(
        default=0,
        help_text="Consecutive reminders sent without any new audit"
    )

    class Meta(AbstractUser.Meta):
        indexes = [
            models.Index(
                fields=["role", "target_start_date", "target_end_date"],
                name="user_role_target_window_idx",
            ),
        ]

    def __str__(self):
        name = self.full_name or self.get_full_name()
        return f"{name} ({self.username})" if name else self.username

    @property
    def display_name(self):
        return self.full_name or self.get_full_name() or self.username

    @property
    def has_target(self):
        return bool(
            self.target_quota
            and self.target_start_date
            and self.target_end_date
        )

    def target_window(self):
        from notifications.services.reminders.decision import TargetWindow

        return TargetWindow(
            quota=self.target_quota or 0,
            start_date=self.target_start_date,
            end_date=self.target_end_date,
            reminder_time=self.target_reminder_time,
        )

    def reminder_state(self):
        """Return the persisted ReminderState, or None if nothing was sent yet."""
        from notifications.services.reminders.decision import ReminderState

        if self.last_reminder_date is None:
            return None

        return ReminderState(
            last_reminder_date=self.last_reminder_date,
            last_completed_count_at_reminder=self.last_completed_count_at_reminder,
            stagnant_streak=self.stagnant_streak,
        )

    def reset_reminder_state(self, save=True):
        self.last_reminder_date = None
        self.last_completed_count_at_reminder = 0
        self.stagnant_streak = 0
        if save:
            self.save(update_fields=[
                "last_reminder_date",
                "last_completed_count_at_reminder",
                "stagnant_streak",
            ])

    def clean(self):
        super().clean()

        if self.target_quota is not None and self.target_quota <= 0:
            raise ValidationError({"target_quota": "Target total must be a positive number."})

        if (
            self.target_start_date
            and self.target_end_date
            and self.target_start_date > self.target_end_date
        ):
            raise ValidationError({"target_end_date": "Start date cannot be after end date."})

        if self.target_quota and self.role != self.Role.EMPLOYEE:
            raise ValidationError(
                "Target audits can only be set for employee (auditor) users."
            )
