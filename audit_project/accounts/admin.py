from datetime import timedelta

from django.conf import settings
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils import timezone

from notifications.exceptions import ReminderError
from notifications.services.reminders.completion import (
    count_completions,
    window_completions,
)
from notifications.services.reminders.decision import reminder_phase

from .models import Department, User
from .services import clear_target_audit


# ============================================================
# DEPARTMENT ADMIN
# ============================================================

@admin.register(Department)
class DepartmentAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "is_active",
        "created_at",
    )

    list_filter = (
        "is_active",
    )

    search_fields = (
        "name",
    )

    ordering = ("name",)


# ============================================================
# USER ADMIN (AUDITORS + TARGETS)
# ============================================================

@admin.register(User)
class UserAdmin(BaseUserAdmin):
    ordering = ("username",)

    list_display = (
        "username",
        "full_name",
        "employee_id",
        "email",
        "role",
        "department",
        "target_quota",
        "target_end_date",
        "reminder_phase_display",
        "stagnant_streak",
        "is_active",
    )

    list_filter = (
        "role",
        "department",
        "is_active",
    )

    search_fields = (
        "username",
        "email",
        "full_name",
        "employee_id",
    )

    autocomplete_fields = ("department",)

    readonly_fields = (
        "last_reminder_date",
        "last_completed_count_at_reminder",
        "stagnant_streak",
    )

    fieldsets = BaseUserAdmin.fieldsets + (
        ("Work Information", {
            "fields": (
                "full_name",
                "employee_id",
                "role",
                "department",
            )
        }),
        ("Audit Target", {
            "fields": (
                "target_quota",
                "target_start_date",
                "target_end_date",
                "target_reminder_time",
            )
        }),
        ("Reminder State", {
            "fields": (
                "last_reminder_date",
                "last_completed_count_at_reminder",
                "stagnant_streak",
            )
        }),
    )

    actions = (
        "reset_reminder_state",
        "clear_target",
    )

    def get_queryset(self, request):
        return super().get_queryset(request).annotate(
            window_audit_count=window_completions()
        )

    # =====================================================
    # DISPLAY HELPERS
    # =====================================================
    def reminder_phase_display(self, obj):
        if not obj.has_target or not obj.target_reminder_time:
            return "-"

        window = obj.target_window()
        try:
            completed = getattr(obj, "window_audit_count", None)
            if completed is None:
                completed = count_completions(obj.pk, window.start_date, window.end_date)
            phase = reminder_phase(
                timezone.localtime(),
                window,
                obj.reminder_state(),
                completed,
                safety_offset=timedelta(
                    seconds=getattr(settings, "TARGET_AUDIT_REMINDER_SAFETY_OFFSET_SECONDS", 15)
                ),
            )
        except ReminderError as exc:
            return f"invalid ({exc})"

        return phase.value.replace("_", " ")

    reminder_phase_display.short_description = "Reminder"

    # =====================================================
    # SAVE: A CHANGED TARGET STARTS A FRESH REMINDER HISTORY
    # =====================================================
    def save_model(self, request, obj, form, change):
        target_fields = {
            "target_quota",
            "target_start_date",
            "target_end_date",
            "target_reminder_time",
        }
        if change and target_fields.intersection(form.changed_data):
            obj.reset_reminder_state(save=False)

        super().save_model(request, obj, form, change)

    # =====================================================
    # ADMIN ACTIONS
    # =====================================================
    @admin.action(description="Reset reminder state (restart stagnation count)")
    def reset_reminder_state(self, request, queryset):
        count = queryset.update(
            last_reminder_date=None,
            last_completed_count_at_reminder=0,
            stagnant_streak=0,
        )
        self.message_user(request, f"{count} reminder state(s) reset.")

    @admin.action(description="Clear audit target")
    def clear_target(self, request, queryset):
        count = 0
        for user in queryset:
            clear_target_audit(user=user, cleared_by=request.user)
            count += 1
        self.message_user(request, f"{count} target(s) cleared.")
