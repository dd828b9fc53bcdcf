from django.contrib import admin

from .models import AuditEmailSetting, DepartmentRecipient


# ---------------------------------------------------------------------
# DEPARTMENT RECIPIENTS (INLINE)
# ---------------------------------------------------------------------
class DepartmentRecipientInline(admin.TabularInline):
    model = DepartmentRecipient
    extra = 0
    autocomplete_fields = ("department",)


# ---------------------------------------------------------------------
# AUDIT EMAIL SETTING ADMIN
# ---------------------------------------------------------------------
@admin.register(AuditEmailSetting)
class AuditEmailSettingAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "department_count",
        "is_active_setting",
        "created_at",
    )
    ordering = ("-created_at",)
    readonly_fields = ("created_at",)
    inlines = [DepartmentRecipientInline]

    def department_count(self, obj):
        return obj.department_recipients.count()

    department_count.short_description = "Departments"

    def is_active_setting(self, obj):
        active = AuditEmailSetting.get_active()
        return active is not None and active.pk == obj.pk

    is_active_setting.boolean = True
    is_active_setting.short_description = "Active"
