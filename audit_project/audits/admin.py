from django.contrib import admin

from .models import Audit


@admin.register(Audit)
class AuditAdmin(admin.ModelAdmin):
    list_display = (
        "date",
        "auditor",
        "department",
        "shift",
        "line_leader",
        "created_at",
    )
    list_filter = ("shift", "department", "date")
    search_fields = (
        "auditor__username",
        "auditor__full_name",
        "line_leader",
        "shift_incharge",
    )
    autocomplete_fields = ("auditor", "department")
    date_hierarchy = "date"
    ordering = ("-date",)
