from django import forms
from django.core.exceptions import ValidationError

from .models import User


class TargetAuditForm(forms.ModelForm):
    """
    Admin-side validation of an auditor's target window.
    """

    target_quota = forms.IntegerField(label="Target total", min_value=1)
    target_start_date = forms.DateField(label="Start date")
    target_end_date = forms.DateField(label="End date")

    class Meta:
        model = User
        fields = [
            "target_quota",
            "target_start_date",
            "target_end_date",
            "target_reminder_time",
        ]

    # ----------------------------
    # VALIDATION
    # ----------------------------
    def clean_target_reminder_time(self):
        return (self.cleaned_data.get("target_reminder_time") or "").strip()

    def clean(self):
        cleaned_data = super().clean()

        start = cleaned_data.get("target_start_date")
        end = cleaned_data.get("target_end_date")

        if start and end and start > end:
            raise ValidationError("Start date cannot be after end date.")

        return cleaned_data
