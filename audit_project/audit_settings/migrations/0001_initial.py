import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("accounts", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="AuditEmailSetting",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(default="Default", max_length=150)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
            ],
            options={
                "ordering": ["-created_at", "-id"],
            },
        ),
        migrations.CreateModel(
            name="DepartmentRecipient",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("to", models.CharField(help_text="Primary recipient email(s), comma-separated", max_length=500)),
                ("cc", models.CharField(blank=True, help_text="CC email(s), comma-separated", max_length=500)),
                ("department", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="email_recipients", to="accounts.department")),
                ("setting", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="department_recipients", to="audit_settings.auditemailsetting")),
            ],
            options={
                "constraints": [models.UniqueConstraint(fields=("setting", "department"), name="unique_department_recipient_per_setting")],
            },
        ),
    ]
