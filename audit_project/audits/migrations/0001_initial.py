import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("accounts", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Audit",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateField(db_index=True)),
                ("line_leader", models.CharField(blank=True, max_length=100)),
                ("shift", models.CharField(blank=True, choices=[("Shift 1", "Shift 1"), ("Shift 2", "Shift 2"), ("Shift 3", "Shift 3")], max_length=10)),
                ("shift_incharge", models.CharField(blank=True, max_length=100)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("auditor", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="audits", to=settings.AUTH_USER_MODEL)),
                ("department", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="audits", to="accounts.department")),
            ],
            options={
                "ordering": ["-date", "-created_at"],
                "indexes": [models.Index(fields=["auditor", "date"], name="audit_auditor_date_idx")],
            },
        ),
    ]
