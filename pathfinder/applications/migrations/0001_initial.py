from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("jobs", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Application",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("full_name", models.CharField(max_length=255)),
                ("address", models.CharField(max_length=500)),
                ("phone", models.CharField(max_length=50)),
                ("email", models.EmailField(max_length=254)),
                ("cv_file", models.CharField(max_length=255)),
                ("motivation_file", models.CharField(max_length=255)),
                ("additional_info", models.TextField()),
                ("status", models.CharField(choices=[("pending", "Pending"), ("reviewed", "Reviewed"), ("shortlisted", "Shortlisted"), ("rejected", "Rejected"), ("hired", "Hired")], default="pending", max_length=20)),
                ("applied_at", models.DateTimeField(auto_now_add=True)),
                ("job", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="applications", to="jobs.job")),
                ("user", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="applications", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-applied_at"],
                "indexes": [
                    models.Index(fields=["status"], name="application_status_idx"),
                    models.Index(fields=["-applied_at"], name="application_applied_idx"),
                ],
            },
        ),
    ]
