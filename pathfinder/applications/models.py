from django.conf import settings
from django.db import models

from jobs.models import Job


class ApplicationStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    REVIEWED = "reviewed", "Reviewed"
    SHORTLISTED = "shortlisted", "Shortlisted"
    REJECTED = "rejected", "Rejected"
    HIRED = "hired", "Hired"


class ApplicationQuerySet(models.QuerySet):
    def with_job(self):
        return self.select_related("job")

    def recent(self):
        return self.order_by("-applied_at", "-id")

    def for_job(self, job_id):
        return self.filter(job_id=job_id)

    def for_user(self, user_id):
        return self.filter(user_id=user_id)

    def with_status(self, status: str | None):
        if not status:
            return self
        return self.filter(status=status)


class Application(models.Model):
    job = models.ForeignKey(Job, on_delete=models.PROTECT, related_name="applications")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="applications",
        null=True,
        blank=True,
    )
    full_name = models.CharField(max_length=255)
    address = models.CharField(max_length=500)
    phone = models.CharField(max_length=50)
    email = models.EmailField()
    # Bare generated filenames inside the cv / motivation document directories.
    cv_file = models.CharField(max_length=255)
    motivation_file = models.CharField(max_length=255)
    additional_info = models.TextField()
    status = models.CharField(
        max_length=20, choices=ApplicationStatus.choices, default=ApplicationStatus.PENDING
    )
    applied_at = models.DateTimeField(auto_now_add=True)

    objects = ApplicationQuerySet.as_manager()

    class Meta:
        ordering = ["-applied_at"]
        indexes = [
            models.Index(fields=["status"], name="application_status_idx"),
            models.Index(fields=["-applied_at"], name="application_applied_idx"),
        ]

    def __str__(self):
        return f"{self.full_name} → {self.job.title}"
