from django.db import models
from django.db.models import Q


class JobCategory(models.Model):
    name = models.CharField(max_length=100)
    slug = models.SlugField(max_length=100, unique=True)

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "job categories"

    def __str__(self):
        return self.name


class JobQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)

    def recent(self):
        return self.order_by("-created_at", "-id")

    def in_category(self, slug: str | None):
        if not slug:
            return self
        return self.filter(category__slug=slug)

    def search(self, q: str | None):
        """Case-insensitive match on title, company or description."""
        q = (q or "").strip()
        if not q:
            return self
        return self.filter(
            Q(title__icontains=q) | Q(company__icontains=q) | Q(description__icontains=q)
        )


class Job(models.Model):
    title = models.CharField(max_length=255)
    company = models.CharField(max_length=255)
    location = models.CharField(max_length=255)
    description = models.TextField()
    requirements = models.TextField(blank=True, default="")
    salary_min = models.PositiveIntegerField(blank=True, null=True)
    salary_max = models.PositiveIntegerField(blank=True, null=True)
    job_type = models.CharField(max_length=50, default="Full-time")
    category = models.ForeignKey(
        JobCategory, on_delete=models.PROTECT, related_name="jobs", null=True, blank=True
    )
    # Jobs are never physically deleted through the API; they are deactivated.
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = JobQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.title} @ {self.company}"

    def deactivate(self) -> None:
        self.is_active = False
        self.save(update_fields=["is_active", "updated_at"])
