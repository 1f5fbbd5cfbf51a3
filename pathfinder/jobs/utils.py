from datetime import datetime

from django.utils import timezone


def time_ago(when: datetime | None, *, now: datetime | None = None) -> str:
    """Human-readable age such as "3 hours ago"."""
    if when is None:
        return ""
    now = now or timezone.now()
    seconds = int((now - when).total_seconds())

    if seconds < 60:
        return "just now"
    if seconds < 3600:
        return f"{seconds // 60} minutes ago"
    if seconds < 86400:
        return f"{seconds // 3600} hours ago"
    if seconds < 2592000:
        return f"{seconds // 86400} days ago"
    if seconds < 31104000:
        return f"{seconds // 2592000} months ago"
    return f"{seconds // 31104000} years ago"


def format_salary_range(salary_min: int | None, salary_max: int | None) -> str:
    if not salary_min and not salary_max:
        return "Salary not specified"
    if not salary_max:
        return f"${salary_min:,}+"
    if not salary_min:
        return f"Up to ${salary_max:,}"
    return f"${salary_min:,} - ${salary_max:,}"


def safe_int(v):
    try:
        if v is None or v == "":
            return None
        return int(v)
    except (TypeError, ValueError):
        return None


def serialize_job(job) -> dict:
    category = job.category
    return {
        "id": job.id,
        "title": job.title,
        "company": job.company,
        "location": job.location,
        "description": job.description,
        "requirements": job.requirements,
        "salary_min": job.salary_min,
        "salary_max": job.salary_max,
        "job_type": job.job_type,
        "category_id": job.category_id,
        "category_name": category.name if category else None,
        "category_slug": category.slug if category else None,
        "is_active": job.is_active,
        "created_at": job.created_at.isoformat() if job.created_at else None,
        "updated_at": job.updated_at.isoformat() if job.updated_at else None,
        "salary_range": format_salary_range(job.salary_min, job.salary_max),
        "created_ago": time_ago(job.created_at),
    }
