from jobs.utils import time_ago

STATUS_COLORS = {
    "pending": "orange",
    "reviewed": "blue",
    "shortlisted": "green",
    "rejected": "red",
    "hired": "purple",
}


def status_color(status: str) -> str:
    return STATUS_COLORS.get(status, "gray")


def serialize_application(app, *, with_color: bool = False) -> dict:
    """Application row plus the denormalized job fields the dashboards show."""
    job = app.job
    data = {
        "id": app.id,
        "job_id": app.job_id,
        "user_id": app.user_id,
        "job_title": job.title,
        "company": job.company,
        "location": job.location,
        "full_name": app.full_name,
        "address": app.address,
        "phone": app.phone,
        "email": app.email,
        "cv_file": app.cv_file,
        "motivation_file": app.motivation_file,
        "additional_info": app.additional_info,
        "status": app.status,
        "status_label": app.status.capitalize(),
        "applied_at": app.applied_at.isoformat() if app.applied_at else None,
        "applied_ago": time_ago(app.applied_at),
    }
    if with_color:
        data["status_color"] = status_color(app.status)
    return data
