import logging

from django.conf import settings
from django.core.mail import send_mail

logger = logging.getLogger(__name__)


def _send(subject: str, message: str, recipients: list[str]) -> bool:
    recipients = [r for r in recipients if r]
    if not recipients:
        return False
    send_mail(
        subject=subject,
        message=message,
        from_email=getattr(settings, "DEFAULT_FROM_EMAIL", "no-reply@pathfinder.local"),
        recipient_list=recipients,
        fail_silently=False,
    )
    return True


def notify_application_received(application) -> None:
    """Tell recruiters about a new application. Never raises."""
    job = application.job
    try:
        sent = _send(
            subject=f"PathFinder: New application for {job.title}",
            message=(
                f"A new application was submitted for '{job.title}' at {job.company}.\n"
                f"Candidate: {application.full_name} <{application.email}>\n"
                f"Application id: {application.id}\n"
            ),
            recipients=list(getattr(settings, "PATHFINDER_NOTIFY_EMAILS", [])),
        )
        if sent:
            logger.info("Recruiter notification sent: app_id=%s job_id=%s", application.id, job.id)
    except Exception:
        logger.exception("Recruiter notification failed: app_id=%s", application.id)


def notify_status_changed(application) -> None:
    """Tell the applicant their application moved to a new status. Never raises."""
    job_title = application.job.title
    status_label = application.get_status_display().upper()
    try:
        _send(
            subject=f"PathFinder: Update on your application for {job_title}",
            message=(
                f"Hello {application.full_name},\n\n"
                f"Your application for '{job_title}' is now {status_label}.\n\n"
                "PathFinder"
            ),
            recipients=[application.email],
        )
        logger.info("Status email sent: app_id=%s status=%s", application.id, application.status)
    except Exception:
        logger.exception("Status email failed: app_id=%s status=%s", application.id, application.status)
