"""Application submission pipeline and status transitions.

``submit`` runs the cheap checks first, then stores the CV, then the
motivation letter, then inserts the row. When a step fails, documents stored
by earlier steps are removed in reverse order, so the caller sees either a new
application with both files or nothing at all.

Files and rows live in two separate stores, so the pipeline is not atomic: a
crash after the uploads but before the insert leaves files with no row. Those
are picked up by the ``sweep_orphan_documents`` command.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping

from django.db import DatabaseError

from accounts.context import RequestContext
from jobs.models import Job
from jobs.utils import safe_int
from .models import Application, ApplicationStatus
from .notifications import notify_application_received, notify_status_changed
from .repository import ApplicationRepository
from .results import (
    InvalidStatus,
    NotFound,
    PersistenceFailed,
    StatusResult,
    StatusUpdated,
    Submitted,
    SubmissionResult,
    UploadFailed,
)
from .storage import DocumentStore, StoredDocument
from .validators import cleaned_submission, validate_submission

logger = logging.getLogger(__name__)

VALID_STATUSES = frozenset(ApplicationStatus.values)


class ApplicationWorkflow:
    def __init__(self, documents: DocumentStore | None = None, repository: ApplicationRepository | None = None):
        self.documents = documents or DocumentStore()
        self.repository = repository or ApplicationRepository()

    def _rollback(self, stored: list[StoredDocument]) -> None:
        for doc in reversed(stored):
            self.documents.remove(doc.name, doc.category)

    def submit(
        self,
        job_id,
        data: Mapping,
        files: Mapping,
        context: RequestContext | None = None,
    ) -> SubmissionResult:
        context = context or RequestContext()

        error = validate_submission(data)
        if error is not None:
            logger.info("Application rejected: job_id=%s field=%s", job_id, error.field)
            return error

        job_pk = safe_int(job_id)
        job = Job.objects.active().filter(pk=job_pk).first() if job_pk is not None else None
        if job is None:
            logger.info("Application rejected: job_id=%s not found or inactive", job_id)
            return NotFound(entity="job")

        stored: list[StoredDocument] = []

        cv_upload = files.get("cv")
        cv = self.documents.store(cv_upload, "cv")
        if cv is None:
            return UploadFailed(which="cv", missing=cv_upload is None)
        stored.append(cv)

        motivation_upload = files.get("motivation")
        motivation = self.documents.store(motivation_upload, "motivation")
        if motivation is None:
            self._rollback(stored)
            return UploadFailed(which="motivation", missing=motivation_upload is None)
        stored.append(motivation)

        try:
            application = self.repository.insert(
                job=job,
                user_id=context.user_id,
                fields=cleaned_submission(data),
                cv_file=cv.name,
                motivation_file=motivation.name,
            )
        except DatabaseError:
            logger.exception("Application insert failed: job_id=%s", job.id)
            self._rollback(stored)
            return PersistenceFailed()

        logger.info(
            "Application submitted: app_id=%s job_id=%s user_id=%s",
            application.id,
            job.id,
            context.user_id,
        )
        notify_application_received(application)
        return Submitted(application_id=application.id)

    def update_status(self, application_id, status: str) -> StatusResult:
        status = (status or "").strip()
        if status not in VALID_STATUSES:
            logger.info("Status update rejected: app_id=%s status=%r", application_id, status)
            return InvalidStatus(status=status)

        app_pk = safe_int(application_id)
        if app_pk is None:
            return NotFound(entity="application")
        try:
            self.repository.update_status(app_pk, status)
        except Application.DoesNotExist:
            return NotFound(entity="application")

        logger.info("Application status updated: app_id=%s status=%s", app_pk, status)
        try:
            application = self.repository.get(app_pk)
        except Application.DoesNotExist:
            # Deleted between the UPDATE and this read; the update itself stands.
            logger.warning("Status email skipped: app_id=%s no longer exists", app_pk)
        else:
            notify_status_changed(application)
        return StatusUpdated(application_id=app_pk, status=status)
