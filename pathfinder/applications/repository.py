from __future__ import annotations

from django.db.models import Count

from .models import Application, ApplicationStatus


class ApplicationRepository:
    """Reads and writes application rows through the ORM (parameterized queries only)."""

    model = Application

    def insert(self, *, job, user_id, fields: dict, cv_file: str, motivation_file: str) -> Application:
        # The job is checked for existence/activity by the caller.
        return self.model.objects.create(
            job=job,
            user_id=user_id,
            full_name=fields["full_name"],
            address=fields["address"],
            phone=fields["phone"],
            email=fields["email"],
            additional_info=fields["additional_info"],
            cv_file=cv_file,
            motivation_file=motivation_file,
        )

    def get(self, application_id) -> Application:
        return self.model.objects.with_job().get(pk=application_id)

    def for_job(self, job_id):
        return self.model.objects.with_job().for_job(job_id).recent()

    def for_user(self, user_id):
        return self.model.objects.with_job().for_user(user_id).recent()

    def list(self, status: str | None = None, limit: int | None = None):
        qs = self.model.objects.with_job().with_status(status).recent()
        if limit is not None and limit > 0:
            qs = qs[:limit]
        return qs

    def update_status(self, application_id, status: str) -> None:
        # One UPDATE statement; the database makes it atomic.
        updated = self.model.objects.filter(pk=application_id).update(status=status)
        if not updated:
            raise Application.DoesNotExist(f"Application {application_id} does not exist")

    def counts_by_status(self) -> dict[str, int]:
        counts = {status: 0 for status in ApplicationStatus.values}
        rows = self.model.objects.order_by().values("status").annotate(count=Count("id"))
        for row in rows:
            counts[row["status"]] = row["count"]
        return counts

    def stats(self, recent: int = 5) -> dict:
        counts = self.counts_by_status()
        latest = self.model.objects.with_job().recent()[:recent]
        return {
            "total_applications": sum(counts.values()),
            "pending_applications": counts[ApplicationStatus.PENDING],
            "reviewed_applications": counts[ApplicationStatus.REVIEWED],
            "hired_applications": counts[ApplicationStatus.HIRED],
            "applications_by_status": [
                {"status": status, "count": count} for status, count in counts.items() if count
            ],
            "recent_applications": [
                {
                    "id": app.id,
                    "full_name": app.full_name,
                    "title": app.job.title,
                    "applied_at": app.applied_at.isoformat(),
                }
                for app in latest
            ],
        }

    def referenced_documents(self) -> dict[str, set[str]]:
        rows = self.model.objects.values_list("cv_file", "motivation_file")
        cvs, letters = set(), set()
        for cv_file, motivation_file in rows:
            cvs.add(cv_file)
            letters.add(motivation_file)
        return {"cv": cvs, "motivation": letters}
