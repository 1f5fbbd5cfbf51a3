import os
import shutil
import tempfile
import time
from io import StringIO
from pathlib import Path
from unittest import mock

from django.core import mail
from django.core.files.storage import FileSystemStorage
from django.core.files.uploadedfile import SimpleUploadedFile
from django.core.management import call_command
from django.db import DatabaseError
from django.test import SimpleTestCase, TestCase, override_settings
from django.urls import reverse

from accounts.context import RequestContext
from accounts.models import User
from jobs.models import Job, JobCategory
from .models import Application, ApplicationStatus
from .repository import ApplicationRepository
from .results import (
    InvalidStatus,
    NotFound,
    PersistenceFailed,
    StatusUpdated,
    Submitted,
    UploadFailed,
    ValidationFailed,
)
from .services import ApplicationWorkflow
from .storage import DocumentStore, StoredDocument, extension_of
from .validators import REQUIRED_FIELDS, is_valid_email, validate_submission


def pdf(name="cv.pdf"):
    return SimpleUploadedFile(name, b"%PDF-1.4 test cv", content_type="application/pdf")


def docx(name="letter.docx"):
    return SimpleUploadedFile(
        name,
        b"PK\x03\x04 test letter",
        content_type="application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    )


def form_data(**overrides):
    data = {
        "full_name": "Jane Doe",
        "address": "1 Main Street, Springfield",
        "phone": "+1-555-0100",
        "email": "jane@x.com",
        "additional_info": "Available from next month.",
    }
    data.update(overrides)
    return data


class UploadRootMixin:
    """Point the document store at a scratch directory for each test."""

    def setUp(self):
        super().setUp()
        self.upload_root = Path(tempfile.mkdtemp(prefix="pathfinder-test-"))
        self.addCleanup(shutil.rmtree, self.upload_root, ignore_errors=True)
        override = override_settings(PATHFINDER_UPLOAD_ROOT=self.upload_root)
        override.enable()
        self.addCleanup(override.disable)
        self.store = DocumentStore()

    def stored(self, category):
        return self.store.list_names(category)

    def assertNothingStored(self):
        self.assertEqual(self.stored("cv"), [])
        self.assertEqual(self.stored("motivation"), [])


class ValidatorTests(SimpleTestCase):
    def test_complete_submission_passes(self):
        self.assertIsNone(validate_submission(form_data()))

    def test_each_missing_field_is_named(self):
        for field in REQUIRED_FIELDS:
            with self.subTest(field=field):
                result = validate_submission(form_data(**{field: ""}))
                self.assertEqual(result, ValidationFailed(field=field))

    def test_first_missing_field_wins(self):
        result = validate_submission(form_data(phone="", email="", additional_info=""))
        self.assertEqual(result.field, "phone")
        self.assertEqual(result.message, "Field 'phone' is required")

    def test_whitespace_counts_as_missing(self):
        self.assertEqual(validate_submission(form_data(address="   ")).field, "address")

    def test_missing_field_reported_before_bad_email(self):
        result = validate_submission(form_data(email="not-an-email", full_name=""))
        self.assertEqual(result.field, "full_name")

    def test_bad_email(self):
        result = validate_submission(form_data(email="not-an-email"))
        self.assertEqual(result, ValidationFailed(field="email"))
        self.assertIn("email", result.message)

    def test_email_grammar(self):
        self.assertTrue(is_valid_email("jane@x.com"))
        self.assertTrue(is_valid_email("first.last+tag@sub.example.org"))
        self.assertFalse(is_valid_email("jane@"))
        self.assertFalse(is_valid_email("jane x@example.com"))
        self.assertFalse(is_valid_email(""))


class DocumentStoreTests(UploadRootMixin, SimpleTestCase):
    def test_store_writes_into_category_directory(self):
        doc = self.store.store(pdf(), "cv")
        self.assertIsInstance(doc, StoredDocument)
        self.assertTrue(doc.name.endswith(".pdf"))
        self.assertTrue((self.upload_root / "cvs" / doc.name).exists())

        letter = self.store.store(docx(), "motivation")
        self.assertTrue((self.upload_root / "motivation_letters" / letter.name).exists())

    def test_directory_created_lazily(self):
        self.assertFalse((self.upload_root / "cvs").exists())
        self.store.store(pdf(), "cv")
        self.assertTrue((self.upload_root / "cvs").is_dir())

    def test_extension_check_is_case_insensitive(self):
        doc = self.store.store(pdf("MY_CV.PDF"), "cv")
        self.assertIsNotNone(doc)
        self.assertTrue(doc.name.endswith(".pdf"))

    def test_disallowed_extension_rejected_without_writing(self):
        self.assertIsNone(self.store.store(SimpleUploadedFile("cv.exe", b"MZ"), "cv"))
        self.assertIsNone(self.store.store(SimpleUploadedFile("cv", b"no extension"), "cv"))
        self.assertEqual(self.stored("cv"), [])

    def test_dot_only_name_keeps_its_extension(self):
        doc = self.store.store(pdf(".pdf"), "cv")
        self.assertIsNotNone(doc)
        self.assertTrue(doc.name.endswith(".pdf"))
        self.assertEqual(extension_of("cv."), "")
        self.assertEqual(extension_of("archive.tar.DOCX"), "docx")

    def test_missing_upload_rejected(self):
        self.assertIsNone(self.store.store(None, "cv"))

    def test_generated_names_are_distinct(self):
        names = {self.store.store(pdf(), "cv").name for _ in range(5)}
        self.assertEqual(len(names), 5)

    def test_storage_error_reported_as_failure(self):
        with mock.patch.object(FileSystemStorage, "save", side_effect=OSError("disk full")):
            self.assertIsNone(self.store.store(pdf(), "cv"))

    def test_remove_deletes_file(self):
        doc = self.store.store(pdf(), "cv")
        self.store.remove(doc.name, "cv")
        self.assertFalse(self.store.exists(doc.name, "cv"))

    def test_remove_missing_file_is_quiet(self):
        self.store.remove("does-not-exist.pdf", "cv")

    def test_remove_failure_is_logged_not_raised(self):
        doc = self.store.store(pdf(), "cv")
        with mock.patch.object(FileSystemStorage, "delete", side_effect=OSError("busy")):
            with self.assertLogs("applications.storage", level="WARNING") as logs:
                self.store.remove(doc.name, "cv")
        self.assertIn("Orphan candidate", logs.output[0])

    def test_unknown_category(self):
        with self.assertRaises(ValueError):
            self.store.store(pdf(), "photo")

    def test_reference_must_be_a_bare_name(self):
        self.assertFalse(self.store.exists("../settings.py", "cv"))
        self.assertFalse(DocumentStore.is_valid_reference(""))
        self.assertTrue(DocumentStore.is_valid_reference("abc_123.pdf"))


class WorkflowTestBase(UploadRootMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.category = JobCategory.objects.create(name="Engineering", slug="engineering")
        self.job = Job.objects.create(
            id=5,
            title="Backend Developer",
            company="ACME",
            location="Remote",
            description="Build APIs",
            category=self.category,
        )
        self.closed_job = Job.objects.create(
            title="Closed Role",
            company="ACME",
            location="London",
            description="No longer hiring",
            category=self.category,
            is_active=False,
        )
        self.workflow = ApplicationWorkflow()

    def submit(self, job_id=5, data=None, cv=True, motivation=True, context=None):
        files = {}
        if cv is True:
            files["cv"] = pdf()
        elif cv:
            files["cv"] = cv
        if motivation is True:
            files["motivation"] = docx()
        elif motivation:
            files["motivation"] = motivation
        return self.workflow.submit(job_id, data if data is not None else form_data(), files, context)


class SubmitWorkflowTests(WorkflowTestBase):
    def test_successful_submission(self):
        result = self.submit()
        self.assertIsInstance(result, Submitted)

        app = Application.objects.get(pk=result.application_id)
        self.assertEqual(app.job, self.job)
        self.assertIsNone(app.user)
        self.assertEqual(app.full_name, "Jane Doe")
        self.assertEqual(app.email, "jane@x.com")
        self.assertEqual(app.status, ApplicationStatus.PENDING)
        self.assertTrue(self.store.exists(app.cv_file, "cv"))
        self.assertTrue(self.store.exists(app.motivation_file, "motivation"))

    def test_fields_are_trimmed(self):
        result = self.submit(data=form_data(full_name="  Jane Doe  "))
        self.assertEqual(Application.objects.get(pk=result.application_id).full_name, "Jane Doe")

    def test_user_taken_from_context(self):
        user = User.objects.create_user(username="u@example.com", email="u@example.com", password="secret1")
        result = self.submit(context=RequestContext(user_id=user.pk))
        self.assertEqual(Application.objects.get(pk=result.application_id).user, user)

    def test_missing_field_has_no_side_effects(self):
        for field in REQUIRED_FIELDS:
            with self.subTest(field=field):
                result = self.submit(data=form_data(**{field: ""}))
                self.assertEqual(result, ValidationFailed(field=field))
        self.assertEqual(Application.objects.count(), 0)
        self.assertNothingStored()

    def test_bad_email_fails_before_upload(self):
        with mock.patch.object(DocumentStore, "store") as store:
            result = self.submit(data=form_data(email="not-an-email"))
        self.assertEqual(result, ValidationFailed(field="email"))
        store.assert_not_called()
        self.assertEqual(Application.objects.count(), 0)

    def test_inactive_or_absent_job(self):
        for job_id in (self.closed_job.id, 9999, "abc"):
            with self.subTest(job_id=job_id):
                result = self.submit(job_id=job_id)
                self.assertEqual(result, NotFound(entity="job"))
                self.assertEqual(result.message, "Job not found")
        self.assertEqual(Application.objects.count(), 0)
        self.assertNothingStored()

    def test_bad_cv_extension_stores_nothing(self):
        result = self.submit(cv=SimpleUploadedFile("cv.txt", b"plain text"))
        self.assertEqual(result, UploadFailed(which="cv"))
        self.assertEqual(result.message, "Failed to upload CV file")
        self.assertNothingStored()
        self.assertEqual(Application.objects.count(), 0)

    def test_missing_cv(self):
        result = self.submit(cv=None)
        self.assertEqual(result, UploadFailed(which="cv", missing=True))
        self.assertEqual(result.message, "CV file is required")
        self.assertNothingStored()

    def test_cv_storage_error(self):
        with mock.patch.object(FileSystemStorage, "save", side_effect=OSError("disk full")):
            result = self.submit()
        self.assertEqual(result, UploadFailed(which="cv"))
        self.assertEqual(Application.objects.count(), 0)

    def test_motivation_failure_rolls_back_cv(self):
        result = self.submit(motivation=SimpleUploadedFile("letter.png", b"\x89PNG"))
        self.assertEqual(result, UploadFailed(which="motivation"))
        self.assertEqual(result.message, "Failed to upload motivation letter")
        self.assertNothingStored()
        self.assertEqual(Application.objects.count(), 0)

        # A corrected retry goes through cleanly.
        retry = self.submit()
        self.assertIsInstance(retry, Submitted)
        self.assertEqual(len(self.stored("cv")), 1)
        self.assertEqual(len(self.stored("motivation")), 1)
        self.assertEqual(Application.objects.count(), 1)

    def test_missing_motivation_rolls_back_cv(self):
        result = self.submit(motivation=None)
        self.assertEqual(result.message, "Motivation letter is required")
        self.assertNothingStored()

    def test_insert_failure_rolls_back_both_uploads(self):
        with mock.patch.object(ApplicationRepository, "insert", side_effect=DatabaseError("db down")):
            with self.assertLogs("applications.services", level="ERROR"):
                result = self.submit()
        self.assertIsInstance(result, PersistenceFailed)
        self.assertEqual(result.http_status, 500)
        self.assertNotIn("db down", result.message)
        self.assertNothingStored()
        self.assertEqual(Application.objects.count(), 0)

    def test_rollback_runs_in_reverse_order(self):
        documents = mock.Mock(spec=DocumentStore)
        documents.store.side_effect = [
            StoredDocument("a.pdf", "cv"),
            StoredDocument("b.docx", "motivation"),
        ]
        repository = mock.Mock(spec=ApplicationRepository)
        repository.insert.side_effect = DatabaseError("db down")

        workflow = ApplicationWorkflow(documents=documents, repository=repository)
        result = workflow.submit(5, form_data(), {"cv": pdf(), "motivation": docx()})

        self.assertIsInstance(result, PersistenceFailed)
        self.assertEqual(
            documents.remove.call_args_list,
            [mock.call("b.docx", "motivation"), mock.call("a.pdf", "cv")],
        )

    @override_settings(PATHFINDER_NOTIFY_EMAILS=["hr@example.com"])
    def test_recruiters_notified(self):
        self.submit()
        self.assertEqual(len(mail.outbox), 1)
        self.assertIn("Backend Developer", mail.outbox[0].subject)
        self.assertEqual(mail.outbox[0].to, ["hr@example.com"])

    @override_settings(PATHFINDER_NOTIFY_EMAILS=["hr@example.com"])
    def test_notification_failure_does_not_fail_submission(self):
        with mock.patch("applications.notifications.send_mail", side_effect=ConnectionError("smtp down")):
            result = self.submit()
        self.assertIsInstance(result, Submitted)
        self.assertEqual(Application.objects.count(), 1)


class StatusWorkflowTests(WorkflowTestBase):
    def setUp(self):
        super().setUp()
        self.app_id = self.submit().application_id

    def status(self):
        return Application.objects.get(pk=self.app_id).status

    def test_update_to_each_status(self):
        for status in ApplicationStatus.values:
            with self.subTest(status=status):
                result = self.workflow.update_status(self.app_id, status)
                self.assertEqual(result, StatusUpdated(application_id=self.app_id, status=status))
                self.assertEqual(self.status(), status)

    def test_any_transition_is_allowed(self):
        self.workflow.update_status(self.app_id, "hired")
        result = self.workflow.update_status(self.app_id, "pending")
        self.assertIsInstance(result, StatusUpdated)
        self.assertEqual(self.status(), "pending")

    def test_invalid_status_leaves_row_unchanged(self):
        self.workflow.update_status(self.app_id, "reviewed")
        for bad in ("approved", "HIRED", ""):
            with self.subTest(status=bad):
                result = self.workflow.update_status(self.app_id, bad)
                self.assertIsInstance(result, InvalidStatus)
                self.assertEqual(self.status(), "reviewed")

    def test_unknown_application(self):
        self.assertEqual(self.workflow.update_status(424242, "reviewed"), NotFound(entity="application"))
        self.assertEqual(self.workflow.update_status("x", "reviewed"), NotFound(entity="application"))

    def test_row_gone_before_email_still_reports_update(self):
        mail.outbox.clear()
        with mock.patch.object(ApplicationRepository, "get", side_effect=Application.DoesNotExist):
            result = self.workflow.update_status(self.app_id, "rejected")
        self.assertEqual(result, StatusUpdated(application_id=self.app_id, status="rejected"))
        self.assertEqual(mail.outbox, [])

    def test_applicant_emailed_on_change(self):
        mail.outbox.clear()
        self.workflow.update_status(self.app_id, "shortlisted")
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ["jane@x.com"])
        self.assertIn("SHORTLISTED", mail.outbox[0].body)


class RepositoryTests(WorkflowTestBase):
    def setUp(self):
        super().setUp()
        self.repo = ApplicationRepository()
        self.user = User.objects.create_user(username="seeker@example.com", email="seeker@example.com", password="secret1")
        self.ids = [
            self.submit().application_id,
            self.submit(context=RequestContext(user_id=self.user.pk)).application_id,
            self.submit(context=RequestContext(user_id=self.user.pk)).application_id,
        ]
        self.repo.update_status(self.ids[0], "hired")
        self.repo.update_status(self.ids[1], "reviewed")

    def test_update_status_missing_row(self):
        with self.assertRaises(Application.DoesNotExist):
            self.repo.update_status(999, "reviewed")

    def test_counts_by_status_zero_filled(self):
        self.assertEqual(
            self.repo.counts_by_status(),
            {"pending": 1, "reviewed": 1, "shortlisted": 0, "rejected": 0, "hired": 1},
        )

    def test_list_filters_and_limits(self):
        self.assertEqual([a.id for a in self.repo.list(status="hired")], [self.ids[0]])
        self.assertEqual(len(self.repo.list(limit=2)), 2)
        self.assertEqual([a.id for a in self.repo.list()], list(reversed(self.ids)))
        self.assertEqual(list(self.repo.list(status="shortlisted")), [])

    def test_for_user_and_job(self):
        self.assertEqual({a.id for a in self.repo.for_user(self.user.pk)}, set(self.ids[1:]))
        self.assertEqual(self.repo.for_job(self.job.id).count(), 3)
        self.assertEqual(self.repo.for_job(self.closed_job.id).count(), 0)

    def test_stats(self):
        stats = self.repo.stats(recent=5)
        self.assertEqual(stats["total_applications"], 3)
        self.assertEqual(stats["pending_applications"], 1)
        self.assertEqual(stats["reviewed_applications"], 1)
        self.assertEqual(stats["hired_applications"], 1)
        self.assertEqual(len(stats["recent_applications"]), 3)
        self.assertEqual(stats["recent_applications"][0]["title"], "Backend Developer")


class ApplicationApiTests(WorkflowTestBase):
    def setUp(self):
        super().setUp()
        self.admin = User.objects.create_user(
            username="admin@example.com", email="admin@example.com", password="secret1", role=User.Role.ADMIN
        )
        self.seeker = User.objects.create_user(
            username="seeker@example.com", email="seeker@example.com", password="secret1"
        )

    def post_application(self, **overrides):
        payload = {"job_id": 5, **form_data(), "cv": pdf(), "motivation": docx()}
        payload.update(overrides)
        return self.client.post(reverse("submit_application"), payload)

    def test_submit_then_fetch(self):
        resp = self.post_application()
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertTrue(body["success"])
        self.assertIsInstance(body["application_id"], int)

        self.client.force_login(self.admin)
        detail = self.client.get(reverse("application_detail"), {"id": body["application_id"]}).json()
        self.assertTrue(detail["success"])
        app = detail["application"]
        self.assertEqual(app["status"], "pending")
        self.assertEqual(app["full_name"], "Jane Doe")
        self.assertEqual(app["job_title"], "Backend Developer")
        self.assertEqual(app["company"], "ACME")
        self.assertEqual(app["location"], "Remote")
        self.assertTrue(self.store.exists(app["cv_file"], "cv"))
        self.assertTrue(self.store.exists(app["motivation_file"], "motivation"))

    def test_submit_bad_email(self):
        resp = self.post_application(email="not-an-email")
        self.assertEqual(resp.status_code, 400)
        body = resp.json()
        self.assertFalse(body["success"])
        self.assertIn("email", body["message"])
        self.assertEqual(Application.objects.count(), 0)

    def test_submit_requires_job_id(self):
        resp = self.post_application(job_id="")
        self.assertEqual(resp.json(), {"success": False, "message": "Job ID required"})

    def test_submit_unknown_job(self):
        resp = self.post_application(job_id=self.closed_job.id)
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["message"], "Job not found")
        self.assertNothingStored()

    def test_submit_get_not_allowed(self):
        self.assertEqual(self.client.get(reverse("submit_application")).status_code, 405)

    def test_logged_in_submission_records_user(self):
        self.client.force_login(self.seeker)
        app_id = self.post_application().json()["application_id"]
        self.assertEqual(Application.objects.get(pk=app_id).user, self.seeker)

    def test_database_error_gives_generic_message(self):
        with mock.patch.object(ApplicationRepository, "insert", side_effect=DatabaseError("relation missing")):
            resp = self.post_application()
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"success": False, "message": "Failed to submit application"})

    def test_unexpected_error_gives_generic_message(self):
        with mock.patch.object(ApplicationWorkflow, "submit", side_effect=RuntimeError("boom")):
            resp = self.post_application()
        self.assertEqual(resp.status_code, 500)
        self.assertNotIn("boom", resp.json()["message"])

    def test_update_status_requires_admin(self):
        app_id = self.post_application().json()["application_id"]
        url = reverse("update_application_status")
        self.assertEqual(self.client.post(url, {"id": app_id, "status": "reviewed"}).status_code, 401)
        self.client.force_login(self.seeker)
        self.assertEqual(self.client.post(url, {"id": app_id, "status": "reviewed"}).status_code, 403)
        self.assertEqual(Application.objects.get(pk=app_id).status, "pending")

    def test_update_status(self):
        app_id = self.post_application().json()["application_id"]
        self.client.force_login(self.admin)
        url = reverse("update_application_status")

        resp = self.client.post(url, {"id": app_id, "status": "shortlisted"})
        self.assertEqual(resp.json(), {"success": True, "message": "Application status updated"})

        resp = self.client.post(url, {"id": app_id, "status": "approved"})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["message"], "Invalid status")
        self.assertEqual(Application.objects.get(pk=app_id).status, "shortlisted")

        resp = self.client.post(url, {"id": 999, "status": "hired"})
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["message"], "Application not found")

        resp = self.client.post(url, {"id": app_id})
        self.assertEqual(resp.json()["message"], "Application ID and status required")

    def test_list_and_stats(self):
        first = self.post_application().json()["application_id"]
        self.post_application(full_name="John Roe")
        self.client.force_login(self.admin)
        self.client.post(reverse("update_application_status"), {"id": first, "status": "hired"})

        listing = self.client.get(reverse("application_list"), {"status": "hired"}).json()
        self.assertEqual([a["id"] for a in listing["applications"]], [first])
        self.assertEqual(listing["applications"][0]["status_label"], "Hired")

        limited = self.client.get(reverse("application_list"), {"limit": "1"}).json()
        self.assertEqual(len(limited["applications"]), 1)
        self.assertEqual(limited["applications"][0]["full_name"], "John Roe")

        by_job = self.client.get(reverse("job_applications"), {"job_id": 5}).json()
        self.assertEqual(len(by_job["applications"]), 2)

        stats = self.client.get(reverse("application_stats")).json()["stats"]
        self.assertEqual(stats["total_applications"], 2)
        self.assertEqual(stats["hired_applications"], 1)
        self.assertEqual(stats["pending_applications"], 1)

    def test_detail_not_found(self):
        self.client.force_login(self.admin)
        resp = self.client.get(reverse("application_detail"), {"id": 31337})
        self.assertEqual(resp.status_code, 404)
        self.assertFalse(resp.json()["success"])

    def test_my_applications(self):
        self.client.force_login(self.seeker)
        self.post_application()
        self.client.logout()
        self.post_application(full_name="Anonymous Person")

        self.assertEqual(self.client.get(reverse("my_applications")).status_code, 401)

        self.client.force_login(self.seeker)
        mine = self.client.get(reverse("my_applications")).json()["applications"]
        self.assertEqual(len(mine), 1)
        self.assertEqual(mine[0]["status_color"], "orange")

        other = self.client.get(reverse("my_applications"), {"user_id": self.admin.pk})
        self.assertEqual(other.status_code, 403)

        self.client.force_login(self.admin)
        as_admin = self.client.get(reverse("my_applications"), {"user_id": self.seeker.pk}).json()
        self.assertEqual(len(as_admin["applications"]), 1)

    def test_download_document(self):
        app_id = self.post_application().json()["application_id"]
        app = Application.objects.get(pk=app_id)
        self.client.force_login(self.admin)

        resp = self.client.get(reverse("download_document", args=["cv", app.cv_file]))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(b"".join(resp.streaming_content), b"%PDF-1.4 test cv")

        missing = self.client.get(reverse("download_document", args=["cv", "nope.pdf"]))
        self.assertEqual(missing.status_code, 404)
        wrong_category = self.client.get(reverse("download_document", args=["photos", app.cv_file]))
        self.assertEqual(wrong_category.status_code, 404)


class SweepOrphanDocumentsTests(WorkflowTestBase):
    def backdate(self, name, category, hours=2):
        stamp = time.time() - hours * 3600
        os.utime(self.store.path(name, category), (stamp, stamp))

    def test_lists_and_deletes_old_orphans(self):
        app = Application.objects.get(pk=self.submit().application_id)
        self.backdate(app.cv_file, "cv")
        orphan = self.store.store(pdf(), "cv")
        self.backdate(orphan.name, "cv")

        out = StringIO()
        call_command("sweep_orphan_documents", stdout=out)
        self.assertIn(orphan.name, out.getvalue())
        self.assertNotIn(app.cv_file, out.getvalue())
        self.assertIn("Found 1 orphaned document(s).", out.getvalue())
        self.assertTrue(self.store.exists(orphan.name, "cv"))

        call_command("sweep_orphan_documents", "--delete", stdout=StringIO())
        self.assertFalse(self.store.exists(orphan.name, "cv"))
        self.assertTrue(self.store.exists(app.cv_file, "cv"))
        self.assertTrue(self.store.exists(app.motivation_file, "motivation"))

    def test_fresh_unreferenced_files_survive_delete(self):
        # Stored by a submission that has not inserted its row yet.
        cv = self.store.store(pdf(), "cv")
        letter = self.store.store(docx(), "motivation")

        out = StringIO()
        call_command("sweep_orphan_documents", "--delete", stdout=out)
        self.assertIn("Removed 0 orphaned document(s).", out.getvalue())
        self.assertIn("Skipped 2", out.getvalue())

        app = ApplicationRepository().insert(
            job=self.job, user_id=None, fields=form_data(), cv_file=cv.name, motivation_file=letter.name
        )
        self.assertTrue(self.store.exists(app.cv_file, "cv"))
        self.assertTrue(self.store.exists(app.motivation_file, "motivation"))

    def test_zero_age_threshold_sweeps_everything_unreferenced(self):
        orphan = self.store.store(pdf(), "cv")
        call_command("sweep_orphan_documents", "--delete", "--min-age-minutes", "0", stdout=StringIO())
        self.assertFalse(self.store.exists(orphan.name, "cv"))
