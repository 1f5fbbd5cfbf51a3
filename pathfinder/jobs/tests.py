import shutil
import tempfile
from datetime import timedelta
from io import StringIO

from django.core.management import CommandError, call_command
from django.test import SimpleTestCase, TestCase, override_settings
from django.urls import reverse
from django.utils import timezone

from accounts.models import User
from applications.models import Application
from applications.storage import DocumentStore
from .models import Job, JobCategory
from .utils import format_salary_range, safe_int, time_ago


class JobBrowseTests(TestCase):
    def setUp(self):
        self.engineering = JobCategory.objects.create(name="Engineering", slug="engineering")
        self.design = JobCategory.objects.create(name="Design", slug="design")
        self.backend = Job.objects.create(
            title="Backend Developer",
            company="ACME",
            location="Remote",
            description="Work with Django and PostgreSQL",
            salary_min=50000,
            salary_max=90000,
            category=self.engineering,
        )
        Job.objects.create(
            title="UI Designer",
            company="Studio",
            location="London",
            description="Figma and design systems",
            job_type="Contract",
            category=self.design,
        )
        self.closed = Job.objects.create(
            title="Closed Backend Role",
            company="ACME",
            location="Leeds",
            description="Filled",
            category=self.engineering,
            is_active=False,
        )

    def titles(self, resp):
        return [job["title"] for job in resp.json()["jobs"]]

    def test_list_hides_inactive(self):
        titles = self.titles(self.client.get(reverse("job_list")))
        self.assertEqual(titles, ["UI Designer", "Backend Developer"])

    def test_filter_by_category(self):
        resp = self.client.get(reverse("job_list"), {"category": "design"})
        self.assertEqual(self.titles(resp), ["UI Designer"])

    def test_search(self):
        self.assertEqual(self.titles(self.client.get(reverse("job_search"), {"q": "django"})), ["Backend Developer"])
        self.assertEqual(self.titles(self.client.get(reverse("job_list"), {"search": "studio"})), ["UI Designer"])

    def test_limit(self):
        self.assertEqual(len(self.titles(self.client.get(reverse("job_list"), {"limit": "1"}))), 1)

    def test_detail(self):
        job = self.client.get(reverse("job_detail"), {"id": self.backend.id}).json()["job"]
        self.assertEqual(job["category_name"], "Engineering")
        self.assertEqual(job["salary_range"], "$50,000 - $90,000")
        self.assertEqual(job["job_type"], "Full-time")

    def test_detail_errors(self):
        self.assertEqual(self.client.get(reverse("job_detail")).json()["message"], "Job ID required")
        resp = self.client.get(reverse("job_detail"), {"id": self.closed.id})
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["message"], "Job not found")

    def test_categories_and_stats(self):
        cats = self.client.get(reverse("job_categories")).json()["categories"]
        self.assertEqual([c["slug"] for c in cats], ["design", "engineering"])

        stats = self.client.get(reverse("job_stats")).json()["stats"]
        self.assertEqual(stats["total_jobs"], 2)
        self.assertEqual(stats["total_applications"], 0)
        self.assertEqual(stats["jobs_by_category"], [{"name": "Design", "count": 1}, {"name": "Engineering", "count": 1}])
        self.assertEqual(len(stats["recent_jobs"]), 2)


class JobAdminTests(TestCase):
    def setUp(self):
        self.category = JobCategory.objects.create(name="Data", slug="data")
        self.admin = User.objects.create_user(
            username="admin@example.com", email="admin@example.com", password="secret1", role=User.Role.ADMIN
        )
        self.seeker = User.objects.create_user(username="s@example.com", email="s@example.com", password="secret1")

    def job_data(self, **overrides):
        data = {
            "title": "Data Analyst",
            "company": "Harbor Metrics",
            "location": "Bristol",
            "description": "Dashboards",
            "category_id": self.category.id,
            "salary_min": "40000",
            "salary_max": "60000",
        }
        data.update(overrides)
        return data

    def test_add_requires_admin(self):
        self.assertEqual(self.client.post(reverse("add_job"), self.job_data()).status_code, 401)
        self.client.force_login(self.seeker)
        self.assertEqual(self.client.post(reverse("add_job"), self.job_data()).status_code, 403)
        self.assertEqual(Job.objects.count(), 0)

    def test_add_job(self):
        self.client.force_login(self.admin)
        resp = self.client.post(reverse("add_job"), self.job_data())
        body = resp.json()
        self.assertTrue(body["success"])
        job = Job.objects.get(pk=body["job_id"])
        self.assertEqual(job.category, self.category)
        self.assertEqual(job.job_type, "Full-time")
        self.assertTrue(job.is_active)

    def test_add_job_validation(self):
        self.client.force_login(self.admin)
        resp = self.client.post(reverse("add_job"), self.job_data(location=""))
        self.assertEqual(resp.json()["message"], "Field 'location' is required")
        resp = self.client.post(reverse("add_job"), self.job_data(salary_min="90000"))
        self.assertFalse(resp.json()["success"])
        self.assertEqual(Job.objects.count(), 0)

    def test_update_job(self):
        job = Job.objects.create(title="Old", company="C", location="L", description="D", category=self.category)
        self.client.force_login(self.admin)
        resp = self.client.post(reverse("update_job"), {"id": job.id, "title": "New"})
        self.assertTrue(resp.json()["success"])
        job.refresh_from_db()
        self.assertEqual(job.title, "New")
        self.assertEqual(job.company, "C")

        resp = self.client.post(reverse("update_job"), {"id": 999, "title": "x"})
        self.assertEqual(resp.status_code, 404)

    def test_delete_is_soft(self):
        job = Job.objects.create(title="T", company="C", location="L", description="D", category=self.category)
        self.client.force_login(self.admin)
        self.assertTrue(self.client.post(reverse("delete_job"), {"id": job.id}).json()["success"])
        job.refresh_from_db()
        self.assertFalse(job.is_active)
        self.assertEqual(self.client.post(reverse("delete_job"), {"id": job.id}).status_code, 404)


class JobUtilsTests(SimpleTestCase):
    def test_format_salary_range(self):
        self.assertEqual(format_salary_range(None, None), "Salary not specified")
        self.assertEqual(format_salary_range(50000, None), "$50,000+")
        self.assertEqual(format_salary_range(None, 70000), "Up to $70,000")

    def test_time_ago(self):
        now = timezone.now()
        self.assertEqual(time_ago(now - timedelta(seconds=10), now=now), "just now")
        self.assertEqual(time_ago(now - timedelta(minutes=5), now=now), "5 minutes ago")
        self.assertEqual(time_ago(now - timedelta(hours=3), now=now), "3 hours ago")
        self.assertEqual(time_ago(now - timedelta(days=2), now=now), "2 days ago")
        self.assertEqual(time_ago(None), "")

    def test_safe_int(self):
        self.assertEqual(safe_int("7"), 7)
        self.assertIsNone(safe_int("seven"))
        self.assertIsNone(safe_int(""))


class SeedDemoDataTests(TestCase):
    def setUp(self):
        root = tempfile.mkdtemp(prefix="pathfinder-seed-")
        self.addCleanup(shutil.rmtree, root, ignore_errors=True)
        override = override_settings(PATHFINDER_UPLOAD_ROOT=root)
        override.enable()
        self.addCleanup(override.disable)

    def test_seed_creates_linked_data(self):
        call_command("seed_demo_data", "--jobs", "5", "--users", "2", "--applications", "4", stdout=StringIO())

        self.assertEqual(Job.objects.count(), 5)
        self.assertEqual(Job.objects.active().count(), 4)
        self.assertTrue(User.objects.get(email="demo_admin@example.com").is_admin)
        self.assertEqual(Application.objects.filter(job__is_active=True).count(), 4)

    def test_seed_is_repeatable(self):
        call_command("seed_demo_data", "--jobs", "3", "--applications", "0", stdout=StringIO())
        call_command("seed_demo_data", "--jobs", "3", "--applications", "0", stdout=StringIO())
        self.assertEqual(Job.objects.count(), 3)

    def test_rejected_document_aborts_and_removes_written_files(self):
        # Letters are .docx, so the first letter is refused after its CV was written.
        with override_settings(PATHFINDER_DOCUMENT_EXTENSIONS=["pdf"]):
            with self.assertRaises(CommandError):
                call_command("seed_demo_data", "--jobs", "2", "--applications", "1", stdout=StringIO())

        self.assertEqual(DocumentStore().list_names("cv"), [])
        self.assertEqual(Job.objects.count(), 0)
        self.assertEqual(Application.objects.count(), 0)

    def test_wipe_removes_files_once_committed(self):
        call_command("seed_demo_data", "--jobs", "3", "--applications", "3", stdout=StringIO())
        self.assertEqual(len(DocumentStore().list_names("cv")), 3)

        with self.captureOnCommitCallbacks(execute=True):
            call_command("seed_demo_data", "--jobs", "3", "--applications", "0", "--wipe", stdout=StringIO())

        self.assertEqual(Application.objects.count(), 0)
        self.assertEqual(DocumentStore().list_names("cv"), [])
        self.assertEqual(DocumentStore().list_names("motivation"), [])

    def test_failed_wipe_keeps_existing_files(self):
        call_command("seed_demo_data", "--jobs", "3", "--applications", "2", stdout=StringIO())
        before = DocumentStore().list_names("cv")

        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            with override_settings(PATHFINDER_DOCUMENT_EXTENSIONS=["pdf"]):
                with self.assertRaises(CommandError):
                    call_command("seed_demo_data", "--jobs", "3", "--applications", "1", "--wipe", stdout=StringIO())

        self.assertEqual(callbacks, [])
        self.assertEqual(Application.objects.count(), 2)
        self.assertEqual(DocumentStore().list_names("cv"), before)
        for app in Application.objects.all():
            self.assertTrue(DocumentStore().exists(app.cv_file, "cv"))
