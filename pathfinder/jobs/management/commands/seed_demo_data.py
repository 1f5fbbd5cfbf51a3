import random
from functools import partial

from django.contrib.auth import get_user_model
from django.core.files.base import ContentFile
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from applications.models import Application, ApplicationStatus
from applications.repository import ApplicationRepository
from applications.storage import DocumentStore
from jobs.models import Job, JobCategory

User = get_user_model()


class Command(BaseCommand):
    help = "Seed realistic demo data (categories, jobs, an admin, job seekers, applications with documents)."

    def add_arguments(self, parser):
        parser.add_argument("--prefix", type=str, default="demo")
        parser.add_argument("--jobs", type=int, default=12)
        parser.add_argument("--users", type=int, default=6)
        parser.add_argument("--applications", type=int, default=15)
        parser.add_argument("--password", type=str, default="DemoPass123!")
        parser.add_argument("--seed", type=int, default=42)
        parser.add_argument("--wipe", action="store_true", help="Delete existing demo users, jobs and applications before seeding.")

    def _make_user(self, prefix, name, role, password):
        email = f"{prefix}_{name}@example.com"
        user, _ = User.objects.get_or_create(
            username=email,
            defaults={"email": email, "role": role, "is_active": True},
        )
        # Keep demo credentials predictable.
        user.email = email
        user.role = role
        user.full_name = user.full_name or name.replace("_", " ").title()
        user.is_active = True
        user.set_password(password)
        user.save()
        return user

    @staticmethod
    def _remove_documents(store, documents):
        for name, category in documents:
            store.remove(name, category)

    def _wipe(self, prefix, store):
        apps = Application.objects.filter(job__company__startswith=f"{prefix.title()} ")
        documents = []
        for cv_file, motivation_file in apps.values_list("cv_file", "motivation_file"):
            documents += [(cv_file, "cv"), (motivation_file, "motivation")]
        apps.delete()
        # Files go only once the row deletions are committed.
        transaction.on_commit(partial(self._remove_documents, store, documents))
        Job.objects.filter(company__startswith=f"{prefix.title()} ").delete()
        User.objects.filter(username__startswith=f"{prefix}_").delete()

    def _store(self, store, stored, content, category):
        doc = store.store(content, category)
        if doc is None:
            raise CommandError(
                f"Could not store demo {category} document {content.name!r}; "
                "check PATHFINDER_UPLOAD_ROOT and PATHFINDER_DOCUMENT_EXTENSIONS."
            )
        stored.append((doc.name, category))
        return doc

    def handle(self, *args, **opts):
        store = DocumentStore()
        stored = []
        try:
            with transaction.atomic():
                self._seed(store, stored, opts)
        except Exception:
            # Rows were rolled back; drop the files written for them.
            self._remove_documents(store, reversed(stored))
            raise

    def _seed(self, store, stored, opts):
        rnd = random.Random(opts["seed"])
        prefix = (opts["prefix"] or "demo").strip().lower()
        jobs_n = max(1, int(opts["jobs"]))
        users_n = max(1, int(opts["users"]))
        apps_n = max(0, int(opts["applications"]))
        password = opts["password"]

        if opts["wipe"]:
            self._wipe(prefix, store)

        categories = []
        for name in ["Engineering", "Design", "Data", "Marketing", "Operations", "Sales"]:
            category, _ = JobCategory.objects.get_or_create(slug=name.lower(), defaults={"name": name})
            categories.append(category)

        company_names = [
            "NorthBridge Labs",
            "Harbor Metrics",
            "BluePeak Systems",
            "CedarStone Digital",
            "OrbitGrid Tech",
            "Skyforge Data",
        ]
        job_templates = [
            ("Backend Developer", "Build and maintain APIs, background jobs, and PostgreSQL schemas.", "engineering"),
            ("Frontend Engineer", "Develop responsive interfaces with modern JavaScript and API integrations.", "engineering"),
            ("Data Analyst", "Transform product and hiring data into dashboards and actionable insights.", "data"),
            ("Product Designer", "Prototype user journeys and design system components with Figma.", "design"),
            ("Growth Marketer", "Plan campaigns and measure acquisition funnels.", "marketing"),
            ("Operations Coordinator", "Keep hiring pipelines and office logistics running smoothly.", "operations"),
            ("Account Executive", "Own the sales cycle from first call to signed contract.", "sales"),
        ]
        locations = ["London", "Manchester", "Leeds", "Bristol", "Remote", "New York", "Berlin"]
        job_types = ["Full-time", "Part-time", "Contract", "Internship", "Remote"]
        by_slug = {c.slug: c for c in categories}

        jobs = []
        for i in range(1, jobs_n + 1):
            title_base, description, slug = job_templates[(i - 1) % len(job_templates)]
            company = f"{prefix.title()} {company_names[(i - 1) % len(company_names)]}"
            salary_min = rnd.randint(35_000, 95_000)
            job, _ = Job.objects.get_or_create(
                title=f"{title_base} #{i}",
                company=company,
                defaults={
                    "location": rnd.choice(locations),
                    "description": description,
                    "requirements": "2+ years of relevant experience.",
                    "salary_min": salary_min,
                    "salary_max": salary_min + rnd.randint(8_000, 35_000),
                    "job_type": rnd.choice(job_types),
                    "category": by_slug[slug],
                    # A few closed postings so soft delete shows up in the data.
                    "is_active": i % 5 != 0,
                },
            )
            jobs.append(job)

        admin = self._make_user(prefix, "admin", User.Role.ADMIN, password)
        admin.is_staff = True
        admin.save(update_fields=["is_staff"])

        seekers = [self._make_user(prefix, f"seeker_{i}", User.Role.USER, password) for i in range(1, users_n + 1)]

        repository = ApplicationRepository()
        active_jobs = [job for job in jobs if job.is_active]
        created = 0
        for n in range(apps_n):
            if not active_jobs:
                break
            job = rnd.choice(active_jobs)
            # Every third application is anonymous.
            seeker = None if n % 3 == 2 else rnd.choice(seekers)
            full_name = seeker.full_name if seeker else f"Guest Applicant {n + 1}"
            email = seeker.email if seeker else f"{prefix}_guest_{n + 1}@example.com"

            cv = self._store(store, stored, ContentFile(f"CV of {full_name}\n".encode(), name="cv.pdf"), "cv")
            letter = self._store(
                store,
                stored,
                ContentFile(f"Motivation letter from {full_name} for {job.title}\n".encode(), name="letter.docx"),
                "motivation",
            )
            app = repository.insert(
                job=job,
                user_id=seeker.pk if seeker else None,
                fields={
                    "full_name": full_name,
                    "address": f"{rnd.randint(1, 200)} High Street, {job.location}",
                    "phone": f"+44-77-9000-{2000 + n}",
                    "email": email,
                    "additional_info": "I am interested in this role and believe my background is a strong fit.",
                },
                cv_file=cv.name,
                motivation_file=letter.name,
            )
            status = rnd.choices(ApplicationStatus.values, weights=[50, 20, 12, 12, 6], k=1)[0]
            if status != ApplicationStatus.PENDING:
                repository.update_status(app.id, status)
            created += 1

        self.stdout.write(self.style.SUCCESS("Seeded demo data successfully."))
        self.stdout.write(f"Categories: {len(categories)}")
        self.stdout.write(f"Jobs: {len(jobs)} ({len(active_jobs)} active)")
        self.stdout.write(f"Applications created: {created}")
        self.stdout.write("")
        self.stdout.write("Sample credentials:")
        self.stdout.write(f"  admin: {admin.email} / {password}")
        for seeker in seekers[:3]:
            self.stdout.write(f"  user:  {seeker.email} / {password}")
