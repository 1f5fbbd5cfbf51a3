from datetime import timedelta

from django.core.management.base import BaseCommand
from django.utils import timezone

from applications.repository import ApplicationRepository
from applications.storage import CATEGORY_DIRS, DocumentStore


class Command(BaseCommand):
    help = "List (or delete) stored CVs and motivation letters that no application references."

    def add_arguments(self, parser):
        parser.add_argument("--delete", action="store_true", help="Remove the orphaned files instead of only listing them.")
        parser.add_argument(
            "--min-age-minutes",
            type=int,
            default=60,
            help="Skip files younger than this; a submission in progress stores its files before inserting the row.",
        )

    def handle(self, *args, **opts):
        store = DocumentStore()
        cutoff = timezone.now() - timedelta(minutes=max(0, opts["min_age_minutes"]))
        referenced = ApplicationRepository().referenced_documents()

        total = skipped = 0
        for category in CATEGORY_DIRS:
            for name in store.list_names(category):
                if name in referenced[category]:
                    continue
                if store.modified_time(name, category) > cutoff:
                    skipped += 1
                    continue
                self.stdout.write(f"{category}\t{name}")
                if opts["delete"]:
                    store.remove(name, category)
                total += 1

        verb = "Removed" if opts["delete"] else "Found"
        self.stdout.write(self.style.SUCCESS(f"{verb} {total} orphaned document(s)."))
        if skipped:
            self.stdout.write(f"Skipped {skipped} unreferenced document(s) newer than the age threshold.")
