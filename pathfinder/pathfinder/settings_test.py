"""Settings used by the test suite: in-memory SQLite, locmem email, scratch uploads."""
import tempfile
from pathlib import Path

from .settings import *  # noqa: F401,F403

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]
EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"
PATHFINDER_UPLOAD_ROOT = Path(tempfile.mkdtemp(prefix="pathfinder-uploads-"))
PATHFINDER_NOTIFY_EMAILS = []
