"""Filesystem storage for application documents (CVs and motivation letters).

Each category is a flat directory under ``PATHFINDER_UPLOAD_ROOT``. Files are
stored under a generated ``<random>_<unix-time>.<ext>`` name and that bare name
is the reference kept on the application row.
"""
from __future__ import annotations

import logging
import secrets
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from django.conf import settings
from django.core.exceptions import SuspiciousFileOperation
from django.core.files.storage import FileSystemStorage

logger = logging.getLogger(__name__)

CATEGORY_DIRS = {
    "cv": "cvs",
    "motivation": "motivation_letters",
}


@dataclass(frozen=True)
class StoredDocument:
    name: str
    category: str


def extension_of(filename: str | None) -> str:
    # ".pdf" counts as a pdf; "cv" and "cv." have no extension.
    _stem, dot, ext = Path(filename or "").name.rpartition(".")
    return ext.lower() if dot else ""


class DocumentStore:
    def __init__(self, root: str | Path | None = None, allowed_extensions=None):
        self._root = Path(root) if root is not None else None
        self._allowed = allowed_extensions

    @property
    def root(self) -> Path:
        # Read lazily so override_settings in tests is honoured.
        return self._root or Path(settings.PATHFINDER_UPLOAD_ROOT)

    @property
    def allowed_extensions(self) -> set[str]:
        exts = self._allowed if self._allowed is not None else settings.PATHFINDER_DOCUMENT_EXTENSIONS
        return {e.lower().lstrip(".") for e in exts}

    def directory(self, category: str) -> Path:
        try:
            return self.root / CATEGORY_DIRS[category]
        except KeyError:
            raise ValueError(f"Unknown document category: {category!r}") from None

    def _storage(self, category: str) -> FileSystemStorage:
        return FileSystemStorage(location=str(self.directory(category)))

    @staticmethod
    def generate_name(ext: str) -> str:
        return f"{secrets.token_hex(7)}_{int(time.time())}.{ext}"

    @staticmethod
    def is_valid_reference(name: str | None) -> bool:
        return bool(name) and Path(name).name == name and name not in {".", ".."}

    def store(self, upload, category: str) -> StoredDocument | None:
        """Persist an uploaded file; ``None`` when it is missing, of a disallowed type, or unwritable."""
        storage = self._storage(category)
        if upload is None:
            return None

        ext = extension_of(getattr(upload, "name", None))
        if ext not in self.allowed_extensions:
            logger.info("Document rejected: category=%s filename=%s", category, getattr(upload, "name", None))
            return None

        try:
            # FileSystemStorage creates the category directory on first save.
            name = storage.save(self.generate_name(ext), upload)
        except (OSError, SuspiciousFileOperation):
            logger.exception("Document store failed: category=%s filename=%s", category, upload.name)
            return None

        logger.info("Document stored: category=%s name=%s size=%s", category, name, getattr(upload, "size", None))
        return StoredDocument(name=name, category=category)

    def remove(self, reference: str, category: str) -> None:
        """Best-effort delete; failures are logged and never raised."""
        try:
            self._storage(category).delete(reference)
        except (OSError, SuspiciousFileOperation):
            logger.warning(
                "Orphan candidate: could not remove document category=%s name=%s",
                category,
                reference,
                exc_info=True,
            )
            return
        logger.info("Document removed: category=%s name=%s", category, reference)

    def exists(self, reference: str, category: str) -> bool:
        if not self.is_valid_reference(reference):
            return False
        return self._storage(category).exists(reference)

    def path(self, reference: str, category: str) -> Path:
        if not self.is_valid_reference(reference):
            raise SuspiciousFileOperation(f"Invalid document reference: {reference!r}")
        return Path(self._storage(category).path(reference))

    def modified_time(self, reference: str, category: str) -> datetime:
        return self._storage(category).get_modified_time(reference)

    def list_names(self, category: str) -> list[str]:
        try:
            _dirs, files = self._storage(category).listdir("")
        except FileNotFoundError:
            return []
        return sorted(files)
