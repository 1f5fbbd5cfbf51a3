"""Outcomes of the application workflow.

Services return one of these instead of raising, so callers branch on the
variant type::

    result = workflow.submit(...)
    if isinstance(result, ApplicationError):
        ...
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Submitted:
    application_id: int
    message: str = "Application submitted successfully"


@dataclass(frozen=True)
class StatusUpdated:
    application_id: int
    status: str
    message: str = "Application status updated"


@dataclass(frozen=True)
class ApplicationError:
    http_status = 400

    @property
    def message(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class ValidationFailed(ApplicationError):
    field: str

    @property
    def message(self) -> str:
        if self.field == "email":
            return "Invalid email format"
        return f"Field '{self.field}' is required"


@dataclass(frozen=True)
class NotFound(ApplicationError):
    entity: str
    http_status = 404

    @property
    def message(self) -> str:
        return f"{self.entity.capitalize()} not found"


_UPLOAD_LABELS = {"cv": "CV file", "motivation": "motivation letter"}


@dataclass(frozen=True)
class UploadFailed(ApplicationError):
    which: str
    missing: bool = False

    @property
    def message(self) -> str:
        label = _UPLOAD_LABELS.get(self.which, self.which)
        if self.missing:
            return f"{label[0].upper()}{label[1:]} is required"
        return f"Failed to upload {label}"


@dataclass(frozen=True)
class PersistenceFailed(ApplicationError):
    http_status = 500

    @property
    def message(self) -> str:
        # Database details stay in the server log.
        return "Failed to submit application"


@dataclass(frozen=True)
class InvalidStatus(ApplicationError):
    status: str

    @property
    def message(self) -> str:
        return "Invalid status"


SubmissionResult = Union[Submitted, ValidationFailed, NotFound, UploadFailed, PersistenceFailed]
StatusResult = Union[StatusUpdated, InvalidStatus, NotFound]
