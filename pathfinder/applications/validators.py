from __future__ import annotations

from collections.abc import Mapping

from django.core.exceptions import ValidationError
from django.core.validators import validate_email

from .results import ValidationFailed

# Checked in this order; the first missing one is reported.
REQUIRED_FIELDS = ("full_name", "address", "phone", "email", "additional_info")


def _value(data: Mapping, name: str) -> str:
    raw = data.get(name)
    return raw.strip() if isinstance(raw, str) else ("" if raw is None else str(raw).strip())


def missing_field(data: Mapping) -> str | None:
    for name in REQUIRED_FIELDS:
        if not _value(data, name):
            return name
    return None


def is_valid_email(value: str) -> bool:
    try:
        validate_email(value)
    except ValidationError:
        return False
    return True


def validate_submission(data: Mapping) -> ValidationFailed | None:
    """Check an application form; ``None`` means it passed.

    Fails fast: a missing field is reported before the email format is
    looked at, and only the first missing field is named.
    """
    name = missing_field(data)
    if name is not None:
        return ValidationFailed(field=name)
    if not is_valid_email(_value(data, "email")):
        return ValidationFailed(field="email")
    return None


def cleaned_submission(data: Mapping) -> dict[str, str]:
    """Trimmed copies of the required fields, ready to persist."""
    return {name: _value(data, name) for name in REQUIRED_FIELDS}
