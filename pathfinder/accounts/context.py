from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RequestContext:
    """Caller identity handed to services explicitly.

    ``user_id`` is ``None`` for anonymous callers.
    """

    user_id: int | None = None
    is_admin: bool = False

    @property
    def is_anonymous(self) -> bool:
        return self.user_id is None

    @classmethod
    def from_request(cls, request) -> RequestContext:
        user = getattr(request, "user", None)
        if user is None or not user.is_authenticated:
            return cls()
        return cls(user_id=user.pk, is_admin=bool(getattr(user, "is_admin", False)))
