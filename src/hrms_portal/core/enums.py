from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles issued by the backend; each one owns a dashboard subtree."""

    ADMIN = "admin"
    MANAGER = "manager"
    HR = "hr"
    EMPLOYEE = "employee"

    @classmethod
    def parse(cls, value) -> "Role | None":
        try:
            return cls(value)
        except ValueError:
            return None


class GuardState(str, Enum):
    """Outcome of evaluating a guarded route against the session."""

    LOADING = "LOADING"
    UNAUTHENTICATED = "UNAUTHENTICATED"
    AUTHENTICATED_WRONG_ROLE = "AUTHENTICATED_WRONG_ROLE"
    AUTHENTICATED_OK = "AUTHENTICATED_OK"
