from __future__ import annotations

from types import MappingProxyType
from typing import Optional

from ..core.constants import LOGIN_PATH
from ..core.enums import Role

ROLE_ROOTS = MappingProxyType(
    {
        Role.ADMIN: "/admin",
        Role.MANAGER: "/manager",
        Role.HR: "/hr",
        Role.EMPLOYEE: "/employee",
    }
)

ROLE_LABELS = MappingProxyType(
    {
        Role.ADMIN: "Administrator",
        Role.MANAGER: "Manager",
        Role.HR: "HR Manager",
        Role.EMPLOYEE: "Employee",
    }
)


def role_root(role: Optional[str]) -> str:
    """Dashboard root for a role; anything unknown lands on the login page."""
    parsed = Role.parse(role)
    if parsed is None:
        return LOGIN_PATH
    return ROLE_ROOTS[parsed]


def role_label(role: Optional[str]) -> str:
    parsed = Role.parse(role)
    return ROLE_LABELS[parsed] if parsed else ""
