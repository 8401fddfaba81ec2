from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from ..core.enums import Role


@dataclass(frozen=True)
class UserSummary:
    """Identity returned by the backend.

    Server-authoritative: replaced wholesale on every fetch, never patched.
    """

    id: str
    name: str
    role: str
    email: str
    position: Optional[str] = None
    department: Optional[str] = None
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def role_enum(self) -> Optional[Role]:
        return Role.parse(self.role)

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "UserSummary":
        department = data.get("department")
        if isinstance(department, Mapping):
            department = department.get("name")
        user_id = data.get("id", data.get("_id"))
        return cls(
            id=str(user_id) if user_id is not None else "",
            name=str(data.get("name") or ""),
            role=str(data.get("role") or ""),
            email=str(data.get("email") or ""),
            position=data.get("position"),
            department=department,
            raw=dict(data),
        )


@dataclass
class Session:
    """The client's belief about who is logged in."""

    token: Optional[str] = None
    user: Optional[UserSummary] = None
    loading: bool = True
    error: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None
