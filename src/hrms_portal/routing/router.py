from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from ..core.constants import LOGIN_PATH, ROOT_PATH
from ..core.enums import GuardState, Role
from ..session.model import Session
from .guard import GuardDecision, evaluate_guard, resolve_root
from .roles import ROLE_ROOTS


@dataclass(frozen=True)
class NavItem:
    path: str
    label: str
    icon: str
    exact: bool = False


@dataclass(frozen=True)
class DashboardShell:
    """Navigation frame of one role: its root path and sidebar menu."""

    role: Role
    menu: Sequence[NavItem]

    @property
    def root(self) -> str:
        return ROLE_ROOTS[self.role]

    @property
    def allowed_roles(self) -> tuple[str, ...]:
        return (self.role.value,)

    def owns(self, path: str) -> bool:
        return path == self.root or path.startswith(self.root + "/")

    def active_item(self, path: str) -> Optional[NavItem]:
        for item in self.menu:
            if item.exact and path.rstrip("/") == item.path:
                return item
            if not item.exact and (path == item.path or path.startswith(item.path + "/")):
                return item
        return None


ADMIN_SHELL = DashboardShell(
    Role.ADMIN,
    (
        NavItem("/admin", "Dashboard", "🏠", exact=True),
        NavItem("/admin/employees", "All Employees", "👥"),
        NavItem("/admin/departments", "Departments", "🏢"),
        NavItem("/admin/attendance", "Attendance", "📅"),
        NavItem("/admin/payroll", "Payroll", "💰"),
        NavItem("/admin/reports", "Reports", "📊"),
    ),
)

MANAGER_SHELL = DashboardShell(
    Role.MANAGER,
    (
        NavItem("/manager", "Dashboard", "🏠", exact=True),
        NavItem("/manager/team", "My Team", "👥"),
        NavItem("/manager/leaves", "Leave Approvals", "🏖️"),
        NavItem("/manager/tasks", "Task Assignment", "📋"),
        NavItem("/manager/performance", "Performance", "⭐"),
    ),
)

HR_SHELL = DashboardShell(
    Role.HR,
    (
        NavItem("/hr", "Dashboard", "🏠", exact=True),
        NavItem("/hr/pending-approvals", "Pending Approvals", "✅"),
        NavItem("/hr/employees", "Employees", "👥"),
        NavItem("/hr/departments", "Departments", "🏢"),
        NavItem("/hr/attendance", "Attendance", "📅"),
        NavItem("/hr/leaves", "Leave Requests", "🏖️"),
        NavItem("/hr/payroll", "Payroll", "💰"),
        NavItem("/hr/hiring", "Hiring", "💼"),
        NavItem("/hr/announcements", "Announcements", "📢"),
    ),
)

EMPLOYEE_SHELL = DashboardShell(
    Role.EMPLOYEE,
    (
        NavItem("/employee", "Dashboard", "🏠", exact=True),
        NavItem("/employee/attendance", "My Attendance", "📅"),
        NavItem("/employee/leaves", "Leave Requests", "🏖️"),
        NavItem("/employee/tasks", "My Tasks", "📋"),
        NavItem("/employee/payslips", "Payslips", "💰"),
        NavItem("/employee/job-openings", "Job Openings", "💼"),
        NavItem("/employee/announcements", "Announcements", "📢"),
    ),
)

DEFAULT_SHELLS = (ADMIN_SHELL, MANAGER_SHELL, HR_SHELL, EMPLOYEE_SHELL)


@dataclass(frozen=True)
class RouteOutcome:
    """Where a navigation ended up.

    ``kind`` is ``render`` (``path`` is shown), ``loading`` (placeholder, no
    redirect yet) or ``redirect`` (only while following a chain).
    """

    kind: str
    path: str
    state: Optional[GuardState] = None
    redirects: tuple[str, ...] = field(default_factory=tuple)


class Router:
    """Static route table: ``/login``, one subtree per role, ``/`` and ``*``."""

    max_redirects = 5

    def __init__(self, shells: Sequence[DashboardShell] = DEFAULT_SHELLS):
        self._shells = tuple(shells)

    @property
    def shells(self) -> tuple[DashboardShell, ...]:
        return self._shells

    def shell_for(self, path: str) -> Optional[DashboardShell]:
        for shell in self._shells:
            if shell.owns(path):
                return shell
        return None

    def shell_for_role(self, role: Optional[str]) -> Optional[DashboardShell]:
        for shell in self._shells:
            if shell.role.value == role:
                return shell
        return None

    def step(self, path: str, session: Session) -> RouteOutcome:
        """Apply one routing rule to ``path``."""
        if path == LOGIN_PATH:
            return RouteOutcome("render", path)

        if path == ROOT_PATH:
            return self._outcome(path, resolve_root(session))

        shell = self.shell_for(path)
        if shell is None:
            return RouteOutcome("redirect", ROOT_PATH)

        return self._outcome(path, evaluate_guard(session, shell.allowed_roles))

    def resolve(self, path: str, session: Session) -> RouteOutcome:
        """Follow redirects until something renders (or is still loading)."""
        redirects: list[str] = []
        outcome = self.step(path, session)
        while outcome.kind == "redirect":
            if len(redirects) >= self.max_redirects:
                raise RuntimeError(f"redirect loop resolving {path!r}: {redirects}")
            redirects.append(outcome.path)
            outcome = self.step(outcome.path, session)
        return RouteOutcome(outcome.kind, outcome.path, outcome.state, tuple(redirects))

    @staticmethod
    def _outcome(path: str, decision: GuardDecision) -> RouteOutcome:
        if decision.state is GuardState.LOADING:
            return RouteOutcome("loading", path, decision.state)
        if decision.redirect_to:
            return RouteOutcome("redirect", decision.redirect_to, decision.state)
        return RouteOutcome("render", path, decision.state)
