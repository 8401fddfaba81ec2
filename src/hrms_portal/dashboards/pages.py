"""Page views of the four dashboard shells.

Each page is a loader over the API helpers that returns display sections;
nothing here interprets business data beyond picking fields to show.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Sequence

from ..api.resources import HrmsApi, Page
from ..common.datetime_utils import format_duration, parse_iso_date, parse_timestamp, seconds_since, today_iso
from ..core.constants import DEFAULT_PAGE_LIMIT
from ..core.enums import Role
from ..session.model import UserSummary


@dataclass(frozen=True)
class Action:
    """A POST button; ``path`` is relative to the shell root and may hold ``{id}``."""

    label: str
    path: str
    fields: tuple[str, ...] = ()
    style: str = "primary"


@dataclass(frozen=True)
class Timer:
    """Elapsed time since ``since`` (ISO timestamp); the page script keeps it ticking."""

    since: str

    @property
    def elapsed(self) -> str:
        return format_duration(seconds_since(self.since))


@dataclass(frozen=True)
class Section:
    title: str
    rows: Sequence[Mapping[str, Any]] = ()
    stats: Optional[Mapping[str, Any]] = None
    actions: tuple[Action, ...] = ()
    row_actions: tuple[Action, ...] = ()
    pagination: Optional[Page] = None
    timers: Optional[Mapping[str, Timer]] = None


Loader = Callable[[HrmsApi, Mapping[str, str], UserSummary], list]


@dataclass(frozen=True)
class PageView:
    slug: str
    title: str
    load: Loader
    live: bool = False
    params: tuple[str, ...] = field(default_factory=tuple)


STAT_LABELS = {
    "totalEmployees": "Total employees",
    "todayAttendance": "Present today",
    "pendingLeaves": "Pending leaves",
    "newHiresThisMonth": "New hires this month",
    "pendingTasks": "Pending tasks",
    "totalPayslips": "Payslips",
    "announcements": "Announcements",
    "totalDepartments": "Departments",
    "teamSize": "Team size",
}

LEAVE_DECISIONS = (
    Action("Approve", "leaves/{id}/approved", style="success"),
    Action("Reject", "leaves/{id}/rejected", style="danger"),
)


def _rows(data: Any, key: str) -> list:
    return list(Page.from_api(data, key).items)


def _stats(data: Any) -> dict:
    if not isinstance(data, Mapping):
        return {}
    out = {}
    for key, value in data.items():
        if isinstance(value, (int, float, str)):
            out[STAT_LABELS.get(key, key)] = value
    return out


def summarize_live_status(data: Any) -> dict:
    """Counts of working / on break / checked out from the live-status payload."""
    if not isinstance(data, Mapping):
        return {"Working": 0, "On break": 0, "Checked out": 0}
    summary = data.get("summary") or {}
    return {
        "Working": summary.get("working", len(data.get("working") or [])),
        "On break": summary.get("onBreak", len(data.get("onBreak") or [])),
        "Checked out": summary.get("checkedOut", len(data.get("checkedOut") or [])),
    }


def _page_number(args: Mapping[str, str]) -> int:
    try:
        return max(int(args.get("page", 1)), 1)
    except (TypeError, ValueError):
        return 1


def _employees(api: HrmsApi, args, user) -> list:
    resp = api.employees.get_all({"page": _page_number(args), "limit": DEFAULT_PAGE_LIMIT})
    page = Page.from_api(resp.data, "employees")
    return [Section("Employees", rows=page.items, pagination=page, row_actions=(Action("Delete", "employees/{id}/delete", style="danger"),))]


def _departments(api: HrmsApi, args, user) -> list:
    resp = api.departments.get_all()
    return [Section("Departments", rows=_rows(resp.data, "departments"), row_actions=(Action("Delete", "departments/{id}/delete", style="danger"),))]


def _selected_day(args: Mapping[str, str]) -> str:
    value = args.get("date")
    if not value:
        return today_iso()
    try:
        return parse_iso_date(value).isoformat()
    except ValueError:
        return today_iso()


def _attendance_by_date(api: HrmsApi, args, user) -> list:
    day = _selected_day(args)
    resp = api.attendance.get_all({"date": day})
    return [Section(f"Attendance on {day}", rows=_rows(resp.data, "attendances"))]


def _payroll(api: HrmsApi, args, user) -> list:
    resp = api.payroll.get_all()
    return [Section("Payroll", rows=_rows(resp.data, "payrolls"))]


# admin


def _admin_home(api: HrmsApi, args, user) -> list:
    stats = api.dashboard.get_stats().data
    live = api.attendance.get_live_status().data
    leaves = api.leaves.get_all({"status": "pending"}).data
    hiring = api.hiring.get_all({"status": "open"}).data
    return [
        Section("Overview", stats=_stats(stats)),
        Section("Live status", stats=summarize_live_status(live)),
        Section("Pending leave requests", rows=_rows(leaves, "leaves"), row_actions=LEAVE_DECISIONS),
        Section("Open positions", rows=_rows(hiring, "hirings")),
    ]


def _admin_reports(api: HrmsApi, args, user) -> list:
    chart = api.dashboard.get_attendance_chart().data
    departments = api.dashboard.get_department_stats().data
    return [
        Section("Attendance trend", rows=chart if isinstance(chart, list) else _rows(chart, "data")),
        Section("Departments", rows=departments if isinstance(departments, list) else _rows(departments, "departments")),
    ]


# manager


def _manager_home(api: HrmsApi, args, user) -> list:
    stats = api.dashboard.get_stats().data
    live = api.attendance.get_live_status().data
    announcements = api.announcements.get_all().data
    return [
        Section("Overview", stats=_stats(stats)),
        Section("Live status", stats=summarize_live_status(live)),
        Section("Announcements", rows=_rows(announcements, "announcements")),
    ]


def _manager_team(api: HrmsApi, args, user) -> list:
    return [Section("Teams", rows=_rows(api.teams.get_all().data, "teams"))]


def _pending_leaves(api: HrmsApi, args, user) -> list:
    resp = api.leaves.get_all({"status": args.get("status") or None})
    return [Section("Leave requests", rows=_rows(resp.data, "leaves"), row_actions=LEAVE_DECISIONS)]


def _manager_tasks(api: HrmsApi, args, user) -> list:
    resp = api.tasks.get_assigned()
    return [
        Section(
            "Assigned tasks",
            rows=_rows(resp.data, "tasks"),
            actions=(Action("Assign task", "tasks", fields=("title", "assignedTo", "dueDate", "priority")),),
            row_actions=(Action("Delete", "tasks/{id}/delete", style="danger"),),
        )
    ]


def _manager_performance(api: HrmsApi, args, user) -> list:
    return [Section("Performance reviews", rows=_rows(api.performance.get_all().data, "reviews"))]


# hr


def _hr_home(api: HrmsApi, args, user) -> list:
    stats = api.dashboard.get_stats().data
    live = api.attendance.get_live_status().data
    working = live.get("working") if isinstance(live, Mapping) else None
    return [
        Section("Overview", stats=_stats(stats)),
        Section("Live status", stats=summarize_live_status(live)),
        Section("Working now", rows=working or []),
    ]


def _hr_pending_approvals(api: HrmsApi, args, user) -> list:
    registrations = api.auth.get_pending_registrations().data
    resets = api.password_reset.get_pending().data
    return [
        Section(
            "Pending registrations",
            rows=_rows(registrations, "users"),
            row_actions=(
                Action("Approve", "pending-approvals/registrations/{id}/approve", fields=("role", "department", "position"), style="success"),
                Action("Reject", "pending-approvals/registrations/{id}/reject", style="danger"),
            ),
        ),
        Section(
            "Password reset requests",
            rows=_rows(resets, "requests"),
            row_actions=(
                Action("Approve", "pending-approvals/password-resets/{id}/approve", fields=("newPassword",), style="success"),
                Action("Reject", "pending-approvals/password-resets/{id}/reject", style="danger"),
            ),
        ),
    ]


def _hr_payroll(api: HrmsApi, args, user) -> list:
    resp = api.payroll.get_all()
    return [
        Section(
            "Payroll",
            rows=_rows(resp.data, "payrolls"),
            row_actions=(Action("Mark paid", "payroll/{id}/pay", style="success"),),
        )
    ]


def _hr_hiring(api: HrmsApi, args, user) -> list:
    resp = api.hiring.get_all()
    return [
        Section(
            "Job postings",
            rows=_rows(resp.data, "hirings"),
            actions=(Action("New posting", "hiring", fields=("title", "department", "location", "description")),),
            row_actions=(Action("Delete", "hiring/{id}/delete", style="danger"),),
        )
    ]


def _hr_announcements(api: HrmsApi, args, user) -> list:
    resp = api.announcements.get_all({"includeInactive": "true"})
    return [
        Section(
            "Announcements",
            rows=_rows(resp.data, "announcements"),
            actions=(Action("Publish", "announcements", fields=("title", "content")),),
            row_actions=(Action("Delete", "announcements/{id}/delete", style="danger"),),
        )
    ]


# employee


def _break_timer(today: Mapping[str, Any]) -> Optional[dict]:
    current = today.get("currentBreak")
    if not today.get("isOnBreak") or not isinstance(current, Mapping):
        return None
    start = current.get("startTime")
    if not isinstance(start, str):
        return None
    try:
        parse_timestamp(start)
    except ValueError:
        return None
    return {"Break time": Timer(start)}


def _employee_home(api: HrmsApi, args, user) -> list:
    stats = api.dashboard.get_stats().data
    today = api.attendance.get_today().data
    today = today if isinstance(today, Mapping) else {}
    if today.get("isCheckedOut"):
        actions = ()
    elif today.get("isOnBreak"):
        actions = (Action("End break", "attendance/break-end"),)
    elif today.get("isCheckedIn"):
        actions = (
            Action("Start break", "attendance/break-start", style="secondary"),
            Action("Check out", "attendance/check-out", style="danger"),
        )
    else:
        actions = (Action("Check in", "attendance/check-in", style="success"),)
    status = {
        "Checked in": "yes" if today.get("isCheckedIn") else "no",
        "On break": "yes" if today.get("isOnBreak") else "no",
        "Checked out": "yes" if today.get("isCheckedOut") else "no",
    }
    return [
        Section("Today", stats=status, actions=actions, timers=_break_timer(today)),
        Section("Overview", stats=_stats(stats)),
    ]


def _employee_attendance(api: HrmsApi, args, user) -> list:
    return [Section("My attendance", rows=_rows(api.attendance.get_my().data, "attendances"))]


def _employee_leaves(api: HrmsApi, args, user) -> list:
    return [
        Section(
            "My leave requests",
            rows=_rows(api.leaves.get_my().data, "leaves"),
            actions=(Action("Request leave", "leaves", fields=("leaveType", "startDate", "endDate", "reason")),),
        )
    ]


def _employee_tasks(api: HrmsApi, args, user) -> list:
    return [
        Section(
            "My tasks",
            rows=_rows(api.tasks.get_my().data, "tasks"),
            row_actions=(Action("Update status", "tasks/{id}/status", fields=("status",)),),
        )
    ]


def _employee_payslips(api: HrmsApi, args, user) -> list:
    return [Section("Payslips", rows=_rows(api.payroll.get_my().data, "payrolls"))]


def _job_openings(api: HrmsApi, args, user) -> list:
    return [Section("Job openings", rows=_rows(api.hiring.get_all().data, "hirings"))]


def _announcements(api: HrmsApi, args, user) -> list:
    return [Section("Announcements", rows=_rows(api.announcements.get_all().data, "announcements"))]


PAGES: dict[Role, tuple[PageView, ...]] = {
    Role.ADMIN: (
        PageView("", "Dashboard", _admin_home, live=True),
        PageView("employees", "All Employees", _employees, params=("page",)),
        PageView("departments", "Departments", _departments),
        PageView("attendance", "Attendance", _attendance_by_date, live=True, params=("date",)),
        PageView("payroll", "Payroll", _payroll),
        PageView("reports", "Reports", _admin_reports),
    ),
    Role.MANAGER: (
        PageView("", "Dashboard", _manager_home, live=True),
        PageView("team", "My Team", _manager_team),
        PageView("leaves", "Leave Approvals", _pending_leaves, params=("status",)),
        PageView("tasks", "Task Assignment", _manager_tasks),
        PageView("performance", "Performance", _manager_performance),
    ),
    Role.HR: (
        PageView("", "Dashboard", _hr_home, live=True),
        PageView("pending-approvals", "Pending Approvals", _hr_pending_approvals),
        PageView("employees", "Employees", _employees, params=("page",)),
        PageView("departments", "Departments", _departments),
        PageView("attendance", "Attendance", _attendance_by_date, live=True, params=("date",)),
        PageView("leaves", "Leave Requests", _pending_leaves, params=("status",)),
        PageView("payroll", "Payroll", _hr_payroll),
        PageView("hiring", "Hiring", _hr_hiring),
        PageView("announcements", "Announcements", _hr_announcements),
    ),
    Role.EMPLOYEE: (
        PageView("", "Dashboard", _employee_home, live=True),
        PageView("attendance", "My Attendance", _employee_attendance),
        PageView("leaves", "Leave Requests", _employee_leaves),
        PageView("tasks", "My Tasks", _employee_tasks),
        PageView("payslips", "Payslips", _employee_payslips),
        PageView("job-openings", "Job Openings", _job_openings),
        PageView("announcements", "Announcements", _announcements),
    ),
}
