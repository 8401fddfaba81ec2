"""POST actions reachable from the dashboard pages.

Each action forwards one request to the backend and reports the outcome; the
server decides whether the transition is allowed.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping

from ..api.resources import HrmsApi
from ..core.enums import Role

ActionCall = Callable[[HrmsApi, Mapping[str, str], Mapping[str, Any]], Any]


@dataclass(frozen=True)
class ActionRoute:
    name: str
    rule: str
    roles: tuple[Role, ...]
    call: ActionCall
    success: str
    failure: str
    back: str = ""
    required: tuple[str, ...] = ()


def _fields(form: Mapping[str, str], *names: str) -> dict:
    return {n: form.get(n) or None for n in names}


ACTIONS: tuple[ActionRoute, ...] = (
    ActionRoute(
        "check_in", "attendance/check-in", (Role.EMPLOYEE,),
        lambda api, form, kw: api.attendance.check_in(),
        "Checked in", "Failed to check in",
    ),
    ActionRoute(
        "check_out", "attendance/check-out", (Role.EMPLOYEE,),
        lambda api, form, kw: api.attendance.check_out(),
        "Checked out", "Failed to check out",
    ),
    ActionRoute(
        "break_start", "attendance/break-start", (Role.EMPLOYEE,),
        lambda api, form, kw: api.attendance.break_start(),
        "Break started", "Failed to start break",
    ),
    ActionRoute(
        "break_end", "attendance/break-end", (Role.EMPLOYEE,),
        lambda api, form, kw: api.attendance.break_end(),
        "Break ended", "Failed to end break",
    ),
    ActionRoute(
        "request_leave", "leaves", (Role.EMPLOYEE,),
        lambda api, form, kw: api.leaves.create(_fields(form, "leaveType", "startDate", "endDate", "reason")),
        "Leave request submitted", "Failed to submit leave request",
        back="leaves", required=("leaveType", "startDate", "endDate"),
    ),
    ActionRoute(
        "update_task_status", "tasks/<task_id>/status", (Role.EMPLOYEE,),
        lambda api, form, kw: api.tasks.update_status(kw["task_id"], form.get("status", "")),
        "Task updated", "Failed to update task",
        back="tasks", required=("status",),
    ),
    ActionRoute(
        "decide_leave", "leaves/<leave_id>/<any(approved, rejected):decision>", (Role.ADMIN, Role.MANAGER, Role.HR),
        lambda api, form, kw: api.leaves.update_status(kw["leave_id"], kw["decision"]),
        "Leave request updated", "Failed to update leave",
        back="leaves",
    ),
    ActionRoute(
        "delete_employee", "employees/<item_id>/delete", (Role.ADMIN, Role.HR),
        lambda api, form, kw: api.employees.delete(kw["item_id"]),
        "Employee deleted", "Failed to delete employee",
        back="employees",
    ),
    ActionRoute(
        "delete_department", "departments/<item_id>/delete", (Role.ADMIN, Role.HR),
        lambda api, form, kw: api.departments.delete(kw["item_id"]),
        "Department deleted", "Failed to delete department",
        back="departments",
    ),
    ActionRoute(
        "assign_task", "tasks", (Role.MANAGER,),
        lambda api, form, kw: api.tasks.create(_fields(form, "title", "assignedTo", "dueDate", "priority")),
        "Task assigned", "Failed to assign task",
        back="tasks", required=("title", "assignedTo"),
    ),
    ActionRoute(
        "delete_task", "tasks/<item_id>/delete", (Role.MANAGER,),
        lambda api, form, kw: api.tasks.delete(kw["item_id"]),
        "Task deleted", "Failed to delete task",
        back="tasks",
    ),
    ActionRoute(
        "approve_registration", "pending-approvals/registrations/<user_id>/approve", (Role.HR,),
        lambda api, form, kw: api.auth.approve_registration(kw["user_id"], _fields(form, "role", "department", "position")),
        "Registration approved", "Failed to approve registration",
        back="pending-approvals", required=("role",),
    ),
    ActionRoute(
        "reject_registration", "pending-approvals/registrations/<user_id>/reject", (Role.HR,),
        lambda api, form, kw: api.auth.reject_registration(kw["user_id"]),
        "Registration rejected", "Failed to reject registration",
        back="pending-approvals",
    ),
    ActionRoute(
        "approve_password_reset", "pending-approvals/password-resets/<reset_id>/approve", (Role.HR,),
        lambda api, form, kw: api.password_reset.approve(kw["reset_id"], form.get("newPassword", "")),
        "Password reset approved", "Failed to approve password reset",
        back="pending-approvals", required=("newPassword",),
    ),
    ActionRoute(
        "reject_password_reset", "pending-approvals/password-resets/<reset_id>/reject", (Role.HR,),
        lambda api, form, kw: api.password_reset.reject(kw["reset_id"]),
        "Password reset rejected", "Failed to reject password reset",
        back="pending-approvals",
    ),
    ActionRoute(
        "pay_payroll", "payroll/<item_id>/pay", (Role.HR,),
        lambda api, form, kw: api.payroll.pay(kw["item_id"]),
        "Payroll marked as paid", "Failed to mark payroll as paid",
        back="payroll",
    ),
    ActionRoute(
        "create_hiring", "hiring", (Role.HR,),
        lambda api, form, kw: api.hiring.create(_fields(form, "title", "department", "location", "description")),
        "Job posting created", "Failed to create job posting",
        back="hiring", required=("title",),
    ),
    ActionRoute(
        "delete_hiring", "hiring/<item_id>/delete", (Role.HR,),
        lambda api, form, kw: api.hiring.delete(kw["item_id"]),
        "Job posting deleted", "Failed to delete job posting",
        back="hiring",
    ),
    ActionRoute(
        "create_announcement", "announcements", (Role.HR,),
        lambda api, form, kw: api.announcements.create(_fields(form, "title", "content")),
        "Announcement published", "Failed to publish announcement",
        back="announcements", required=("title", "content"),
    ),
    ActionRoute(
        "delete_announcement", "announcements/<item_id>/delete", (Role.HR,),
        lambda api, form, kw: api.announcements.delete(kw["item_id"]),
        "Announcement deleted", "Failed to delete announcement",
        back="announcements",
    ),
)
