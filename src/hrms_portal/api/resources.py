"""Per-domain helpers over :class:`ApiClient`.

Thin wrappers: each method maps onto one REST endpoint and returns the raw
:class:`ApiResponse`. Consistency rules live on the backend.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from .client import ApiClient, ApiResponse


@dataclass(frozen=True)
class Page:
    """A paginated list: ``{<key>: [...], pagination: {total, pages}}``."""

    items: Sequence[Any] = field(default_factory=list)
    total: int = 0
    pages: int = 1

    @classmethod
    def from_api(cls, data: Any, key: str) -> "Page":
        if isinstance(data, list):
            return cls(items=data, total=len(data), pages=1)
        if not isinstance(data, dict):
            return cls()
        items = data.get(key) or data.get("items") or []
        pagination = data.get("pagination") or {}
        return cls(
            items=items,
            total=int(pagination.get("total") or len(items)),
            pages=max(int(pagination.get("pages") or 1), 1),
        )


class _Resource:
    def __init__(self, client: ApiClient):
        self._client = client


class _CrudResource(_Resource):
    path = ""

    def get_all(self, params: Optional[dict] = None) -> ApiResponse:
        return self._client.get(self.path, params=params)

    def get_by_id(self, item_id) -> ApiResponse:
        return self._client.get(f"{self.path}/{item_id}")

    def create(self, data: dict) -> ApiResponse:
        return self._client.post(self.path, data)

    def update(self, item_id, data: dict) -> ApiResponse:
        return self._client.put(f"{self.path}/{item_id}", data)

    def delete(self, item_id) -> ApiResponse:
        return self._client.delete(f"{self.path}/{item_id}")


class AuthAPI(_Resource):
    def login(self, email: str, password: str) -> ApiResponse:
        return self._client.post("/auth/login", {"email": email, "password": password})

    def register(self, data: dict) -> ApiResponse:
        return self._client.post("/auth/register", data)

    def me(self) -> ApiResponse:
        return self._client.get("/auth/me")

    def change_password(self, data: dict) -> ApiResponse:
        return self._client.post("/auth/change-password", data)

    def get_pending_registrations(self) -> ApiResponse:
        return self._client.get("/auth/pending-registrations")

    def approve_registration(self, user_id, data: dict) -> ApiResponse:
        return self._client.put(f"/auth/approve-registration/{user_id}", data)

    def reject_registration(self, user_id) -> ApiResponse:
        return self._client.put(f"/auth/reject-registration/{user_id}")


class DashboardAPI(_Resource):
    def get_stats(self) -> ApiResponse:
        return self._client.get("/dashboard/stats")

    def get_attendance_chart(self) -> ApiResponse:
        return self._client.get("/dashboard/attendance-chart")

    def get_department_stats(self) -> ApiResponse:
        return self._client.get("/dashboard/department-stats")

    def get_recent_activities(self) -> ApiResponse:
        return self._client.get("/dashboard/recent-activities")


class EmployeeAPI(_CrudResource):
    path = "/employees"


class DepartmentAPI(_CrudResource):
    path = "/departments"


class HiringAPI(_CrudResource):
    path = "/hiring"


class AttendanceAPI(_Resource):
    def get_my(self) -> ApiResponse:
        return self._client.get("/attendance/my")

    def get_today(self) -> ApiResponse:
        return self._client.get("/attendance/today")

    def get_live_status(self) -> ApiResponse:
        return self._client.get("/attendance/live-status")

    def get_all(self, params: Optional[dict] = None) -> ApiResponse:
        return self._client.get("/attendance", params=params)

    def check_in(self) -> ApiResponse:
        return self._client.post("/attendance/check-in")

    def check_out(self) -> ApiResponse:
        return self._client.post("/attendance/check-out")

    def break_start(self) -> ApiResponse:
        return self._client.post("/attendance/break-start")

    def break_end(self) -> ApiResponse:
        return self._client.post("/attendance/break-end")


class LeaveAPI(_Resource):
    def get_my(self) -> ApiResponse:
        return self._client.get("/leaves/my")

    def get_all(self, params: Optional[dict] = None) -> ApiResponse:
        return self._client.get("/leaves", params=params)

    def create(self, data: dict) -> ApiResponse:
        return self._client.post("/leaves", data)

    def update_status(self, leave_id, status: str) -> ApiResponse:
        return self._client.put(f"/leaves/{leave_id}/status", {"status": status})

    def delete(self, leave_id) -> ApiResponse:
        return self._client.delete(f"/leaves/{leave_id}")


class PayrollAPI(_CrudResource):
    path = "/payroll"

    def get_my(self) -> ApiResponse:
        return self._client.get("/payroll/my")

    def process(self, payroll_id) -> ApiResponse:
        return self._client.post(f"/payroll/{payroll_id}/process")

    def pay(self, payroll_id) -> ApiResponse:
        return self._client.post(f"/payroll/{payroll_id}/pay")

    def get_summary(self, month: str) -> ApiResponse:
        return self._client.get(f"/payroll/summary/{month}")


class PerformanceAPI(_CrudResource):
    path = "/performance"

    def get_my(self) -> ApiResponse:
        return self._client.get("/performance/my")


class TaskAPI(_CrudResource):
    path = "/tasks"

    def get_my(self, params: Optional[dict] = None) -> ApiResponse:
        return self._client.get("/tasks/my", params=params)

    def get_assigned(self, params: Optional[dict] = None) -> ApiResponse:
        return self._client.get("/tasks/assigned", params=params)

    def update_status(self, task_id, status: str) -> ApiResponse:
        return self._client.put(f"/tasks/{task_id}/status", {"status": status})


class AnnouncementAPI(_CrudResource):
    path = "/announcements"


class PasswordResetAPI(_Resource):
    def request(self, email: str) -> ApiResponse:
        return self._client.post("/password-reset/request", {"email": email})

    def get_pending(self) -> ApiResponse:
        return self._client.get("/password-reset/pending")

    def approve(self, reset_id, new_password: str) -> ApiResponse:
        return self._client.put(f"/password-reset/{reset_id}", {"status": "approved", "newPassword": new_password})

    def reject(self, reset_id) -> ApiResponse:
        return self._client.put(f"/password-reset/{reset_id}", {"status": "rejected"})


class TeamAPI(_CrudResource):
    path = "/teams"

    def add_member(self, team_id, user_id, role: str) -> ApiResponse:
        return self._client.post(f"/teams/{team_id}/members", {"userId": user_id, "role": role})

    def remove_member(self, team_id, member_id) -> ApiResponse:
        return self._client.delete(f"/teams/{team_id}/members/{member_id}")

    def remove_user_from_team(self, team_id, user_id) -> ApiResponse:
        return self._client.delete(f"/teams/{team_id}/users/{user_id}")


@dataclass(frozen=True)
class HrmsApi:
    """All domain helpers bound to one client."""

    client: ApiClient
    auth: AuthAPI
    dashboard: DashboardAPI
    employees: EmployeeAPI
    departments: DepartmentAPI
    attendance: AttendanceAPI
    leaves: LeaveAPI
    payroll: PayrollAPI
    performance: PerformanceAPI
    tasks: TaskAPI
    announcements: AnnouncementAPI
    password_reset: PasswordResetAPI
    teams: TeamAPI
    hiring: HiringAPI

    @classmethod
    def bind(cls, client: ApiClient) -> "HrmsApi":
        return cls(
            client=client,
            auth=AuthAPI(client),
            dashboard=DashboardAPI(client),
            employees=EmployeeAPI(client),
            departments=DepartmentAPI(client),
            attendance=AttendanceAPI(client),
            leaves=LeaveAPI(client),
            payroll=PayrollAPI(client),
            performance=PerformanceAPI(client),
            tasks=TaskAPI(client),
            announcements=AnnouncementAPI(client),
            password_reset=PasswordResetAPI(client),
            teams=TeamAPI(client),
            hiring=HiringAPI(client),
        )
