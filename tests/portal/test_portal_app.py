from __future__ import annotations

import pytest

from hrms_portal.container import build_container
from hrms_portal.core.constants import TOKEN_STORAGE_KEY
from hrms_portal.core.signals import session_invalidated
from hrms_portal.main import create_app

API_BASE = "http://api.test/api"


@pytest.fixture
def app(monkeypatch, http):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(build_container(api_base_url=API_BASE, http=http))


@pytest.fixture
def web(app):
    return app.test_client()


def sign_in(web, http, user, token="T"):
    http.on("GET", "/auth/me", body=user)
    with web.session_transaction() as sess:
        sess[TOKEN_STORAGE_KEY] = token


def stored_token(web):
    with web.session_transaction() as sess:
        return sess.get(TOKEN_STORAGE_KEY)


def flashes(web):
    with web.session_transaction() as sess:
        return list(sess.get("_flashes", []))


def test_anonymous_root_goes_to_login_without_calls(web, http):
    resp = web.get("/")

    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/login")
    assert http.calls == []


def test_login_stores_token_and_lands_on_role_root(web, http, users):
    http.on("POST", "/auth/login", body={"token": "T-hr", "user": users["hr"]})

    resp = web.post("/login", data={"email": "hr@corp.test", "password": "pw"})

    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/hr")
    assert stored_token(web) == "T-hr"


def test_login_failure_shows_backend_message(web, http):
    http.on("POST", "/auth/login", status=400, body={"error": "Invalid credentials"})

    resp = web.post("/login", data={"email": "x@corp.test", "password": "bad"})

    assert resp.status_code == 200
    assert b"Invalid credentials" in resp.data
    assert stored_token(web) is None


def test_login_with_empty_fields_makes_no_call(web, http):
    resp = web.post("/login", data={"email": "", "password": ""})

    assert resp.status_code == 200
    assert b"Email is required" in resp.data
    assert http.calls == []


def test_signed_in_user_visiting_login_goes_home(web, http, users):
    sign_in(web, http, users["manager"])

    resp = web.get("/login")

    assert resp.headers["Location"].endswith("/manager")


def test_wrong_role_is_sent_to_own_dashboard(web, http, users):
    sign_in(web, http, users["employee"])

    resp = web.get("/admin/employees")

    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/employee")
    assert http.paths() == ["GET /auth/me"]


def test_unknown_path_redirects_to_root(web):
    resp = web.get("/nowhere/at/all")

    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/")


def test_rejected_token_at_bootstrap_is_cleared(web, http):
    http.on("GET", "/auth/me", status=401, body={"error": "Token expired"})
    with web.session_transaction() as sess:
        sess[TOKEN_STORAGE_KEY] = "stale"

    resp = web.get("/employee")

    assert resp.headers["Location"].endswith("/login")
    assert stored_token(web) is None


def test_401_during_page_load_signs_out(web, http, users):
    sign_in(web, http, users["admin"])
    http.on("GET", "/employees", status=401, body={"error": "Token expired"})

    resp = web.get("/admin/employees")

    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/login")
    assert stored_token(web) is None


def test_background_refresh_gets_json_401(web, http, users):
    sign_in(web, http, users["hr"])
    http.on("GET", "/dashboard/stats", status=401, body={"error": "Token expired"})

    resp = web.get("/hr?partial=1")

    assert resp.status_code == 401
    assert resp.get_json() == {"error": "Session expired", "redirect": "/login"}
    assert stored_token(web) is None


def test_background_refresh_failure_is_silent(web, http, users):
    sign_in(web, http, users["hr"])
    http.on("GET", "/dashboard/stats", status=500)

    resp = web.get("/hr?partial=1")

    assert resp.status_code == 503
    assert resp.data == b""
    assert stored_token(web) == "T"


def test_live_page_carries_poll_interval(web, http, users):
    sign_in(web, http, users["employee"])
    http.on("GET", "/dashboard/stats", body={"pendingTasks": 2})
    http.on("GET", "/attendance/today", body={"isCheckedIn": False})

    resp = web.get("/employee")

    assert resp.status_code == 200
    assert b'data-interval="3.0"' in resp.data
    assert b"Check in" in resp.data
    assert b"Pending tasks" in resp.data


def test_page_load_failure_is_shown_inline(web, http, users):
    sign_in(web, http, users["admin"])
    http.on("GET", "/departments", status=500, body={"message": "Database unavailable"})

    resp = web.get("/admin/departments")

    assert resp.status_code == 200
    assert b"Database unavailable" in resp.data


def test_check_in_success_is_flashed(web, http, users):
    sign_in(web, http, users["employee"])
    http.on("POST", "/attendance/check-in", body={"message": "ok"})

    resp = web.post("/employee/attendance/check-in")

    assert resp.headers["Location"].endswith("/employee")
    assert flashes(web) == [("success", "Checked in")]


def test_check_in_failure_flashes_backend_error(web, http, users):
    sign_in(web, http, users["employee"])
    http.on("POST", "/attendance/check-in", status=400, body={"error": "Already checked in today"})

    web.post("/employee/attendance/check-in")

    assert flashes(web) == [("danger", "Already checked in today")]


def test_action_redirects_back_only_within_own_shell(web, http, users):
    sign_in(web, http, users["employee"])
    http.on("POST", "/attendance/check-out", body={"message": "ok"})

    inside = web.post("/employee/attendance/check-out", data={"next": "/employee/attendance"})
    outside = web.post("/employee/attendance/check-out", data={"next": "https://evil.test/"})

    assert inside.headers["Location"].endswith("/employee/attendance")
    assert outside.headers["Location"].endswith("/employee")


def test_missing_required_field_is_a_warning(web, http, users):
    sign_in(web, http, users["employee"])

    web.post("/employee/leaves", data={"leaveType": "annual", "startDate": "", "endDate": ""})

    assert flashes(web) == [("warning", "startDate is required")]
    assert "POST /leaves" not in http.paths()


def test_logout_clears_token(web, http, users):
    sign_in(web, http, users["hr"])

    resp = web.post("/logout")

    assert resp.headers["Location"].endswith("/login")
    assert stored_token(web) is None


def test_attendance_date_filter_is_forwarded(web, http, users):
    sign_in(web, http, users["hr"])
    http.on("GET", "/attendance", body={"attendances": []})

    resp = web.get("/hr/attendance?date=2024-03-05")

    assert resp.status_code == 200
    assert http.calls[-1].params == {"date": "2024-03-05"}
    assert b"Attendance on 2024-03-05" in resp.data


def test_unknown_role_is_signed_out_instead_of_looping(web, http, users):
    sign_in(web, http, dict(users["employee"], role="superuser"))

    resp = web.get("/", follow_redirects=True)

    assert resp.status_code == 200
    assert len(resp.history) == 1
    assert resp.history[0].headers["Location"].endswith("/login")
    assert b"Sign in" in resp.data
    assert stored_token(web) is None


def test_live_page_offers_manual_refresh(web, http, users):
    sign_in(web, http, users["admin"])
    http.on("GET", "/attendance", body={"attendances": []})

    resp = web.get("/admin/attendance")

    assert b'id="refresh-now"' in resp.data
    assert b"Last updated:" in resp.data


def test_break_timer_counts_from_break_start(web, http, users):
    sign_in(web, http, users["employee"])
    http.on("GET", "/dashboard/stats", body={})
    http.on("GET", "/attendance/today", body={
        "isCheckedIn": True,
        "isOnBreak": True,
        "currentBreak": {"startTime": "2024-01-01T09:00:00Z"},
    })

    resp = web.get("/employee")

    assert b"Break time" in resp.data
    assert b'data-since="2024-01-01T09:00:00Z"' in resp.data
    assert b"End break" in resp.data


def test_scalar_rows_render_as_a_list(web, http, users):
    sign_in(web, http, users["hr"])
    http.on("GET", "/dashboard/stats", body={"totalEmployees": 3})
    http.on("GET", "/attendance/live-status", body={"working": ["Alice", "Bob"]})

    resp = web.get("/hr")

    assert resp.status_code == 200
    assert b"<li>Alice</li>" in resp.data


def test_creating_more_apps_does_not_stack_receivers(app, http):
    before = len(session_invalidated.receivers)

    create_app(build_container(api_base_url=API_BASE, http=http))

    assert len(session_invalidated.receivers) == before
