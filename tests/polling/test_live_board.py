from __future__ import annotations

import asyncio
import os

from hrms_portal.cli import run_live_board
from hrms_portal.polling.scheduler import AsyncioScheduler


def test_live_board_shows_each_update(api, http):
    http.on("GET", "/attendance/live-status", body={"summary": {"working": 3, "onBreak": 1, "checkedOut": 2}})
    lines = []

    shown = asyncio.run(run_live_board(api, interval=0.01, clock_interval=0.01, ticks=3, echo=lines.append))

    assert shown == 3
    assert len(lines) == 3
    assert "Working: 3" in lines[0]
    assert "On break: 1" in lines[0]
    assert "Checked out: 2" in lines[0]


def test_live_board_stops_when_session_is_invalidated(api, http, tokens):
    tokens.set("expired")
    http.on("GET", "/attendance/live-status", status=401, body={"error": "Token expired"})
    lines = []

    shown = asyncio.run(run_live_board(api, interval=0.01, clock_interval=0.01, echo=lines.append))

    assert shown == 0
    assert "Session expired, sign in again." in lines
    assert tokens.get() is None


def test_asyncio_scheduler_runs_coroutine_fetches():
    async def main():
        scheduler = AsyncioScheduler()
        outcome = asyncio.get_running_loop().create_future()

        async def fetch():
            return "ok"

        scheduler.dispatch(fetch, lambda result, error: outcome.set_result((result, error)))
        return await outcome

    assert asyncio.run(main()) == ("ok", None)


def test_asyncio_scheduler_reports_blocking_fetch_errors():
    async def main():
        scheduler = AsyncioScheduler()
        outcome = asyncio.get_running_loop().create_future()

        def fetch():
            raise RuntimeError("down")

        scheduler.dispatch(fetch, lambda result, error: outcome.set_result((result, error)))
        return await outcome

    result, error = asyncio.run(main())
    assert result is None
    assert isinstance(error, RuntimeError)


def test_enter_on_the_board_refreshes_without_waiting(api, http):
    http.on("GET", "/attendance/live-status", body={"summary": {"working": 1, "onBreak": 0, "checkedOut": 0}})
    read_fd, write_fd = os.pipe()
    lines = []

    def echo(line):
        lines.append(line)
        if len(lines) == 1:
            os.write(write_fd, b"\n")

    board = run_live_board(api, interval=60, clock_interval=60, ticks=2, echo=echo, refresh_fd=read_fd)
    try:
        shown = asyncio.run(asyncio.wait_for(board, 5))
    finally:
        os.close(read_fd)
        os.close(write_fd)

    assert shown == 2
    assert "Refreshing..." in lines
    assert http.paths().count("GET /attendance/live-status") == 2
