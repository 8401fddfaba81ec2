"""Terminal live board: ``flask --app hrms_portal.main watch-live``."""
from __future__ import annotations

import asyncio
import logging
import os
import sys
from typing import Callable, Optional

import click
from flask import Flask

from .api.client import ApiClient
from .api.resources import HrmsApi
from .common.datetime_utils import format_clock, now_local
from .container import Container
from .core.enums import Role
from .core.exceptions import AuthenticationError, ValidationError
from .core.signals import session_invalidated
from .dashboards.pages import summarize_live_status
from .polling.controller import PollingController
from .polling.scheduler import AsyncioScheduler
from .session.service import SessionStore
from .session.token_store import MemoryTokenStore

logger = logging.getLogger(__name__)

LIVE_STATUS_ROLES = (Role.ADMIN, Role.MANAGER, Role.HR)


async def run_live_board(
    api: HrmsApi,
    *,
    interval: float,
    clock_interval: float,
    ticks: int = 0,
    echo: Callable[[str], None] = click.echo,
    refresh_fd: Optional[int] = None,
) -> int:
    """Poll the live attendance summary until ``ticks`` updates were shown.

    ``ticks=0`` runs until cancelled. A line read from ``refresh_fd`` triggers a
    manual refresh. Returns the number of updates shown.
    """
    loop = asyncio.get_running_loop()
    scheduler = AsyncioScheduler(loop)
    finished = asyncio.Event()
    state = {"clock": "", "updates": 0}

    def show_clock(now) -> None:
        state["clock"] = format_clock(now)

    def show_live(data) -> None:
        if finished.is_set():
            return
        state["updates"] += 1
        summary = summarize_live_status(data)
        stamp = state["clock"] or format_clock(now_local())
        echo(f"[{stamp}] " + "  ".join(f"{label}: {count}" for label, count in summary.items()))
        if ticks and state["updates"] >= ticks:
            finished.set()

    def on_invalidated(sender, **extra) -> None:
        # Sent from the executor thread running the fetch.
        echo("Session expired, sign in again.")
        loop.call_soon_threadsafe(finished.set)

    def on_input() -> None:
        if not os.read(refresh_fd, 1024):
            loop.remove_reader(refresh_fd)
            return
        if live.refresh():
            echo("Refreshing...")
        else:
            echo("Refresh already in progress")

    clock = PollingController(now_local, show_clock, interval=clock_interval, scheduler=scheduler, name="clock")
    live = PollingController(
        lambda: api.attendance.get_live_status().data,
        show_live,
        interval=interval,
        scheduler=scheduler,
        name="live-status",
    )

    session_invalidated.connect(on_invalidated, sender=api.client, weak=False)
    clock.start()
    live.start()
    if refresh_fd is not None:
        try:
            loop.add_reader(refresh_fd, on_input)
        except NotImplementedError:
            logger.info("Manual refresh is not available on this event loop")
            refresh_fd = None
    try:
        await finished.wait()
    finally:
        if refresh_fd is not None:
            loop.remove_reader(refresh_fd)
        live.stop()
        clock.stop()
        session_invalidated.disconnect(on_invalidated, sender=api.client)
    return state["updates"]


def register(app: Flask, container: Container) -> None:
    @app.cli.command("watch-live")
    @click.option("--email", required=True)
    @click.option("--password", prompt=True, hide_input=True)
    @click.option("--interval", type=float, default=None, help="Seconds between refreshes.")
    @click.option("--ticks", type=int, default=0, help="Stop after N updates (0 runs until interrupted).")
    def watch_live(email: str, password: str, interval, ticks: int):
        """Show the live attendance summary, refreshed on a fixed interval."""
        tokens = MemoryTokenStore()
        api = HrmsApi.bind(ApiClient(container.client.base_url, tokens, timeout=container.client.timeout))
        store = SessionStore(api.auth, tokens)
        try:
            user = store.login(email, password)
        except (ValidationError, AuthenticationError) as e:
            raise click.ClickException(str(e))

        if user.role_enum not in LIVE_STATUS_ROLES:
            raise click.ClickException("Live status is available to admin, manager and HR accounts")

        click.echo(f"Signed in as {user.name} ({user.role})")
        refresh_fd = sys.stdin.fileno() if sys.stdin.isatty() else None
        if refresh_fd is not None:
            click.echo("Press Enter to refresh now.")
        try:
            asyncio.run(
                run_live_board(
                    api,
                    interval=interval or container.live_poll_seconds,
                    clock_interval=container.clock_tick_seconds,
                    ticks=ticks,
                    refresh_fd=refresh_fd,
                )
            )
        except KeyboardInterrupt:
            logger.info("watch-live interrupted")
        finally:
            store.logout()
