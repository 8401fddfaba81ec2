from __future__ import annotations

import logging

from flask import Flask, flash, g, redirect, render_template, request

from ..common.datetime_utils import format_clock, now_local
from ..common.validators import require_non_empty
from ..container import Container
from ..core.exceptions import ApiError, TransportError, ValidationError
from ..routing.decorators import guarded
from ..routing.router import DashboardShell
from .actions import ACTIONS, ActionRoute
from .pages import PAGES, PageView

logger = logging.getLogger(__name__)


def page_url(shell: DashboardShell, slug: str) -> str:
    return f"{shell.root}/{slug}" if slug else shell.root


def is_partial_request() -> bool:
    """Background refresh from a page's poller, not a navigation."""
    return request.args.get("partial") == "1"


def register(app: Flask, container: Container) -> None:
    for shell in container.router.shells:
        for page in PAGES.get(shell.role, ()):
            _register_page(app, container, shell, page)
        for action in ACTIONS:
            if shell.role in action.roles:
                _register_action(app, container, shell, action)


def _register_page(app: Flask, container: Container, shell: DashboardShell, page: PageView) -> None:
    endpoint = f"{shell.role.value}_{page.slug.replace('-', '_') or 'home'}"

    @guarded(shell.allowed_roles)
    def view():
        args = {name: request.args[name] for name in page.params if request.args.get(name)}
        error = None
        try:
            sections = page.load(container.api, args, g.auth.user)
        except (ApiError, TransportError) as e:
            if is_partial_request():
                # Polling misses are not shown; the next tick self-corrects.
                logger.warning("Refresh of %s failed: %s", request.path, e)
                return "", 503
            logger.warning("Loading %s failed: %s", request.path, e)
            sections = []
            error = e.message_or("Failed to load data")

        template = "dashboards/_sections.html" if is_partial_request() else "dashboards/page.html"
        return render_template(
            template,
            shell=shell,
            page=page,
            sections=sections,
            error=error,
            args=args,
            poll_seconds=container.live_poll_seconds if page.live else None,
            clock_seconds=container.clock_tick_seconds,
            loaded_at=format_clock(now_local()),
        )

    app.add_url_rule(page_url(shell, page.slug), endpoint=endpoint, view_func=view, methods=["GET"])


def _register_action(app: Flask, container: Container, shell: DashboardShell, action: ActionRoute) -> None:
    endpoint = f"{shell.role.value}_{action.name}"
    back_url = page_url(shell, action.back)

    @guarded(shell.allowed_roles)
    def view(**kwargs):
        try:
            for name in action.required:
                require_non_empty(request.form.get(name), name)
            action.call(container.api, request.form, kwargs)
            flash(action.success, "success")
        except ValidationError as e:
            flash(str(e), "warning")
        except (ApiError, TransportError) as e:
            flash(e.message_or(action.failure), "danger")

        next_url = request.form.get("next") or ""
        if shell.owns(next_url):
            return redirect(next_url)
        return redirect(back_url)

    app.add_url_rule(f"{shell.root}/{action.rule}", endpoint=endpoint, view_func=view, methods=["POST"])
