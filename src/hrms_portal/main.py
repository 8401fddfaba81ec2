from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, current_app, g, has_request_context, jsonify, redirect, request

from .auth.controller import register as register_auth
from .cli import register as register_cli
from .config import get_settings_module
from .container import Container, build_container
from .core.constants import LOGIN_PATH, ROOT_PATH
from .core.signals import session_invalidated
from .dashboards.controller import is_partial_request, register as register_dashboards
from .routing.roles import role_label

logger = logging.getLogger(__name__)


def _flag_session_invalidated(sender, **extra) -> None:
    if not has_request_context():
        return
    container = current_app.extensions.get("hrms_portal")
    if container is not None and sender is container.client:
        g.session_invalidated = True


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=logging.DEBUG if app.config["DEBUG"] else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if container is None:
        container = build_container(
            api_base_url=getattr(settings, "API_BASE_URL"),
            api_timeout=getattr(settings, "API_TIMEOUT", 10.0),
            live_poll_seconds=getattr(settings, "LIVE_POLL_SECONDS", 3.0),
            clock_tick_seconds=getattr(settings, "CLOCK_TICK_SECONDS", 1.0),
        )
    app.extensions["hrms_portal"] = container
    logger.info("[hrms-portal] settings=%s api=%s", settings_module, container.client.base_url)

    # The adapter only announces a 401; navigation to login happens here.
    # Connecting the same module-level receiver again is a no-op.
    session_invalidated.connect(_flag_session_invalidated)

    @app.before_request
    def bootstrap_session():
        if request.endpoint == "static":
            return None
        g.auth = container.session_store()
        g.auth.bootstrap()
        return None

    @app.after_request
    def redirect_invalidated_session(response):
        if not g.get("session_invalidated"):
            return response
        if is_partial_request():
            # Background refresh: the page script performs the navigation.
            response = jsonify({"error": "Session expired", "redirect": LOGIN_PATH})
            response.status_code = 401
            return response
        if request.path == LOGIN_PATH and request.method == "GET":
            return response
        return redirect(LOGIN_PATH)

    @app.errorhandler(404)
    def unmatched(_error):
        return redirect(ROOT_PATH)

    @app.context_processor
    def inject_session():
        auth = g.get("auth")
        user = auth.user if auth is not None else None
        return {
            "current_user": user,
            "current_role_label": role_label(user.role) if user else "",
        }

    register_auth(app, container)
    register_dashboards(app, container)
    register_cli(app, container)

    return app
