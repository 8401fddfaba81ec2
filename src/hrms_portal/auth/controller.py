from __future__ import annotations

import logging

from flask import Flask, flash, g, redirect, render_template, request, url_for

from ..common.validators import require_non_empty
from ..container import Container
from ..core.constants import LOGIN_PATH
from ..core.enums import GuardState
from ..core.exceptions import ApiError, AuthenticationError, TransportError, ValidationError
from ..routing.guard import resolve_root
from ..routing.roles import role_root

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/", endpoint="root")
    def root():
        decision = resolve_root(g.auth.state)
        if decision.state is GuardState.LOADING:
            return render_template("loading.html")
        return redirect(decision.redirect_to or LOGIN_PATH)

    @app.route(LOGIN_PATH, methods=["GET", "POST"], endpoint="login")
    def login():
        if g.auth.user is not None:
            target = role_root(g.auth.user.role)
            if target != LOGIN_PATH:
                return redirect(target)
            # No dashboard for this role; drop the session so another account can sign in.
            logger.warning("Signed-in user %s has unknown role %r", g.auth.user.email, g.auth.user.role)
            g.auth.logout()
            flash("Your account has no dashboard. Sign in with another account.", "warning")

        email = ""
        if request.method == "POST":
            email = request.form.get("email", "")
            password = request.form.get("password", "")
            try:
                user = g.auth.login(email, password)
                return redirect(role_root(user.role))
            except (ValidationError, AuthenticationError) as e:
                flash(str(e), "danger")

        return render_template("auth/login.html", email=email)

    @app.route("/logout", methods=["GET", "POST"], endpoint="logout")
    def logout():
        g.auth.logout()
        flash("Signed out.", "info")
        return redirect(url_for("login"))

    @app.route("/register", methods=["GET", "POST"], endpoint="register")
    def register_account():
        if request.method == "POST":
            form = request.form
            try:
                payload = {
                    "name": require_non_empty(form.get("name"), "Name"),
                    "email": require_non_empty(form.get("email"), "Email"),
                    "password": require_non_empty(form.get("password"), "Password"),
                    "phone": form.get("phone") or None,
                    "position": form.get("position") or None,
                }
                container.api.auth.register(payload)
                flash("Registration successful! Please wait for HR approval before logging in.", "success")
                return redirect(url_for("login"))
            except ValidationError as e:
                flash(str(e), "warning")
            except (ApiError, TransportError) as e:
                flash(e.message_or("Registration failed"), "danger")

        return render_template("auth/register.html")

    @app.route("/forgot-password", methods=["GET", "POST"], endpoint="forgot_password")
    def forgot_password():
        if request.method == "POST":
            try:
                email = require_non_empty(request.form.get("email"), "Email")
                container.api.password_reset.request(email)
                flash("Password reset request submitted!", "success")
                return redirect(url_for("login"))
            except ValidationError as e:
                flash(str(e), "warning")
            except (ApiError, TransportError) as e:
                flash(e.message_or("Failed"), "danger")

        return render_template("auth/forgot_password.html")
