from __future__ import annotations

from functools import wraps
from typing import Iterable, Optional

from flask import g, redirect, render_template

from ..core.enums import GuardState
from .guard import evaluate_guard


def guarded(allowed_roles: Optional[Iterable[str]] = None):
    """Render the view only for a bootstrapped session whose role is allowed.

    Uses the request's ``g.auth`` session store (set up before each request).
    """
    roles = tuple(allowed_roles) if allowed_roles is not None else None

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            decision = evaluate_guard(g.auth.state, roles)
            if decision.state is GuardState.LOADING:
                return render_template("loading.html")
            if decision.redirect_to:
                return redirect(decision.redirect_to)
            return view(*args, **kwargs)

        return wrapper

    return decorator
