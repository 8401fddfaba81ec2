from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from ..core.constants import LOGIN_PATH
from ..core.enums import GuardState
from ..session.model import Session
from .roles import role_root


@dataclass(frozen=True)
class GuardDecision:
    state: GuardState
    redirect_to: Optional[str] = None

    @property
    def allowed(self) -> bool:
        return self.state is GuardState.AUTHENTICATED_OK


def evaluate_guard(session: Session, allowed_roles: Optional[Iterable[str]] = None) -> GuardDecision:
    """Decide whether a guarded subtree may render.

    Loading is checked first so a bootstrap in flight never bounces to login.
    A user on the wrong subtree goes to their own root, never to a 403 page.
    """
    if session.loading:
        return GuardDecision(GuardState.LOADING)

    user = session.user
    if user is None:
        return GuardDecision(GuardState.UNAUTHENTICATED, LOGIN_PATH)

    if allowed_roles is not None:
        allowed = {str(getattr(r, "value", r)) for r in allowed_roles}
        if user.role not in allowed:
            return GuardDecision(GuardState.AUTHENTICATED_WRONG_ROLE, role_root(user.role))

    return GuardDecision(GuardState.AUTHENTICATED_OK)


def resolve_root(session: Session) -> GuardDecision:
    """``/``: send everyone to their own dashboard."""
    if session.loading:
        return GuardDecision(GuardState.LOADING)
    if session.user is None:
        return GuardDecision(GuardState.UNAUTHENTICATED, LOGIN_PATH)
    return GuardDecision(GuardState.AUTHENTICATED_OK, role_root(session.user.role))
