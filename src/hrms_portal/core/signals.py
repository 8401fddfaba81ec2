"""Portal-wide notifications.

``session_invalidated`` is sent by the HTTP adapter whenever the backend answers
401; the sender is the adapter, ``path`` is the request path that triggered it.
"""
from blinker import Namespace

_signals = Namespace()

session_invalidated = _signals.signal("session-invalidated")
