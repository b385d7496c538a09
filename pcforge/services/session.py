# pcforge/services/session.py
"""
Per-request session state and the in-process notification hub.

Identity comes from the upstream auth provider as request headers; each
request gets its own ``SessionState`` instead of a shared global context.
The hub is a plain publish/subscribe registry: listeners subscribe for a
topic, get a token back and unsubscribe with it. Delivery is best effort,
with no acknowledgement, retry or ordering guarantee.
"""

from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from fastapi import Depends, Header, HTTPException

logger = logging.getLogger(__name__)

ROLES = ("customer", "vendor", "admin")


@dataclass(frozen=True)
class SessionState:
    user_id: str
    role: str
    email: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def get_session_state(
    x_user_id: Optional[str] = Header(default=None),
    x_user_role: Optional[str] = Header(default=None),
    x_user_email: Optional[str] = Header(default=None),
) -> SessionState:
    if not x_user_id or not x_user_role:
        raise HTTPException(status_code=401, detail="Authentication required")
    role = x_user_role.lower()
    if role not in ROLES:
        raise HTTPException(status_code=401, detail=f"Unknown role {x_user_role}")
    return SessionState(user_id=x_user_id, role=role, email=x_user_email)


def require_role(*roles: str):
    """Dependency factory: the caller must hold one of ``roles``."""

    def _dependency(state: SessionState = Depends(get_session_state)) -> SessionState:
        if state.role not in roles:
            raise HTTPException(status_code=403, detail=f"Requires role: {', '.join(roles)}")
        return state

    return _dependency


Listener = Callable[[str, Dict[str, Any]], None]


class NotificationHub:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counter = itertools.count(1)
        self._listeners: Dict[int, Tuple[str, Listener]] = {}

    def subscribe(self, topic: str, callback: Listener) -> int:
        """Register ``callback`` for ``topic`` ("*" for every topic)."""
        with self._lock:
            token = next(self._counter)
            self._listeners[token] = (topic, callback)
        return token

    def unsubscribe(self, token: int) -> bool:
        with self._lock:
            return self._listeners.pop(token, None) is not None

    def publish(self, topic: str, payload: Dict[str, Any]) -> int:
        """Call every matching listener; returns how many were called."""
        with self._lock:
            targets = [cb for t, cb in self._listeners.values() if t in (topic, "*")]
        delivered = 0
        for cb in targets:
            try:
                cb(topic, payload)
                delivered += 1
            except Exception:
                logger.exception("Notification listener failed for topic %s", topic)
        return delivered

    def clear(self) -> None:
        with self._lock:
            self._listeners.clear()


hub = NotificationHub()
