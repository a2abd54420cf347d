from __future__ import annotations

from dataclasses import dataclass

from werkzeug.security import check_password_hash

from ..common.events import EventLogger
from ..core.actor import Actor
from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from .repository import UserRepository


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: int
    name: str
    role: Role

    def as_actor(self) -> Actor:
        return Actor(user_id=self.user_id, role=self.role, name=self.name)


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository, *, events: EventLogger | None = None):
        self._users = users
        self._events = events or EventLogger("auth")

    def authenticate(self, username: str, password: str) -> SessionUser:
        user = self._users.get_by_username((username or "").strip())
        if not user or not user.is_active:
            self._events.transition("login_failed", username=username)
            raise AuthenticationError("Invalid username or password.")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # Placeholder or corrupted hashes.
            ok = False

        if not ok:
            self._events.transition("login_failed", username=username)
            raise AuthenticationError("Invalid username or password.")

        self._events.transition("login", user_id=user.user_id, role=user.role)
        return SessionUser(user_id=user.user_id, name=user.name, role=user.role)
