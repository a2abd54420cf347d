from __future__ import annotations

from dataclasses import dataclass

from .enums import Role


@dataclass(frozen=True)
class Actor:
    """Who is performing an operation. Supplied by the caller, never looked up."""

    user_id: int
    role: Role
    name: str = ""

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
