from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol, Sequence

from .model import User


class UserRepository(Protocol):
    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[User]:
        raise NotImplementedError

    def list_admin_ids(self) -> Sequence[int]:
        raise NotImplementedError

    def add_accumulators(self, *, user_id: int, overtime_minutes: int = 0, night_diff_minutes: int = 0) -> bool:
        """Add (never overwrite) approved overtime and night-differential minutes."""

        raise NotImplementedError

    def add_mpl_credits(self, *, user_id: int, units: Decimal) -> bool:
        raise NotImplementedError
