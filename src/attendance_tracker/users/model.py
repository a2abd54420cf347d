from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User with its running accounting totals.

    The accumulators only ever grow; payout and leave consumption happen
    outside this package.
    """

    user_id: int
    name: str
    username: str
    password_hash: str
    role: Role
    is_active: bool = True
    accumulated_overtime_minutes: int = 0
    accumulated_night_diff_minutes: int = 0
    mpl_credits: Decimal = Decimal("0")
