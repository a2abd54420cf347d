from __future__ import annotations

from datetime import date

from ..core.constants import CUTOFF_BOUNDARY_DAY
from .model import CutoffPeriod


def _shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def cutoff_for(reference: date) -> CutoffPeriod:
    """Cutoff period containing `reference`.

    Days 1-15 belong to [16th of the previous month, 15th of this month];
    days 16-31 to [16th of this month, 15th of the next month].
    """
    if reference.day <= CUTOFF_BOUNDARY_DAY:
        year, month = _shift_month(reference.year, reference.month, -1)
        return CutoffPeriod(
            start=date(year, month, CUTOFF_BOUNDARY_DAY + 1),
            end=date(reference.year, reference.month, CUTOFF_BOUNDARY_DAY),
        )

    year, month = _shift_month(reference.year, reference.month, 1)
    return CutoffPeriod(
        start=date(reference.year, reference.month, CUTOFF_BOUNDARY_DAY + 1),
        end=date(year, month, CUTOFF_BOUNDARY_DAY),
    )
