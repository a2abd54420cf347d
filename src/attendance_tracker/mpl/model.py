from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class CutoffPeriod:
    """Inclusive 16th-to-15th window over which overtime is pooled."""

    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(frozen=True)
class ConversionQuota:
    cutoff: CutoffPeriod
    total_overtime_hours: Decimal
    max_convertible: int
    already_converted: int

    @property
    def remaining(self) -> int:
        return self.max_convertible - self.already_converted

    def as_dict(self) -> dict:
        return {
            "cutoff_start": self.cutoff.start.isoformat(),
            "cutoff_end": self.cutoff.end.isoformat(),
            "total_overtime_hours": str(self.total_overtime_hours),
            "max_convertible_mpl": self.max_convertible,
            "already_converted_mpl": self.already_converted,
            "remaining_convertible_mpl": self.remaining,
        }


@dataclass(frozen=True)
class OvertimeMplConversion:
    """Append-only ledger entry."""

    conversion_id: int
    user_id: int
    cutoff_start: date
    cutoff_end: date
    total_overtime_hours: Decimal
    mpl_converted: int
    residual_overtime_hours: Decimal
    conversion_date: datetime
    converted_by: Optional[int] = None
