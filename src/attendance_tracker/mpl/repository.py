from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from .model import OvertimeMplConversion


class MplConversionRepository(Protocol):
    def sum_converted(self, *, user_id: int, cutoff_start: date, cutoff_end: date) -> int:
        """Units already converted for exactly this cutoff window."""

        raise NotImplementedError

    def sum_converted_overlapping(self, *, user_id: int, start_date: date, end_date: date) -> int:
        """Units converted in any cutoff that overlaps [start_date, end_date]."""

        raise NotImplementedError

    def append(
        self,
        *,
        user_id: int,
        cutoff_start: date,
        cutoff_end: date,
        total_overtime_hours: Decimal,
        mpl_converted: int,
        residual_overtime_hours: Decimal,
        conversion_date: datetime,
        converted_by: Optional[int],
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, conversion_id: int) -> Optional[OvertimeMplConversion]:
        raise NotImplementedError

    def list_for_user(self, user_id: int, *, limit: int = 200) -> Sequence[OvertimeMplConversion]:
        raise NotImplementedError

    def list_within(self, *, start_date: date, end_date: date, limit: int = 200) -> Sequence[OvertimeMplConversion]:
        """Entries whose cutoff lies inside [start_date, end_date]."""

        raise NotImplementedError
