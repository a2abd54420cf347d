from datetime import date

import pytest

from attendance_tracker.mpl.cutoff import cutoff_for


@pytest.mark.parametrize(
    "reference,start,end",
    [
        (date(2024, 3, 15), date(2024, 2, 16), date(2024, 3, 15)),
        (date(2024, 3, 16), date(2024, 3, 16), date(2024, 4, 15)),
        (date(2024, 1, 10), date(2023, 12, 16), date(2024, 1, 15)),
        (date(2024, 12, 20), date(2024, 12, 16), date(2025, 1, 15)),
        (date(2024, 2, 29), date(2024, 2, 16), date(2024, 3, 15)),
    ],
)
def test_cutoff_for(reference, start, end):
    cutoff = cutoff_for(reference)

    assert (cutoff.start, cutoff.end) == (start, end)
    assert cutoff.contains(reference)


def test_consecutive_cutoffs_do_not_overlap():
    first = cutoff_for(date(2024, 3, 15))
    second = cutoff_for(date(2024, 3, 16))
    assert (second.start - first.end).days == 1
