from datetime import date, datetime
from decimal import Decimal

import pytest

from attendance_tracker.core.results import RejectionCode
from attendance_tracker.mpl.model import CutoffPeriod

from conftest import ADMIN_ID, EMPLOYEE_ID

CUTOFF = CutoffPeriod(start=date(2024, 2, 16), end=date(2024, 3, 15))


@pytest.fixture
def twenty_hours(record_factory, conversions):
    """1200 overtime minutes inside the cutoff and one unit already converted."""
    for i, minutes in enumerate([180, 180, 180, 180, 180, 180, 120], start=1):
        record_factory(attendance_id=i, work_date=date(2024, 2, 19 + i), overtime_minutes=minutes)
    # outside the cutoff, never counted
    record_factory(attendance_id=50, work_date=date(2024, 3, 18), overtime_minutes=600)
    conversions.append(
        user_id=EMPLOYEE_ID,
        cutoff_start=CUTOFF.start,
        cutoff_end=CUTOFF.end,
        total_overtime_hours=Decimal("12.00"),
        mpl_converted=1,
        residual_overtime_hours=Decimal("4"),
        conversion_date=datetime(2024, 3, 1, 10, 0),
        converted_by=ADMIN_ID,
    )


def test_quota(mpl_service, twenty_hours):
    quota = mpl_service.quota(EMPLOYEE_ID, cutoff=CUTOFF)

    assert quota.total_overtime_hours == Decimal("20.00")
    assert quota.max_convertible == 2
    assert quota.already_converted == 1
    assert quota.remaining == 1


def test_quota_defaults_to_current_cutoff(mpl_service, twenty_hours):
    # the fixed clock sits on 2024-03-04
    assert mpl_service.quota(EMPLOYEE_ID).cutoff == CUTOFF


def test_convert_beyond_remaining_is_rejected(mpl_service, admin, twenty_hours, conversions, users):
    outcome = mpl_service.convert(admin, EMPLOYEE_ID, 2, cutoff=CUTOFF)

    assert outcome.rejection.code == RejectionCode.MPL_QUOTA_EXCEEDED
    assert outcome.rejection.details["remaining_convertible_mpl"] == 1
    assert outcome.rejection.details["max_convertible_mpl"] == 2
    assert len(conversions.entries) == 1
    assert users.get_by_id(EMPLOYEE_ID).mpl_credits == Decimal(0)


def test_convert_within_remaining(mpl_service, admin, twenty_hours, conversions, users, notifier):
    outcome = mpl_service.convert(admin, EMPLOYEE_ID, 1, cutoff=CUTOFF)

    assert outcome.ok
    entry = outcome.value
    assert entry.mpl_converted == 1
    assert entry.total_overtime_hours == Decimal("20.00")
    assert entry.residual_overtime_hours == Decimal(4)
    assert entry.converted_by == ADMIN_ID
    assert conversions.entries[-1] == entry
    assert users.get_by_id(EMPLOYEE_ID).mpl_credits == Decimal(1)
    assert notifier.sent[-1]["user_id"] == EMPLOYEE_ID
    assert notifier.sent[-1]["title"] == "Overtime to MPL Conversion"

    assert mpl_service.quota(EMPLOYEE_ID, cutoff=CUTOFF).remaining == 0


def test_residual_is_floored(mpl_service, admin, record_factory):
    record_factory(attendance_id=1, work_date=date(2024, 3, 1), overtime_minutes=590)

    outcome = mpl_service.convert(admin, EMPLOYEE_ID, 1, cutoff=CUTOFF)

    assert outcome.value.total_overtime_hours == Decimal("9.83")
    assert outcome.value.residual_overtime_hours == Decimal(1)


@pytest.mark.parametrize("units", [0, -1])
def test_convert_rejects_non_positive_units(mpl_service, admin, twenty_hours, units):
    outcome = mpl_service.convert(admin, EMPLOYEE_ID, units, cutoff=CUTOFF)
    assert outcome.rejection.code == RejectionCode.INVALID_MPL_UNITS


def test_convert_requires_admin(mpl_service, employee, twenty_hours):
    outcome = mpl_service.convert(employee, EMPLOYEE_ID, 1, cutoff=CUTOFF)
    assert outcome.rejection.code == RejectionCode.NOT_AUTHORIZED


def test_convert_unknown_user(mpl_service, admin):
    outcome = mpl_service.convert(admin, 404, 1, cutoff=CUTOFF)
    assert outcome.rejection.code == RejectionCode.USER_NOT_FOUND


def test_history_and_period_listing(mpl_service, admin, twenty_hours):
    mpl_service.convert(admin, EMPLOYEE_ID, 1, cutoff=CUTOFF)

    assert [e.mpl_converted for e in mpl_service.history(EMPLOYEE_ID)] == [1, 1]
    assert len(mpl_service.list_for_period(date(2024, 2, 1), date(2024, 3, 31))) == 2
    assert mpl_service.list_for_period(date(2024, 3, 16), date(2024, 4, 15)) == []
