from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional

import pytest

from attendance_tracker.attendance.model import AttendanceRecord, AttendanceReportRow
from attendance_tracker.attendance.service import AttendanceService
from attendance_tracker.common.clock import FixedClock
from attendance_tracker.core.actor import Actor
from attendance_tracker.core.enums import AttendanceStatus, OvertimeRequestStatus, Role, VisibilityStatus
from attendance_tracker.mpl.model import OvertimeMplConversion
from attendance_tracker.mpl.service import MplConversionService
from attendance_tracker.overtime.config_service import OvertimeConfigService
from attendance_tracker.overtime.model import OvertimeConfig, OvertimeRequest
from attendance_tracker.overtime.service import OvertimeRequestService
from attendance_tracker.payroll.service import PayrollReportService
from attendance_tracker.users.model import User

ADMIN_ID = 1
EMPLOYEE_ID = 2
OTHER_ADMIN_ID = 3


class InMemoryUsers:
    def __init__(self, users: list[User]):
        self.users = {u.user_id: u for u in users}

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users.get(user_id)

    def get_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.username == username), None)

    def list_admin_ids(self):
        return [u.user_id for u in self.users.values() if u.role == Role.ADMIN and u.is_active]

    def add_accumulators(self, *, user_id: int, overtime_minutes: int = 0, night_diff_minutes: int = 0) -> bool:
        u = self.users[user_id]
        self.users[user_id] = replace(
            u,
            accumulated_overtime_minutes=u.accumulated_overtime_minutes + overtime_minutes,
            accumulated_night_diff_minutes=u.accumulated_night_diff_minutes + night_diff_minutes,
        )
        return True

    def add_mpl_credits(self, *, user_id: int, units: Decimal) -> bool:
        u = self.users[user_id]
        self.users[user_id] = replace(u, mpl_credits=u.mpl_credits + units)
        return True


class InMemoryAttendance:
    def __init__(self, users: InMemoryUsers):
        self._users = users
        self.records: dict[int, AttendanceRecord] = {}
        self._id = 0

    def add(self, record: AttendanceRecord) -> AttendanceRecord:
        self._id = max(self._id, record.attendance_id)
        self.records[record.attendance_id] = record
        return record

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self.records.get(attendance_id)

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return next((r for r in self.records.values() if r.user_id == user_id and r.work_date == work_date), None)

    def get_recent_for_user(self, user_id: int, limit: int, *, include_hidden: bool = False):
        items = [r for r in self.records.values() if r.user_id == user_id and (include_hidden or r.is_visible)]
        items.sort(key=lambda r: r.work_date, reverse=True)
        return items[:limit]

    def list_records(self, *, user_id=None, start_date=None, end_date=None, include_hidden=False, limit=200):
        items = [
            r
            for r in self.records.values()
            if (user_id is None or r.user_id == user_id)
            and (start_date is None or r.work_date >= start_date)
            and (end_date is None or r.work_date <= end_date)
            and (include_hidden or r.is_visible)
        ]
        items.sort(key=lambda r: (r.work_date, r.attendance_id), reverse=True)
        return items[:limit]

    def create_clock_in(self, *, user_id, work_date, clock_in, status, late_minutes, remarks=None) -> int:
        if self.get_for_user_and_date(user_id, work_date):
            raise AssertionError("duplicate (user_id, work_date)")
        self._id += 1
        self.records[self._id] = AttendanceRecord(
            attendance_id=self._id,
            user_id=user_id,
            work_date=work_date,
            clock_in=clock_in,
            status=status,
            late_minutes=late_minutes,
            remarks=remarks,
        )
        return self._id

    def save(self, record: AttendanceRecord) -> bool:
        self.records[record.attendance_id] = record
        return True

    def set_visibility(self, *, attendance_id: int, visibility: VisibilityStatus) -> bool:
        self.records[attendance_id] = replace(self.records[attendance_id], visibility=visibility)
        return True

    def sum_overtime_minutes(self, *, user_id: int, start_date: date, end_date: date) -> int:
        return sum(
            r.overtime_minutes
            for r in self.records.values()
            if r.user_id == user_id and start_date <= r.work_date <= end_date
        )

    def get_report_rows(self, *, start_date, end_date, user_id=None, include_hidden=False):
        rows = []
        for r in sorted(self.records.values(), key=lambda r: (r.user_id, r.work_date)):
            if not (start_date <= r.work_date <= end_date):
                continue
            if user_id is not None and r.user_id != user_id:
                continue
            if not include_hidden and not r.is_visible:
                continue
            rows.append(
                AttendanceReportRow(
                    user_id=r.user_id,
                    name=self._users.get_by_id(r.user_id).name,
                    work_date=r.work_date,
                    clock_in=r.clock_in,
                    clock_out=r.clock_out,
                    break_start=r.break_start,
                    break_finish=r.break_finish,
                    status=r.status,
                    late_minutes=r.late_minutes,
                    overtime_minutes=r.overtime_minutes,
                    night_diff_minutes=r.night_diff_minutes,
                    attendance_id=r.attendance_id,
                    remarks=r.remarks,
                )
            )
        return rows


class InMemoryOvertime:
    def __init__(self):
        self.requests: dict[int, OvertimeRequest] = {}
        self._id = 0

    def add_approved(self, *, user_id: int, work_date: date, start: time, end: time) -> OvertimeRequest:
        self._id += 1
        request = OvertimeRequest(
            request_id=self._id,
            user_id=user_id,
            work_date=work_date,
            start_time=start,
            end_time=end,
            reason="deadline",
            status=OvertimeRequestStatus.APPROVED,
            created_at=datetime.combine(work_date, time(8, 0)),
            reviewed_by=ADMIN_ID,
        )
        self.requests[self._id] = request
        return request

    def create(self, *, user_id, work_date, start_time, end_time, reason, expected_output, created_at) -> int:
        self._id += 1
        self.requests[self._id] = OvertimeRequest(
            request_id=self._id,
            user_id=user_id,
            work_date=work_date,
            start_time=start_time,
            end_time=end_time,
            reason=reason,
            expected_output=expected_output,
            status=OvertimeRequestStatus.PENDING,
            created_at=created_at,
        )
        return self._id

    def get_by_id(self, request_id: int) -> Optional[OvertimeRequest]:
        return self.requests.get(request_id)

    def get_approved_for(self, *, user_id: int, work_date: date) -> Optional[OvertimeRequest]:
        return next(
            (
                r
                for r in self.requests.values()
                if r.user_id == user_id and r.work_date == work_date and r.is_approved
            ),
            None,
        )

    def save(self, request: OvertimeRequest) -> bool:
        self.requests[request.request_id] = request
        return True

    def list_requests(self, *, status=None, user_id=None, limit=200):
        items = [
            r
            for r in self.requests.values()
            if (status is None or r.status == status) and (user_id is None or r.user_id == user_id)
        ]
        items.sort(key=lambda r: r.created_at, reverse=True)
        return items[:limit]


class InMemoryConfig:
    def __init__(self, config: Optional[OvertimeConfig]):
        self.config = config

    def get(self) -> Optional[OvertimeConfig]:
        return self.config

    def save(self, config: OvertimeConfig) -> bool:
        self.config = config
        return True


class InMemoryConversions:
    def __init__(self):
        self.entries: list[OvertimeMplConversion] = []

    def sum_converted(self, *, user_id, cutoff_start, cutoff_end) -> int:
        return sum(
            e.mpl_converted
            for e in self.entries
            if e.user_id == user_id and e.cutoff_start == cutoff_start and e.cutoff_end == cutoff_end
        )

    def sum_converted_overlapping(self, *, user_id, start_date, end_date) -> int:
        return sum(
            e.mpl_converted
            for e in self.entries
            if e.user_id == user_id and e.cutoff_start <= end_date and e.cutoff_end >= start_date
        )

    def append(self, **kwargs) -> int:
        conversion_id = len(self.entries) + 1
        self.entries.append(OvertimeMplConversion(conversion_id=conversion_id, **kwargs))
        return conversion_id

    def get_by_id(self, conversion_id):
        return next((e for e in self.entries if e.conversion_id == conversion_id), None)

    def list_for_user(self, user_id, *, limit=200):
        return [e for e in self.entries if e.user_id == user_id][:limit]

    def list_within(self, *, start_date, end_date, limit=200):
        return [e for e in self.entries if e.cutoff_start >= start_date and e.cutoff_end <= end_date][:limit]


class RecordingNotifier:
    def __init__(self, *, fail: bool = False):
        self.sent: list[dict] = []
        self.fail = fail

    def notify_user(self, user_id, title, message, type, link="/api/notification/view/{id}"):
        if self.fail:
            raise RuntimeError("notification store unavailable")
        self.sent.append({"to": "user", "user_id": user_id, "title": title, "message": message, "type": type})

    def notify_admins(self, title, message, type, link="/api/notification/view/{id}", exclude_user_id=None):
        if self.fail:
            raise RuntimeError("notification store unavailable")
        self.sent.append(
            {"to": "admins", "title": title, "message": message, "type": type, "exclude_user_id": exclude_user_id}
        )

    def titles(self) -> list[str]:
        return [n["title"] for n in self.sent]


class RecordingTransaction:
    """Counts transaction blocks and how many were rolled back."""

    def __init__(self):
        self.opened = 0
        self.failed = 0

    def __call__(self):
        return self

    def __enter__(self):
        self.opened += 1
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is not None:
            self.failed += 1
        return False


def make_config(**overrides) -> OvertimeConfig:
    values = dict(
        office_start_time=time(9, 0),
        office_end_time=time(17, 0),
        break_max_minutes=60,
        night_diff_start_time=time(22, 0),
        night_diff_end_time=time(6, 0),
        overtime_daily_max_minutes=180,
    )
    values.update(overrides)
    return OvertimeConfig(**values)


@pytest.fixture
def clock():
    return FixedClock(datetime(2024, 3, 4, 8, 55))


@pytest.fixture
def users():
    return InMemoryUsers(
        [
            User(ADMIN_ID, "Ada Admin", "ada", "x", Role.ADMIN),
            User(EMPLOYEE_ID, "Eve Employee", "eve", "x", Role.EMPLOYEE),
            User(OTHER_ADMIN_ID, "Oscar Admin", "oscar", "x", Role.ADMIN),
        ]
    )


@pytest.fixture
def admin():
    return Actor(user_id=ADMIN_ID, role=Role.ADMIN, name="Ada Admin")


@pytest.fixture
def employee():
    return Actor(user_id=EMPLOYEE_ID, role=Role.EMPLOYEE, name="Eve Employee")


@pytest.fixture
def attendance(users):
    return InMemoryAttendance(users)


@pytest.fixture
def overtime():
    return InMemoryOvertime()


@pytest.fixture
def configs():
    return InMemoryConfig(make_config())


@pytest.fixture
def conversions():
    return InMemoryConversions()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def tx():
    return RecordingTransaction()


@pytest.fixture
def attendance_service(attendance, users, overtime, configs, notifier, clock, tx):
    return AttendanceService(attendance, users, overtime, configs, notifier, clock=clock, transaction=tx)


@pytest.fixture
def overtime_service(overtime, notifier, clock, tx):
    return OvertimeRequestService(overtime, notifier, clock=clock, transaction=tx)


@pytest.fixture
def config_service(configs, notifier, clock):
    return OvertimeConfigService(configs, notifier, clock=clock)


@pytest.fixture
def mpl_service(attendance, conversions, users, notifier, clock, tx):
    return MplConversionService(attendance, conversions, users, notifier, clock=clock, transaction=tx)


@pytest.fixture
def report_service(attendance, conversions):
    return PayrollReportService(attendance, conversions)


@pytest.fixture
def record_factory(attendance):
    """Insert a finished attendance record directly into the fake store."""

    def make(
        *,
        attendance_id: int,
        user_id: int = EMPLOYEE_ID,
        work_date: date,
        clock_in: Optional[time] = time(9, 0),
        clock_out: Optional[time] = time(17, 0),
        status: AttendanceStatus = AttendanceStatus.PRESENT,
        **fields,
    ) -> AttendanceRecord:
        return attendance.add(
            AttendanceRecord(
                attendance_id=attendance_id,
                user_id=user_id,
                work_date=work_date,
                clock_in=datetime.combine(work_date, clock_in) if clock_in else None,
                clock_out=datetime.combine(work_date, clock_out) if clock_out else None,
                status=status,
                **fields,
            )
        )

    return make
