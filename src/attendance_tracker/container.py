from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from typing import Callable, ContextManager, Optional

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .common.clock import Clock, SystemClock
from .common.events import EventLogger
from .database.connection import DBConfig, DatabaseConnection
from .database.mysql_base import transaction
from .mpl.mysql_mpl_repository import MySQLMplConversionRepository
from .mpl.service import MplConversionService
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.service import NotificationService
from .overtime.capper import OvertimeAccrualCapper
from .overtime.config_service import OvertimeConfigService
from .overtime.mysql_overtime_repository import MySQLOvertimeConfigRepository, MySQLOvertimeRepository
from .overtime.night_differential import NightDifferentialCalculator
from .overtime.service import OvertimeRequestService
from .payroll.service import PayrollReportService
from .users.mysql_user_repository import MySQLUserRepository
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection
    transaction: Callable[[], ContextManager]

    users_repo: MySQLUserRepository
    attendance_repo: MySQLAttendanceRepository
    overtime_repo: MySQLOvertimeRepository
    config_repo: MySQLOvertimeConfigRepository
    mpl_repo: MySQLMplConversionRepository
    notifications_repo: MySQLNotificationRepository

    notification_service: NotificationService
    auth_service: AuthService
    attendance_service: AttendanceService
    overtime_service: OvertimeRequestService
    config_service: OvertimeConfigService
    mpl_service: MplConversionService
    payroll_report_service: PayrollReportService


def build_container(*, db_config: dict, clock: Optional[Clock] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
    tx = partial(transaction, conn)
    clock = clock or SystemClock()

    users_repo = MySQLUserRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    overtime_repo = MySQLOvertimeRepository(conn)
    config_repo = MySQLOvertimeConfigRepository(conn)
    mpl_repo = MySQLMplConversionRepository(conn)
    notifications_repo = MySQLNotificationRepository(conn)

    notification_service = NotificationService(notifications_repo, users_repo, clock=clock)
    auth_service = AuthService(users_repo)
    attendance_service = AttendanceService(
        attendance_repo,
        users_repo,
        overtime_repo,
        config_repo,
        notification_service,
        clock=clock,
        events=EventLogger("attendance"),
        transaction=tx,
        strategy_factory=AttendanceStrategyFactory(),
        capper=OvertimeAccrualCapper(),
        night_calculator=NightDifferentialCalculator(),
    )
    overtime_service = OvertimeRequestService(
        overtime_repo, notification_service, clock=clock, events=EventLogger("overtime"), transaction=tx
    )
    config_service = OvertimeConfigService(
        config_repo, notification_service, clock=clock, events=EventLogger("overtime_config"), transaction=tx
    )
    mpl_service = MplConversionService(
        attendance_repo, mpl_repo, users_repo, notification_service, clock=clock, events=EventLogger("mpl"), transaction=tx
    )
    payroll_report_service = PayrollReportService(attendance_repo, mpl_repo)

    return Container(
        conn=conn,
        transaction=tx,
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        overtime_repo=overtime_repo,
        config_repo=config_repo,
        mpl_repo=mpl_repo,
        notifications_repo=notifications_repo,
        notification_service=notification_service,
        auth_service=auth_service,
        attendance_service=attendance_service,
        overtime_service=overtime_service,
        config_service=config_service,
        mpl_service=mpl_service,
        payroll_report_service=payroll_report_service,
    )
