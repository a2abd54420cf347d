import json
import logging
from datetime import date
from decimal import Decimal

from attendance_tracker.common.events import EventLogger
from attendance_tracker.core.enums import AttendanceStatus
from attendance_tracker.core.results import Rejection, RejectionCode
from attendance_tracker.logging_config import StructuredFormatter, get_logger


def test_get_logger_namespaces_names():
    assert get_logger("attendance").name == "attendance_tracker.attendance"
    assert get_logger("attendance_tracker.mpl").name == "attendance_tracker.mpl"


def test_structured_formatter_serializes_extras():
    record = logging.LogRecord("attendance_tracker.attendance", logging.INFO, __file__, 1, "clock_in", (), None)
    record.fields = {"work_date": date(2024, 3, 4), "hours": Decimal("1.50"), "status": AttendanceStatus.LATE}

    payload = json.loads(StructuredFormatter().format(record))

    assert payload["level"] == "INFO"
    assert payload["message"] == "clock_in"
    assert payload["fields"] == {"work_date": "2024-03-04", "hours": "1.50", "status": "LATE"}


def test_rejections_log_at_warning_and_missing_config_at_error(caplog):
    events = EventLogger("overtime_config", logger=logging.getLogger("tests.events"))

    with caplog.at_level(logging.INFO, logger="tests.events"):
        events.rejected("update_config", Rejection.of(RejectionCode.INVALID_CONFIG, field="break_max_minutes"))
        events.rejected("get_config", Rejection.of(RejectionCode.CONFIG_MISSING))
        events.transition("update_config", admin_id=1)

    assert [r.levelno for r in caplog.records] == [logging.WARNING, logging.ERROR, logging.INFO]
    assert caplog.records[0].code == "INVALID_CONFIG"
    assert caplog.records[0].fields == {"field": "break_max_minutes"}
    assert caplog.records[2].event == "update_config"
