from datetime import time

from attendance_tracker.core.results import RejectionCode

from conftest import ADMIN_ID


def test_get_config(config_service):
    outcome = config_service.get_config()

    assert outcome.ok
    assert outcome.value.office_start_time == time(9, 0)
    assert outcome.value.regular_minutes == 420
    assert outcome.value.night_window_minutes == 480


def test_missing_config_is_fatal(config_service, configs):
    configs.config = None

    outcome = config_service.get_config()

    assert outcome.rejection.code == RejectionCode.CONFIG_MISSING
    assert outcome.rejection.is_fatal


def test_partial_update_keeps_other_fields(config_service, admin, configs, clock, notifier):
    outcome = config_service.update_config(admin, break_max_minutes=45, night_diff_start_time=time(21, 0))

    assert outcome.ok
    saved = configs.get()
    assert saved.break_max_minutes == 45
    assert saved.night_diff_start_time == time(21, 0)
    assert saved.office_end_time == time(17, 0)
    assert saved.overtime_daily_max_minutes == 180
    assert saved.updated_at == clock.now()
    assert notifier.sent[-1]["title"] == "Configuration Update"
    assert notifier.sent[-1]["exclude_user_id"] == ADMIN_ID


def test_update_accepts_zero_minutes(config_service, admin, configs):
    assert config_service.update_config(admin, break_max_minutes=0).ok
    assert configs.get().break_max_minutes == 0


def test_update_rejects_negative_minutes(config_service, admin, configs):
    before = configs.get()

    outcome = config_service.update_config(admin, overtime_daily_max_minutes=-5)

    assert outcome.rejection.code == RejectionCode.INVALID_CONFIG
    assert configs.get() == before


def test_update_rejects_reversed_office_hours(config_service, admin):
    outcome = config_service.update_config(admin, office_end_time=time(8, 0))
    assert outcome.rejection.code == RejectionCode.INVALID_CONFIG


def test_update_requires_admin(config_service, employee):
    assert config_service.update_config(employee, break_max_minutes=30).rejection.code == RejectionCode.NOT_AUTHORIZED
