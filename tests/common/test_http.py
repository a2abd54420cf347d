from datetime import date, time
from decimal import Decimal

import pytest
from flask import Flask

from attendance_tracker.common.http import admin_required, outcome_response, to_jsonable
from attendance_tracker.core.enums import OvertimeRequestStatus
from attendance_tracker.core.results import Outcome, RejectionCode


@pytest.fixture
def app():
    app = Flask(__name__)
    app.secret_key = "test"

    @app.route("/admin-only")
    @admin_required
    def admin_only():
        return outcome_response(Outcome.success({"ok": True}))

    @app.route("/login-as/<role>")
    def login_as(role):
        from flask import session

        session.update(user_id=1, role=role, name="Ada Admin")
        return "", 204

    return app


def test_to_jsonable():
    assert to_jsonable(
        {"d": date(2024, 3, 4), "t": time(17, 5), "h": Decimal("1.50"), "s": OvertimeRequestStatus.PENDING}
    ) == {"d": "2024-03-04", "t": "17:05", "h": "1.50", "s": "PENDING"}


@pytest.mark.parametrize(
    "code,status",
    [
        (RejectionCode.RECORD_NOT_FOUND, 404),
        (RejectionCode.NOT_AUTHORIZED, 403),
        (RejectionCode.INVALID_TIME_RANGE, 400),
        (RejectionCode.CONFIG_MISSING, 500),
        (RejectionCode.ALREADY_CLOCKED_IN, 409),
    ],
)
def test_rejections_map_to_statuses(app, code, status):
    with app.app_context():
        response, got = outcome_response(Outcome.reject(code, request_id=7))

    assert got == status
    assert response.get_json()["code"] == code.value
    assert response.get_json()["details"] == {"request_id": 7}


def test_admin_required(app):
    client = app.test_client()
    assert client.get("/admin-only").status_code == 401

    client.get("/login-as/employee")
    assert client.get("/admin-only").status_code == 403

    client.get("/login-as/admin")
    response = client.get("/admin-only")
    assert response.status_code == 200
    assert response.get_json()["data"] == {"ok": True}
