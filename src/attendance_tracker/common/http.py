"""Helpers shared by the JSON controllers."""

from __future__ import annotations

from dataclasses import asdict, is_dataclass
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from functools import wraps
from typing import Any, Callable, Optional

from flask import jsonify, request, session

from ..core.actor import Actor
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..core.results import Outcome, RejectionCode

STATUS_BY_CODE: dict[RejectionCode, int] = {
    RejectionCode.RECORD_NOT_FOUND: 404,
    RejectionCode.USER_NOT_FOUND: 404,
    RejectionCode.REQUEST_NOT_FOUND: 404,
    RejectionCode.NOT_AUTHORIZED: 403,
    RejectionCode.NOT_REQUEST_OWNER: 403,
    RejectionCode.CONFIG_MISSING: 500,
    RejectionCode.INVALID_RECORD_TIMES: 400,
    RejectionCode.INVALID_CONFIG: 400,
    RejectionCode.INVALID_TIME_RANGE: 400,
    RejectionCode.REJECTION_REASON_REQUIRED: 400,
    RejectionCode.INVALID_MPL_UNITS: 400,
}
# Everything else is a state conflict.
DEFAULT_REJECTION_STATUS = 409


def to_jsonable(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return to_jsonable(asdict(value))
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, time):
        return value.strftime("%H:%M")
    if isinstance(value, Decimal):
        return str(value)
    return value


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def current_actor() -> Actor:
    return Actor(user_id=int(session["user_id"]), role=Role(session["role"]), name=session.get("name") or "")


def error_response(message: str, status: int, *, code: Optional[str] = None):
    payload: dict[str, Any] = {"success": False, "message": message}
    if code:
        payload["code"] = code
    return jsonify(payload), status


def outcome_response(outcome: Outcome, *, status: int = 200):
    if not outcome.ok:
        rejection = outcome.rejection
        payload = {
            "success": False,
            "message": rejection.message,
            "code": rejection.code.value,
            "details": to_jsonable(dict(rejection.details)),
        }
        return jsonify(payload), STATUS_BY_CODE.get(rejection.code, DEFAULT_REJECTION_STATUS)
    return jsonify({"success": True, "message": outcome.message, "data": to_jsonable(outcome.value)}), status


def login_required(view: Callable):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return error_response("Please log in to continue.", 401)
        return view(*args, **kwargs)

    return wrapper


def admin_required(view: Callable):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return error_response("Please log in to continue.", 401)
        if session.get("role") != Role.ADMIN.value:
            return error_response("You are not allowed to perform this action.", 403, code="NOT_AUTHORIZED")
        return view(*args, **kwargs)

    return wrapper
