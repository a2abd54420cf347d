from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.http import admin_required, current_actor, json_body, login_required, outcome_response, to_jsonable
from ..common.validators import clean_text, parse_date, parse_datetime, require, require_int
from ..container import Container
from ..core.constants import DEFAULT_HISTORY_LIMIT, DEFAULT_LIST_LIMIT
from ..core.enums import VisibilityStatus
from ..core.exceptions import ValidationError
from ..core.results import Outcome


def _result_payload(result) -> dict:
    record = result.record
    return {
        "record": record,
        "stage": record.stage,
        "snapshot": result.snapshot,
        "over_break_minutes": result.over_break_minutes,
        "early_minutes": result.early_minutes,
    }


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    def lifecycle_response(outcome):
        if outcome.ok:
            outcome = Outcome.success(_result_payload(outcome.value), outcome.message)
        return outcome_response(outcome)

    @app.route("/api/attendance/today", endpoint="attendance_today")
    @login_required
    def today():
        record = service.get_today_record(int(session["user_id"]))
        data = {"record": record, "stage": record.stage if record else None}
        return jsonify({"success": True, "data": to_jsonable(data)})

    @app.route("/api/attendance/history", endpoint="attendance_history")
    @login_required
    def history():
        limit = require_int(request.args.get("limit", DEFAULT_HISTORY_LIMIT), "limit")
        records = service.get_history(int(session["user_id"]), limit=limit)
        return jsonify({"success": True, "data": to_jsonable(list(records))})

    @app.route("/api/attendance", endpoint="attendance_list")
    @admin_required
    def list_records():
        user_id = request.args.get("user_id")
        start = parse_date(request.args.get("start"), "start")
        end = parse_date(request.args.get("end"), "end")
        if start and end and end < start:
            raise ValidationError("end must not be before start")
        outcome = service.list_records(
            current_actor(),
            user_id=require_int(user_id, "user_id") if user_id else None,
            start_date=start,
            end_date=end,
            include_hidden=request.args.get("include_hidden") in {"1", "true", "yes"},
            limit=require_int(request.args.get("limit", DEFAULT_LIST_LIMIT), "limit"),
        )
        if outcome.ok:
            outcome = Outcome.success(list(outcome.value), outcome.message)
        return outcome_response(outcome)

    @app.route("/api/attendance/<int:attendance_id>", endpoint="attendance_detail")
    @login_required
    def detail(attendance_id: int):
        outcome = service.get_record(current_actor(), attendance_id)
        if outcome.ok:
            outcome = Outcome.success({"record": outcome.value, "stage": outcome.value.stage}, outcome.message)
        return outcome_response(outcome)

    @app.route("/api/attendance/clock-in", methods=["POST"], endpoint="clock_in")
    @login_required
    def clock_in():
        remarks = clean_text(json_body().get("remarks"))
        return lifecycle_response(service.clock_in(int(session["user_id"]), remarks=remarks))

    @app.route("/api/attendance/break/start", methods=["POST"], endpoint="start_break")
    @login_required
    def start_break():
        return lifecycle_response(service.start_break(int(session["user_id"])))

    @app.route("/api/attendance/break/end", methods=["POST"], endpoint="end_break")
    @login_required
    def end_break():
        return lifecycle_response(service.end_break(int(session["user_id"])))

    @app.route("/api/attendance/clock-out", methods=["POST"], endpoint="clock_out")
    @login_required
    def clock_out():
        return lifecycle_response(service.clock_out(int(session["user_id"])))

    @app.route("/api/attendance/<int:attendance_id>", methods=["PUT"], endpoint="edit_attendance")
    @admin_required
    def edit_attendance(attendance_id: int):
        data = json_body()
        outcome = service.admin_edit(
            current_actor(),
            attendance_id,
            clock_in=parse_datetime(data.get("clock_in"), "clock_in"),
            clock_out=parse_datetime(data.get("clock_out"), "clock_out"),
            break_start=parse_datetime(data.get("break_start"), "break_start"),
            break_finish=parse_datetime(data.get("break_finish"), "break_finish"),
        )
        return lifecycle_response(outcome)

    @app.route("/api/attendance/<int:attendance_id>/visibility", methods=["PUT"], endpoint="attendance_visibility")
    @admin_required
    def set_visibility(attendance_id: int):
        raw = str(json_body().get("visibility", "")).strip().upper()
        try:
            visibility = VisibilityStatus(raw)
        except ValueError:
            raise ValidationError("visibility must be ENABLED or DISABLED")
        return outcome_response(service.set_visibility(current_actor(), attendance_id, visibility))

    @app.route("/api/reports/summary", endpoint="attendance_summary")
    @admin_required
    def summary():
        start = require(parse_date(request.args.get("start"), "start"), "start")
        end = require(parse_date(request.args.get("end"), "end"), "end")
        if end < start:
            raise ValidationError("end must not be before start")
        user_id = request.args.get("user_id")
        report = container.payroll_report_service.build_attendance_summary(
            start=start,
            end=end,
            user_id=require_int(user_id, "user_id") if user_id else None,
            include_hidden=request.args.get("include_hidden") in {"1", "true", "yes"},
        )
        return jsonify({"success": True, "data": to_jsonable(report)})
