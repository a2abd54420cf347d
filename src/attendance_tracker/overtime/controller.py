from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.http import admin_required, current_actor, json_body, login_required, outcome_response, to_jsonable
from ..common.validators import clean_text, parse_date, parse_time, require, require_int
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.overtime_service

    @app.route("/api/overtime", methods=["POST"], endpoint="request_overtime")
    @login_required
    def request_overtime():
        data = json_body()
        outcome = service.request_overtime(
            current_actor(),
            work_date=require(parse_date(data.get("work_date"), "work_date"), "work_date"),
            start_time=require(parse_time(data.get("start_time"), "start_time"), "start_time"),
            end_time=require(parse_time(data.get("end_time"), "end_time"), "end_time"),
            reason=require(clean_text(data.get("reason")), "reason"),
            expected_output=clean_text(data.get("expected_output")),
        )
        return outcome_response(outcome, status=201 if outcome.ok else 200)

    @app.route("/api/overtime/<int:request_id>", methods=["PUT"], endpoint="update_overtime")
    @login_required
    def update_overtime(request_id: int):
        data = json_body()
        outcome = service.update_request(
            current_actor(),
            request_id,
            work_date=parse_date(data.get("work_date"), "work_date"),
            start_time=parse_time(data.get("start_time"), "start_time"),
            end_time=parse_time(data.get("end_time"), "end_time"),
            reason=clean_text(data.get("reason")),
            expected_output=clean_text(data.get("expected_output")),
        )
        return outcome_response(outcome)

    @app.route("/api/overtime/<int:request_id>/cancel", methods=["POST"], endpoint="cancel_overtime")
    @login_required
    def cancel_overtime(request_id: int):
        return outcome_response(service.cancel_request(current_actor(), request_id))

    @app.route("/api/overtime/<int:request_id>/approve", methods=["POST"], endpoint="approve_overtime")
    @admin_required
    def approve_overtime(request_id: int):
        return outcome_response(service.approve(current_actor(), request_id))

    @app.route("/api/overtime/<int:request_id>/reject", methods=["POST"], endpoint="reject_overtime")
    @admin_required
    def reject_overtime(request_id: int):
        reason = clean_text(json_body().get("reason"))
        return outcome_response(service.reject(current_actor(), request_id, reason))

    @app.route("/api/overtime/mine", endpoint="my_overtime")
    @login_required
    def my_overtime():
        items = service.list_for_user(int(session["user_id"]))
        return jsonify({"success": True, "data": to_jsonable(list(items))})

    @app.route("/api/overtime/pending", endpoint="pending_overtime")
    @admin_required
    def pending_overtime():
        return jsonify({"success": True, "data": to_jsonable(list(service.list_pending()))})

    @app.route("/api/overtime/config", methods=["GET"], endpoint="get_overtime_config")
    @login_required
    def get_config():
        return outcome_response(container.config_service.get_config())

    @app.route("/api/overtime/config", methods=["PUT"], endpoint="update_overtime_config")
    @admin_required
    def update_config():
        data = json_body()
        break_max = data.get("break_max_minutes")
        daily_max = data.get("overtime_daily_max_minutes")
        outcome = container.config_service.update_config(
            current_actor(),
            office_start_time=parse_time(data.get("office_start_time"), "office_start_time"),
            office_end_time=parse_time(data.get("office_end_time"), "office_end_time"),
            break_max_minutes=require_int(break_max, "break_max_minutes") if break_max is not None else None,
            night_diff_start_time=parse_time(data.get("night_diff_start_time"), "night_diff_start_time"),
            night_diff_end_time=parse_time(data.get("night_diff_end_time"), "night_diff_end_time"),
            overtime_daily_max_minutes=(
                require_int(daily_max, "overtime_daily_max_minutes") if daily_max is not None else None
            ),
        )
        return outcome_response(outcome)
