from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import (
    admin_required,
    current_actor,
    error_response,
    json_body,
    login_required,
    outcome_response,
    to_jsonable,
)
from ..common.validators import parse_date, require, require_int
from ..container import Container
from ..core.exceptions import ValidationError
from .cutoff import cutoff_for


def register(app: Flask, container: Container) -> None:
    service = container.mpl_service

    def cutoff_from(value):
        reference = parse_date(value, "reference_date")
        return cutoff_for(reference) if reference else None

    @app.route("/api/mpl/quota/<int:user_id>", endpoint="mpl_quota")
    @login_required
    def quota(user_id: int):
        actor = current_actor()
        if not actor.is_admin and actor.user_id != user_id:
            return error_response("You are not allowed to perform this action.", 403, code="NOT_AUTHORIZED")
        result = service.quota(user_id, cutoff=cutoff_from(request.args.get("reference_date")))
        return jsonify({"success": True, "data": result.as_dict()})

    @app.route("/api/mpl/convert", methods=["POST"], endpoint="mpl_convert")
    @admin_required
    def convert():
        data = json_body()
        outcome = service.convert(
            current_actor(),
            require_int(data.get("user_id"), "user_id"),
            require_int(data.get("units"), "units"),
            cutoff=cutoff_from(data.get("reference_date")),
        )
        return outcome_response(outcome, status=201 if outcome.ok else 200)

    @app.route("/api/mpl/history/<int:user_id>", endpoint="mpl_history")
    @login_required
    def history(user_id: int):
        actor = current_actor()
        if not actor.is_admin and actor.user_id != user_id:
            return error_response("You are not allowed to perform this action.", 403, code="NOT_AUTHORIZED")
        return jsonify({"success": True, "data": to_jsonable(list(service.history(user_id)))})

    @app.route("/api/mpl/conversions", endpoint="mpl_conversions")
    @admin_required
    def conversions():
        start = require(parse_date(request.args.get("start"), "start"), "start")
        end = require(parse_date(request.args.get("end"), "end"), "end")
        if end < start:
            raise ValidationError("end must not be before start")
        return jsonify({"success": True, "data": to_jsonable(list(service.list_for_period(start, end)))})
