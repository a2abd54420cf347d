from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, session

from ..common.http import error_response, json_body, login_required, to_jsonable
from ..container import Container
from ..core.exceptions import AuthenticationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        try:
            s_user = container.auth_service.authenticate(data.get("username", ""), data.get("password", ""))
        except AuthenticationError as e:
            return error_response(str(e), 401)

        session.clear()
        session.permanent = bool(data.get("remember_me"))
        app.permanent_session_lifetime = timedelta(days=7)
        session["user_id"] = s_user.user_id
        session["name"] = s_user.name
        session["role"] = s_user.role.value

        return jsonify({"success": True, "message": "Logged in successfully.", "data": to_jsonable(s_user)})

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True, "message": "Logged out."})

    @app.route("/api/auth/me", endpoint="me")
    @login_required
    def me():
        user = container.users_repo.get_by_id(int(session["user_id"]))
        if not user:
            session.clear()
            return error_response("User not found.", 404, code="USER_NOT_FOUND")
        data = {
            "user_id": user.user_id,
            "name": user.name,
            "username": user.username,
            "role": user.role,
            "accumulated_overtime_minutes": user.accumulated_overtime_minutes,
            "accumulated_night_diff_minutes": user.accumulated_night_diff_minutes,
            "mpl_credits": user.mpl_credits,
        }
        return jsonify({"success": True, "data": to_jsonable(data)})

    @app.route("/api/notifications", endpoint="notifications")
    @login_required
    def notifications():
        items = container.notifications_repo.list_for_user(int(session["user_id"]))
        return jsonify({"success": True, "data": to_jsonable(list(items))})
