from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import json_body, require_user
from ..container import Container
from ..core.exceptions import ValidationError
from .model import AlternativePickup, DropOffInfo, HealthStatus, Meals, PickUpInfo, SessionPatch


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    def _require_confirmation(data: dict) -> None:
        # Check-out is signed and irreversible; the client must confirm it explicitly.
        if data.get("confirm") is not True:
            raise ValidationError("confirm", "check-out must be confirmed")

    def _child_ids(data: dict) -> list[str]:
        ids = data.get("childIds")
        if not isinstance(ids, list) or not ids:
            raise ValidationError("childIds", "select at least one child")
        return [str(i) for i in ids]

    @app.route("/api/children/<child_id>/attendance/active", methods=["GET"], endpoint="attendance_active")
    def attendance_active(child_id: str):
        active = service.get_active_session(child_id)
        return jsonify({"success": True, "session": active.to_dict() if active else None})

    @app.route("/api/children/<child_id>/check-in", methods=["POST"], endpoint="attendance_check_in")
    def attendance_check_in(child_id: str):
        user = require_user(container.identity)
        data = json_body()
        created = service.check_in(
            child_id,
            user.id,
            DropOffInfo.from_dict(data.get("dropOffInfo")),
            HealthStatus.from_dict(data.get("healthStatus")),
            Meals.from_dict(data.get("meals")),
            concerns=data.get("concerns"),
            alternative_pickup=AlternativePickup.from_dict(data.get("alternativePickup")),
        )
        return jsonify({"success": True, "session": created.to_dict()}), 201

    @app.route("/api/attendance/<session_id>/check-out", methods=["POST"], endpoint="attendance_check_out")
    def attendance_check_out(session_id: str):
        user = require_user(container.identity)
        data = json_body()
        _require_confirmation(data)
        closed = service.check_out(session_id, user.id, PickUpInfo.from_dict(data.get("pickUpInfo")))
        return jsonify({"success": True, "session": closed.to_dict()})

    @app.route("/api/children/<child_id>/check-out", methods=["POST"], endpoint="attendance_check_out_child")
    def attendance_check_out_child(child_id: str):
        user = require_user(container.identity)
        data = json_body()
        _require_confirmation(data)
        closed = service.check_out_child(child_id, user.id, PickUpInfo.from_dict(data.get("pickUpInfo")))
        return jsonify({"success": True, "session": closed.to_dict()})

    @app.route("/api/attendance/bulk/check-in", methods=["POST"], endpoint="attendance_bulk_check_in")
    def attendance_bulk_check_in():
        user = require_user(container.identity)
        data = json_body()
        result = service.bulk_check_in(
            _child_ids(data),
            user.id,
            DropOffInfo.from_dict(data.get("dropOffInfo")),
            health_status=HealthStatus.from_dict(data.get("healthStatus")),
            meals=Meals.from_dict(data.get("meals")),
            concerns=data.get("concerns"),
        )
        return jsonify({"success": not result.failed, **result.to_dict()})

    @app.route("/api/attendance/bulk/check-out", methods=["POST"], endpoint="attendance_bulk_check_out")
    def attendance_bulk_check_out():
        user = require_user(container.identity)
        data = json_body()
        _require_confirmation(data)
        result = service.bulk_check_out(_child_ids(data), user.id, PickUpInfo.from_dict(data.get("pickUpInfo")))
        return jsonify({"success": not result.failed, **result.to_dict()})

    @app.route("/api/children/<child_id>/attendance", methods=["GET"], endpoint="attendance_history")
    def attendance_history(child_id: str):
        limit_s = request.args.get("limit")
        if limit_s is not None and not limit_s.isdigit():
            raise ValidationError("limit", "must be a positive number")
        sessions = service.list_history(child_id, int(limit_s) if limit_s else None)
        return jsonify({"success": True, "sessions": [s.to_dict() for s in sessions]})

    @app.route("/api/attendance/<session_id>", methods=["PATCH"], endpoint="attendance_edit")
    def attendance_edit(session_id: str):
        user = require_user(container.identity)
        patch = SessionPatch.from_dict(json_body())
        edited = service.edit_session(session_id, user.id, patch)
        return jsonify({"success": True, "session": edited.to_dict()})
