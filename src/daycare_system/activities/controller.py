from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import json_body, require_user
from ..container import Container
from ..core.constants import DEFAULT_ACTIVITY_LIMIT
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    service = container.activity_service

    @app.route("/api/children/<child_id>/activities", methods=["GET"], endpoint="activities_list")
    def activities_list(child_id: str):
        limit_s = request.args.get("limit") or str(DEFAULT_ACTIVITY_LIMIT)
        if not limit_s.isdigit():
            raise ValidationError("limit", "must be a positive number")
        activities = service.list_recent(child_id, int(limit_s))
        return jsonify({"success": True, "activities": [a.to_dict() for a in activities]})

    @app.route("/api/children/<child_id>/activities", methods=["POST"], endpoint="activities_create")
    def activities_create(child_id: str):
        user = require_user(container.identity)
        data = json_body()
        activity = service.log_activity(child_id, user.id, data.get("type"), data.get("description"))
        return jsonify({"success": True, "activity": activity.to_dict()}), 201
