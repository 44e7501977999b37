from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import json_body, require_user
from ..container import Container
from ..core.constants import DEFAULT_MESSAGE_LIMIT
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    service = container.message_service

    @app.route("/api/messages", methods=["GET"], endpoint="messages_list")
    def messages_list():
        user = require_user(container.identity)
        limit_s = request.args.get("limit") or str(DEFAULT_MESSAGE_LIMIT)
        if not limit_s.isdigit():
            raise ValidationError("limit", "must be a positive number")
        messages = service.list_messages(user.id, with_user=request.args.get("with"), limit=int(limit_s))
        return jsonify({"success": True, "messages": [m.to_dict() for m in messages]})

    @app.route("/api/messages", methods=["POST"], endpoint="messages_send")
    def messages_send():
        user = require_user(container.identity)
        data = json_body()
        message = service.send_message(user.id, data.get("recipientId"), data.get("content"))
        return jsonify({"success": True, "message": message.to_dict()}), 201
