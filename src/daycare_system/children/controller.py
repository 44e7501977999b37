from __future__ import annotations

from datetime import date
from typing import Any, Optional

from flask import Flask, jsonify

from ..common.datetime_utils import parse_iso_date
from ..common.web import json_body, require_user
from ..container import Container
from ..core.exceptions import ValidationError
from .model import Child, EmergencyContact, MedicalInfo


def _parse_dob(value: Any) -> Optional[date]:
    if not value:
        return None
    try:
        return parse_iso_date(str(value))
    except ValueError:
        raise ValidationError("dateOfBirth", "must be YYYY-MM-DD")


def _contacts(value: Any) -> Optional[list[EmergencyContact]]:
    if value is None:
        return None
    if not isinstance(value, list):
        raise ValidationError("emergencyContacts", "must be a list")
    return [EmergencyContact.from_dict(c, f"emergencyContacts[{i}]") for i, c in enumerate(value)]


def register(app: Flask, container: Container) -> None:
    service = container.child_service

    def _to_dict(child: Child) -> dict:
        return {
            "id": child.child_id,
            "firstName": child.first_name,
            "lastName": child.last_name,
            "dateOfBirth": child.date_of_birth.strftime("%Y-%m-%d"),
            "age": child.age_on(container.clock.now().date()),
            "guardianId": child.guardian_id,
            "emergencyContacts": [c.to_dict() for c in child.emergency_contacts],
            "medicalInfo": child.medical_info.to_dict(),
        }

    @app.route("/api/children", methods=["GET"], endpoint="children_list")
    def children_list():
        user = require_user(container.identity)
        children = service.list_for_guardian(user.id)
        return jsonify({"success": True, "children": [_to_dict(c) for c in children]})

    @app.route("/api/children", methods=["POST"], endpoint="children_create")
    def children_create():
        user = require_user(container.identity)
        data = json_body()
        child = service.register_child(
            user.id,
            first_name=data.get("firstName") or "",
            last_name=data.get("lastName") or "",
            date_of_birth=_parse_dob(data.get("dateOfBirth")),
            emergency_contacts=_contacts(data.get("emergencyContacts")) or [],
            medical_info=MedicalInfo.from_dict(data.get("medicalInfo")),
        )
        return jsonify({"success": True, "child": _to_dict(child)}), 201

    @app.route("/api/children/<child_id>", methods=["PUT"], endpoint="children_update")
    def children_update(child_id: str):
        user = require_user(container.identity)
        data = json_body()
        child = service.update_child(
            child_id,
            user.id,
            first_name=data.get("firstName"),
            last_name=data.get("lastName"),
            date_of_birth=_parse_dob(data.get("dateOfBirth")),
            emergency_contacts=_contacts(data.get("emergencyContacts")),
            medical_info=MedicalInfo.from_dict(data["medicalInfo"]) if "medicalInfo" in data else None,
        )
        return jsonify({"success": True, "child": _to_dict(child)})
