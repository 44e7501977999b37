from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import require_user
from ..container import Container
from ..core.constants import DEFAULT_REPORT_DAYS, MONTH_REPORT_DAYS
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/reports/attendance", methods=["GET"], endpoint="reports_attendance")
    def reports_attendance():
        require_user(container.identity)
        range_s = (request.args.get("range") or "week").lower()
        days = {"week": DEFAULT_REPORT_DAYS, "month": MONTH_REPORT_DAYS}.get(range_s)
        if days is None:
            raise ValidationError("range", "must be 'week' or 'month'")

        report = container.report_service.build_report(days=days)
        return jsonify({"success": True, "range": range_s, "daily": report.daily, "children": report.children})
