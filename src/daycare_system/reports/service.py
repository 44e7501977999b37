from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..children.repository import ChildRepository
from ..common.datetime_utils import format_iso, start_of_day
from ..core.constants import DEFAULT_REPORT_DAYS
from ..core.context import Clock, SystemClock
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class ReportData:
    daily: list[dict]
    children: list[dict]


class AttendanceReportService:
    """Daily and per-child attendance figures over a trailing window."""

    def __init__(self, attendance: AttendanceRepository, children: ChildRepository, *, clock: Optional[Clock] = None):
        self._attendance = attendance
        self._children = children
        self._clock = clock or SystemClock()

    def build_report(self, *, days: int = DEFAULT_REPORT_DAYS) -> ReportData:
        if int(days) <= 0:
            raise ValidationError("days", "must be a positive number")

        now = self._clock.now()
        start = start_of_day(now - timedelta(days=int(days)))
        sessions = self._attendance.list_checked_in_between(start=start, end=now)
        children = {c.child_id: c for c in self._children.list_all()}

        daily_map: dict[str, dict] = {}
        child_map: dict[str, dict] = {}

        for s in sessions:
            child = children.get(s.child_id)
            if not child:
                continue

            day = s.check_in_time.strftime("%Y-%m-%d")
            d = daily_map.get(day)
            if not d:
                d = {"date": day, "total_checkins": 0, "children": set()}
                daily_map[day] = d
            d["total_checkins"] += 1
            d["children"].add(s.child_id)

            c = child_map.get(s.child_id)
            if not c:
                c = {
                    "child_id": s.child_id,
                    "child_name": child.full_name,
                    "total_visits": 0,
                    "closed_visits": 0,
                    "total_seconds": 0,
                    "last_visit": None,
                }
                child_map[s.child_id] = c
            c["total_visits"] += 1
            if s.check_out_time:
                c["closed_visits"] += 1
                c["total_seconds"] += int((s.check_out_time - s.check_in_time).total_seconds())
            if c["last_visit"] is None or s.check_in_time > c["last_visit"]:
                c["last_visit"] = s.check_in_time

        daily = [
            {"date": d["date"], "total_checkins": d["total_checkins"], "unique_children": len(d["children"])}
            for d in sorted(daily_map.values(), key=lambda x: x["date"])
        ]

        child_rows = []
        for c in child_map.values():
            closed = c["closed_visits"]
            child_rows.append(
                {
                    "child_id": c["child_id"],
                    "child_name": c["child_name"],
                    "total_visits": c["total_visits"],
                    "avg_duration_minutes": round(c["total_seconds"] / closed / 60) if closed else 0,
                    "last_visit": format_iso(c["last_visit"]),
                }
            )
        child_rows.sort(key=lambda x: x["total_visits"], reverse=True)

        return ReportData(daily=daily, children=child_rows)
