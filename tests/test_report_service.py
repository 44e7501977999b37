from __future__ import annotations

from datetime import datetime

import pytest

from daycare_system.attendance.model import AttendanceSession, DropOffInfo
from daycare_system.core.exceptions import ValidationError
from daycare_system.reports.service import AttendanceReportService

DROP_OFF = DropOffInfo(person_name="Jane", relationship="Mother", signature="Jane D.")


def _session(session_id, child_id, check_in, check_out=None):
    return AttendanceSession(
        session_id=session_id,
        child_id=child_id,
        guardian_id="u1",
        check_in_time=check_in,
        check_out_time=check_out,
        drop_off=DROP_OFF,
    )


@pytest.fixture
def report_service(attendance, children, clock):
    clock.advance(days=9, hours=4)  # 2024-01-10 12:00
    for s in (
        _session("old", "C1", datetime(2024, 1, 1, 8), datetime(2024, 1, 1, 16)),
        _session("a", "C1", datetime(2024, 1, 8, 8), datetime(2024, 1, 8, 16)),
        _session("b", "C1", datetime(2024, 1, 9, 8), datetime(2024, 1, 9, 17)),
        _session("c", "C1", datetime(2024, 1, 10, 8)),
        _session("d", "C2", datetime(2024, 1, 9, 9), datetime(2024, 1, 9, 12)),
        _session("e", "ghost", datetime(2024, 1, 9, 9), datetime(2024, 1, 9, 10)),
    ):
        attendance.insert_raw(s)
    return AttendanceReportService(attendance, children, clock=clock)


def test_daily_counts_within_window(report_service):
    report = report_service.build_report(days=7)

    assert report.daily == [
        {"date": "2024-01-08", "total_checkins": 1, "unique_children": 1},
        {"date": "2024-01-09", "total_checkins": 2, "unique_children": 2},
        {"date": "2024-01-10", "total_checkins": 1, "unique_children": 1},
    ]


def test_child_rows_average_closed_sessions_only(report_service):
    report = report_service.build_report(days=7)

    assert [c["child_id"] for c in report.children] == ["C1", "C2"]
    ava, ben = report.children
    assert ava["child_name"] == "Ava Nguyen"
    assert ava["total_visits"] == 3
    assert ava["avg_duration_minutes"] == 510
    assert ava["last_visit"] == "2024-01-10T08:00:00"
    assert ben["avg_duration_minutes"] == 180


def test_longer_window_includes_older_sessions(report_service):
    report = report_service.build_report(days=30)

    assert report.daily[0]["date"] == "2024-01-01"
    assert report.children[0]["total_visits"] == 4


def test_days_must_be_positive(report_service):
    with pytest.raises(ValidationError):
        report_service.build_report(days=0)
