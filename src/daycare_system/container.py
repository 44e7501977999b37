from __future__ import annotations

from dataclasses import dataclass

from .activities.mysql_activity_repository import MySQLActivityRepository
from .activities.repository import ActivityRepository
from .activities.service import ActivityService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .children.mysql_child_repository import MySQLChildRepository
from .children.repository import ChildRepository
from .children.service import ChildService
from .common.web import FlaskSessionIdentity
from .core.constants import DEFAULT_HISTORY_LIMIT
from .core.context import Clock, Identity, SystemClock
from .database.connection import DBConfig, DatabaseConnection
from .messages.mysql_message_repository import MySQLMessageRepository
from .messages.repository import MessageRepository
from .messages.service import MessageService
from .reports.service import AttendanceReportService


@dataclass(frozen=True)
class Container:
    clock: Clock
    identity: Identity

    children_repo: ChildRepository
    attendance_repo: AttendanceRepository
    activities_repo: ActivityRepository
    messages_repo: MessageRepository

    child_service: ChildService
    attendance_service: AttendanceService
    activity_service: ActivityService
    report_service: AttendanceReportService
    message_service: MessageService


def build_services(
    *,
    children_repo: ChildRepository,
    attendance_repo: AttendanceRepository,
    activities_repo: ActivityRepository,
    messages_repo: MessageRepository,
    clock: Clock | None = None,
    identity: Identity | None = None,
    history_limit: int = DEFAULT_HISTORY_LIMIT,
) -> Container:
    clock = clock or SystemClock()
    return Container(
        clock=clock,
        identity=identity or FlaskSessionIdentity(),
        children_repo=children_repo,
        attendance_repo=attendance_repo,
        activities_repo=activities_repo,
        messages_repo=messages_repo,
        child_service=ChildService(children_repo, clock=clock),
        attendance_service=AttendanceService(attendance_repo, children_repo, clock=clock, history_limit=history_limit),
        activity_service=ActivityService(activities_repo, children_repo, clock=clock),
        report_service=AttendanceReportService(attendance_repo, children_repo, clock=clock),
        message_service=MessageService(messages_repo, clock=clock),
    )


def build_container(*, db_config: dict, history_limit: int = DEFAULT_HISTORY_LIMIT) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return build_services(
        children_repo=MySQLChildRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        activities_repo=MySQLActivityRepository(conn),
        messages_repo=MySQLMessageRepository(conn),
        history_limit=history_limit,
    )
