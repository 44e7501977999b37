from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Optional

import pytest

from daycare_system.activities.model import DailyActivity
from daycare_system.attendance.model import AttendanceSession, DropOffInfo, HealthStatus, Meals, PickUpInfo
from daycare_system.attendance.service import AttendanceService
from daycare_system.children.model import Child, EmergencyContact
from daycare_system.core.context import CurrentUser
from daycare_system.messages.model import Message


class FixedClock:
    def __init__(self, now: datetime):
        self._now = now

    def now(self) -> datetime:
        return self._now

    def advance(self, **kwargs) -> datetime:
        self._now = self._now + timedelta(**kwargs)
        return self._now


class StaticIdentity:
    def __init__(self, user: Optional[CurrentUser]):
        self.user = user

    def current_user(self) -> Optional[CurrentUser]:
        return self.user


class InMemoryChildren:
    def __init__(self):
        self._by_id: dict[str, Child] = {}
        self._id = 0

    def add(self, child_id: str, *, first_name: str = "Child", last_name: str = "Test", guardian_id: str = "u1") -> Child:
        child = Child(
            child_id=child_id,
            first_name=first_name,
            last_name=last_name,
            date_of_birth=date(2021, 5, 10),
            guardian_id=guardian_id,
            emergency_contacts=(EmergencyContact(name="Grandma", relationship="Grandmother", phone="555-0100"),),
        )
        self._by_id[child_id] = child
        return child

    def get_by_id(self, child_id: str) -> Optional[Child]:
        return self._by_id.get(child_id)

    def list_for_guardian(self, guardian_id: str):
        return [c for c in self._by_id.values() if c.guardian_id == guardian_id]

    def list_all(self):
        return list(self._by_id.values())

    def create_child(self, *, first_name, last_name, date_of_birth, guardian_id, emergency_contacts, medical_info, created_at) -> str:
        self._id += 1
        child_id = f"child-{self._id}"
        self._by_id[child_id] = Child(
            child_id=child_id,
            first_name=first_name,
            last_name=last_name,
            date_of_birth=date_of_birth,
            guardian_id=guardian_id,
            emergency_contacts=tuple(emergency_contacts),
            medical_info=medical_info,
            created_at=created_at,
            updated_at=created_at,
        )
        return child_id

    def update_child(self, *, child_id, first_name, last_name, date_of_birth, emergency_contacts, medical_info, updated_at) -> bool:
        child = self._by_id.get(child_id)
        if not child:
            return False
        self._by_id[child_id] = replace(
            child,
            first_name=first_name,
            last_name=last_name,
            date_of_birth=date_of_birth,
            emergency_contacts=tuple(emergency_contacts),
            medical_info=medical_info,
            updated_at=updated_at,
        )
        return True


class InMemoryAttendance:
    def __init__(self):
        self.sessions: dict[str, AttendanceSession] = {}
        self._id = 0

    def _next_id(self) -> str:
        self._id += 1
        return f"s{self._id}"

    def insert_raw(self, session: AttendanceSession) -> None:
        """Bypass the open-session guard, e.g. to seed corrupt data."""
        self.sessions[session.session_id] = session

    def get_by_id(self, session_id: str) -> Optional[AttendanceSession]:
        return self.sessions.get(session_id)

    def find_open_for_child(self, child_id: str):
        return [s for s in self.sessions.values() if s.child_id == child_id and s.check_out_time is None]

    def list_for_child(self, child_id: str, limit: int):
        items = [s for s in self.sessions.values() if s.child_id == child_id]
        items.sort(key=lambda s: s.check_in_time, reverse=True)
        return items[:limit]

    def list_checked_in_between(self, *, start: datetime, end: datetime):
        items = [s for s in self.sessions.values() if start <= s.check_in_time <= end]
        items.sort(key=lambda s: s.check_in_time)
        return items

    def create_if_no_open_session(
        self,
        *,
        child_id,
        guardian_id,
        check_in_time,
        drop_off,
        health_status,
        meals,
        concerns,
        alternative_pickup,
        created_by,
    ) -> Optional[str]:
        if self.find_open_for_child(child_id):
            return None
        session_id = self._next_id()
        self.sessions[session_id] = AttendanceSession(
            session_id=session_id,
            child_id=child_id,
            guardian_id=guardian_id,
            check_in_time=check_in_time,
            check_out_time=None,
            drop_off=drop_off,
            health_status=health_status,
            meals=meals,
            concerns=concerns,
            alternative_pickup=alternative_pickup,
            created_at=check_in_time,
            created_by=created_by,
        )
        return session_id

    def close_session(self, *, session_id, check_out_time, pick_up, updated_by) -> bool:
        session = self.sessions.get(session_id)
        if not session or session.check_out_time is not None:
            return False
        self.sessions[session_id] = replace(
            session,
            check_out_time=check_out_time,
            pick_up=pick_up,
            updated_at=check_out_time,
            updated_by=updated_by,
        )
        return True

    def update_session(self, session: AttendanceSession) -> bool:
        if session.session_id not in self.sessions:
            return False
        self.sessions[session.session_id] = session
        return True


class InMemoryActivities:
    def __init__(self):
        self.activities: list[DailyActivity] = []

    def list_recent_for_child(self, child_id: str, limit: int):
        items = [a for a in self.activities if a.child_id == child_id]
        items.sort(key=lambda a: a.timestamp, reverse=True)
        return items[:limit]

    def create_activity(self, *, child_id, activity_type, description, timestamp, created_by) -> str:
        activity_id = f"a{len(self.activities) + 1}"
        self.activities.append(
            DailyActivity(
                activity_id=activity_id,
                child_id=child_id,
                activity_type=activity_type,
                description=description,
                timestamp=timestamp,
                created_by=created_by,
                created_at=timestamp,
            )
        )
        return activity_id


class InMemoryMessages:
    def __init__(self):
        self.messages: list[Message] = []

    def list_for_participant(self, user_id: str, *, with_user: Optional[str] = None, limit: int):
        items = [m for m in self.messages if user_id in m.participants]
        if with_user:
            items = [m for m in items if with_user in m.participants]
        items.sort(key=lambda m: m.created_at, reverse=True)
        return items[:limit]

    def create_message(self, *, sender_id, recipient_id, content, created_at) -> str:
        message_id = f"m{len(self.messages) + 1}"
        self.messages.append(
            Message(
                message_id=message_id,
                sender_id=sender_id,
                recipient_id=recipient_id,
                content=content,
                created_at=created_at,
            )
        )
        return message_id


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2024, 1, 1, 8, 0, 0))


@pytest.fixture
def children() -> InMemoryChildren:
    repo = InMemoryChildren()
    repo.add("C1", first_name="Ava", last_name="Nguyen")
    repo.add("C2", first_name="Ben", last_name="Nguyen")
    repo.add("C3", first_name="Cara", last_name="Smith", guardian_id="u2")
    return repo


@pytest.fixture
def attendance() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def service(attendance, children, clock) -> AttendanceService:
    return AttendanceService(attendance, children, clock=clock)


@pytest.fixture
def drop_off() -> DropOffInfo:
    return DropOffInfo(person_name="Jane", relationship="Mother", signature="Jane D.")


@pytest.fixture
def pick_up() -> PickUpInfo:
    return PickUpInfo(person_name="John", relationship="Father", signature="John D.")


@pytest.fixture
def no_fever() -> HealthStatus:
    return HealthStatus(has_fever=False)


@pytest.fixture
def breakfast() -> Meals:
    return Meals(breakfast=True)


@pytest.fixture
def activities() -> InMemoryActivities:
    return InMemoryActivities()


@pytest.fixture
def identity() -> StaticIdentity:
    return StaticIdentity(CurrentUser(id="u1", display_name="Jane Doe"))


@pytest.fixture
def messages() -> InMemoryMessages:
    return InMemoryMessages()
