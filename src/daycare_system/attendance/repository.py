from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import AlternativePickup, AttendanceSession, DropOffInfo, HealthStatus, Meals, PickUpInfo


class AttendanceRepository(Protocol):
    def get_by_id(self, session_id: str) -> Optional[AttendanceSession]:
        raise NotImplementedError

    def find_open_for_child(self, child_id: str) -> Sequence[AttendanceSession]:
        """All sessions of the child without a check-out time (normally zero or one)."""

        raise NotImplementedError

    def list_for_child(self, child_id: str, limit: int) -> Sequence[AttendanceSession]:
        """Newest check-in first."""

        raise NotImplementedError

    def list_checked_in_between(self, *, start: datetime, end: datetime) -> Sequence[AttendanceSession]:
        raise NotImplementedError

    def create_if_no_open_session(
        self,
        *,
        child_id: str,
        guardian_id: str,
        check_in_time: datetime,
        drop_off: DropOffInfo,
        health_status: HealthStatus,
        meals: Meals,
        concerns: Optional[str],
        alternative_pickup: Optional[AlternativePickup],
        created_by: str,
    ) -> Optional[str]:
        """Insert an open session atomically.

        Returns the new id, or None when the child already has an open session.
        """

        raise NotImplementedError

    def close_session(
        self,
        *,
        session_id: str,
        check_out_time: datetime,
        pick_up: PickUpInfo,
        updated_by: str,
    ) -> bool:
        """Set the check-out only if the session is still open."""

        raise NotImplementedError

    def update_session(self, session: AttendanceSession) -> bool:
        """Overwrite the editable fields of an existing session."""

        raise NotImplementedError
