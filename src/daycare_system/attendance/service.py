from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, Optional, Sequence

from ..children.repository import ChildRepository
from ..common.validators import require_caller
from ..core.constants import DEFAULT_HISTORY_LIMIT, MAX_HISTORY_LIMIT
from ..core.context import Clock, SystemClock
from ..core.exceptions import ConflictError, DomainError, IntegrityError, NotFoundError, ValidationError
from .model import (
    AlternativePickup,
    AttendanceSession,
    BulkResult,
    DropOffInfo,
    HealthStatus,
    Meals,
    PickUpInfo,
    SessionPatch,
)
from .repository import AttendanceRepository
from .validation import (
    clean_concerns,
    validate_alternative_pickup,
    validate_drop_off,
    validate_health_status,
    validate_pick_up,
    validate_session_times,
)

logger = logging.getLogger(__name__)


class AttendanceService:
    """Check-in/check-out lifecycle of attendance sessions.

    A session is created open by ``check_in`` and closed once by ``check_out``;
    ``edit_session`` corrects recorded values without changing that state.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        children: ChildRepository | None = None,
        *,
        clock: Clock | None = None,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
    ):
        self._attendance = attendance
        self._children = children
        self._clock = clock or SystemClock()
        self._history_limit = int(history_limit)

    def _get_session(self, session_id: str) -> AttendanceSession:
        session = self._attendance.get_by_id(session_id)
        if not session:
            raise NotFoundError(f"Attendance session {session_id} not found")
        return session

    def _require_child(self, child_id: str) -> None:
        if self._children is not None and not self._children.get_by_id(child_id):
            raise NotFoundError(f"Child {child_id} not found")

    def get_active_session(self, child_id: str) -> Optional[AttendanceSession]:
        open_sessions = list(self._attendance.find_open_for_child(child_id))
        if len(open_sessions) > 1:
            ids = [s.session_id for s in open_sessions]
            logger.error("Child %s has %d open sessions: %s", child_id, len(ids), ids)
            raise IntegrityError(child_id, ids)
        return open_sessions[0] if open_sessions else None

    def check_in(
        self,
        child_id: str,
        caller_id: Optional[str],
        drop_off: Optional[DropOffInfo],
        health_status: Optional[HealthStatus] = None,
        meals: Optional[Meals] = None,
        *,
        concerns: Optional[str] = None,
        alternative_pickup: Optional[AlternativePickup] = None,
    ) -> AttendanceSession:
        caller = require_caller(caller_id)
        drop_off = validate_drop_off(drop_off)
        health_status = validate_health_status(health_status)
        alternative_pickup = validate_alternative_pickup(alternative_pickup)

        self._require_child(child_id)
        if self.get_active_session(child_id):
            raise ConflictError(f"Child {child_id} is already checked in")

        session_id = self._attendance.create_if_no_open_session(
            child_id=child_id,
            guardian_id=caller,
            check_in_time=self._clock.now(),
            drop_off=drop_off,
            health_status=health_status,
            meals=meals or Meals(),
            concerns=clean_concerns(concerns),
            alternative_pickup=alternative_pickup,
            created_by=caller,
        )
        if session_id is None:
            raise ConflictError(f"Child {child_id} is already checked in")

        logger.info("Checked in child %s (session %s) by %s", child_id, session_id, caller)
        return self._get_session(session_id)

    def check_out(self, session_id: str, caller_id: Optional[str], pick_up: Optional[PickUpInfo]) -> AttendanceSession:
        caller = require_caller(caller_id)
        session = self._get_session(session_id)
        if not session.is_open:
            raise ConflictError(f"Attendance session {session_id} is already checked out")

        pick_up = validate_pick_up(pick_up)
        now = self._clock.now()
        if now <= session.check_in_time:
            raise ValidationError("checkOutTime", "must be after the check-in time")

        ok = self._attendance.close_session(
            session_id=session_id,
            check_out_time=now,
            pick_up=replace(pick_up, time=now),
            updated_by=caller,
        )
        if not ok:
            raise ConflictError(f"Attendance session {session_id} is already checked out")

        logger.info("Checked out child %s (session %s) by %s", session.child_id, session_id, caller)
        return self._get_session(session_id)

    def check_out_child(self, child_id: str, caller_id: Optional[str], pick_up: Optional[PickUpInfo]) -> AttendanceSession:
        require_caller(caller_id)
        active = self.get_active_session(child_id)
        if not active:
            raise ConflictError(f"Child {child_id} is not checked in")
        return self.check_out(active.session_id, caller_id, pick_up)

    @staticmethod
    def _unique(child_ids: Iterable[str]) -> list[str]:
        return list(dict.fromkeys(child_ids))

    def bulk_check_in(
        self,
        child_ids: Iterable[str],
        caller_id: Optional[str],
        drop_off: Optional[DropOffInfo],
        *,
        health_status: Optional[HealthStatus] = None,
        meals: Optional[Meals] = None,
        concerns: Optional[str] = None,
    ) -> BulkResult:
        require_caller(caller_id)
        result = BulkResult()
        for child_id in self._unique(child_ids):
            try:
                session = self.check_in(child_id, caller_id, drop_off, health_status, meals, concerns=concerns)
            except DomainError as e:
                logger.warning("Bulk check-in skipped child %s: %s", child_id, e)
                result.failed.append((child_id, e))
                continue
            result.succeeded.append(child_id)
            result.sessions.append(session)
        return result

    def bulk_check_out(
        self,
        child_ids: Iterable[str],
        caller_id: Optional[str],
        pick_up: Optional[PickUpInfo],
    ) -> BulkResult:
        require_caller(caller_id)
        result = BulkResult()
        for child_id in self._unique(child_ids):
            try:
                session = self.check_out_child(child_id, caller_id, pick_up)
            except DomainError as e:
                logger.warning("Bulk check-out skipped child %s: %s", child_id, e)
                result.failed.append((child_id, e))
                continue
            result.succeeded.append(child_id)
            result.sessions.append(session)
        return result

    def list_history(self, child_id: str, max_records: Optional[int] = None) -> Sequence[AttendanceSession]:
        limit = self._history_limit if max_records is None else int(max_records)
        if limit <= 0:
            raise ValidationError("maxRecords", "must be a positive number")
        return list(self._attendance.list_for_child(child_id, min(limit, MAX_HISTORY_LIMIT)))

    def edit_session(self, session_id: str, caller_id: Optional[str], patch: SessionPatch) -> AttendanceSession:
        caller = require_caller(caller_id)
        session = self._get_session(session_id)

        if patch.clear_check_out and not session.is_open:
            raise ConflictError("A checked-out session cannot be reopened")
        if session.is_open and patch.check_out_time is not None:
            raise ConflictError("Open sessions are closed by checking out, not by editing")
        if session.is_open and patch.pick_up is not None:
            raise ConflictError("Pick-up details are recorded at check-out")

        check_in_time = patch.check_in_time or session.check_in_time
        check_out_time = patch.check_out_time or session.check_out_time
        now = self._clock.now()
        validate_session_times(check_in_time, check_out_time, now=now)

        pick_up = session.pick_up
        if patch.pick_up is not None:
            pick_up = validate_pick_up(patch.pick_up)
            if pick_up.time is None and session.pick_up:
                pick_up = replace(pick_up, time=session.pick_up.time)
        if pick_up is not None and patch.check_out_time is not None:
            pick_up = replace(pick_up, time=check_out_time)

        concerns = session.concerns if patch.concerns is None else clean_concerns(patch.concerns)

        updated = replace(
            session,
            check_in_time=check_in_time,
            check_out_time=check_out_time,
            drop_off=validate_drop_off(patch.drop_off) if patch.drop_off is not None else session.drop_off,
            pick_up=pick_up,
            health_status=(
                validate_health_status(patch.health_status) if patch.health_status is not None else session.health_status
            ),
            meals=patch.meals if patch.meals is not None else session.meals,
            concerns=concerns,
            updated_at=now,
            updated_by=caller,
        )

        if not self._attendance.update_session(updated):
            raise NotFoundError(f"Attendance session {session_id} not found")

        logger.info("Edited attendance session %s by %s", session_id, caller)
        return self._get_session(session_id)
