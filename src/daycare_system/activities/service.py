from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..children.repository import ChildRepository
from ..common.validators import require_caller, require_non_empty
from ..core.constants import DEFAULT_ACTIVITY_LIMIT, MAX_HISTORY_LIMIT
from ..core.context import Clock, SystemClock
from ..core.enums import ActivityType
from ..core.exceptions import NotFoundError, ValidationError
from .model import DailyActivity
from .repository import ActivityRepository

logger = logging.getLogger(__name__)


class ActivityService:
    """Use case: log and read a child's daily activities (meals, naps, play...)."""

    def __init__(self, activities: ActivityRepository, children: ChildRepository, *, clock: Optional[Clock] = None):
        self._activities = activities
        self._children = children
        self._clock = clock or SystemClock()

    @staticmethod
    def _parse_type(value: ActivityType | str | None) -> ActivityType:
        if isinstance(value, ActivityType):
            return value
        try:
            return ActivityType(require_non_empty(value, "type").lower())
        except ValueError:
            raise ValidationError("type", f"unknown activity type {value!r}")

    def log_activity(
        self,
        child_id: str,
        caller_id: Optional[str],
        activity_type: ActivityType | str | None,
        description: Optional[str],
    ) -> DailyActivity:
        caller = require_caller(caller_id)
        activity_type = self._parse_type(activity_type)
        description = require_non_empty(description, "description")

        if not self._children.get_by_id(child_id):
            raise NotFoundError(f"Child {child_id} not found")

        now = self._clock.now()
        activity_id = self._activities.create_activity(
            child_id=child_id,
            activity_type=activity_type,
            description=description,
            timestamp=now,
            created_by=caller,
        )
        logger.info("Logged %s activity %s for child %s", activity_type.value, activity_id, child_id)
        return DailyActivity(
            activity_id=activity_id,
            child_id=child_id,
            activity_type=activity_type,
            description=description,
            timestamp=now,
            created_by=caller,
            created_at=now,
        )

    def list_recent(self, child_id: str, limit: int = DEFAULT_ACTIVITY_LIMIT) -> Sequence[DailyActivity]:
        if int(limit) <= 0:
            raise ValidationError("limit", "must be a positive number")
        return self._activities.list_recent_for_child(child_id, min(int(limit), MAX_HISTORY_LIMIT))
