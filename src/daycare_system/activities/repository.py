from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from ..core.enums import ActivityType
from .model import DailyActivity


class ActivityRepository(Protocol):
    def list_recent_for_child(self, child_id: str, limit: int) -> Sequence[DailyActivity]:
        raise NotImplementedError

    def create_activity(
        self,
        *,
        child_id: str,
        activity_type: ActivityType,
        description: str,
        timestamp: datetime,
        created_by: str,
    ) -> str:
        raise NotImplementedError
