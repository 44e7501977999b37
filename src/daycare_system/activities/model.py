from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from ..common.datetime_utils import format_iso
from ..core.enums import ActivityType


@dataclass(frozen=True)
class DailyActivity:
    """Domain entity: one entry in a child's daily activity log."""

    activity_id: str
    child_id: str
    activity_type: ActivityType
    description: str
    timestamp: datetime
    created_by: str
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.activity_id,
            "childId": self.child_id,
            "type": self.activity_type.value,
            "description": self.description,
            "timestamp": format_iso(self.timestamp),
            "createdBy": self.created_by,
            "createdAt": format_iso(self.created_at),
        }
