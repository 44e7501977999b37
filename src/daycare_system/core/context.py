"""Explicit collaborators handed to services instead of process-wide state."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol


@dataclass(frozen=True)
class CurrentUser:
    id: str
    display_name: str


class Clock(Protocol):
    def now(self) -> datetime:
        raise NotImplementedError


class Identity(Protocol):
    def current_user(self) -> Optional[CurrentUser]:
        raise NotImplementedError


class SystemClock:
    """Local wall clock, truncated to whole seconds like the DATETIME columns."""

    def now(self) -> datetime:
        return datetime.now().replace(microsecond=0)
