from __future__ import annotations

from enum import Enum


class SessionState(str, Enum):
    """Lifecycle state of an attendance session."""

    OPEN = "OPEN"
    CLOSED = "CLOSED"


class ActivityType(str, Enum):
    """Kinds of entries in a child's daily activity log."""

    MEAL = "meal"
    NAP = "nap"
    DIAPER = "diaper"
    PLAY = "play"
    LEARNING = "learning"
    OUTDOOR = "outdoor"
    MEDICATION = "medication"
    INCIDENT = "incident"
    OTHER = "other"
