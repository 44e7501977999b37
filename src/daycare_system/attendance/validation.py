"""Field and time rules for attendance sessions.

Each failure names the offending field so callers can highlight it.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional

from ..common.validators import optional_text, require_non_empty, require_number
from ..core.exceptions import ValidationError
from .model import AlternativePickup, DropOffInfo, HealthStatus, PickUpInfo


def validate_drop_off(info: Optional[DropOffInfo]) -> DropOffInfo:
    if info is None:
        raise ValidationError("dropOffInfo", "is required")
    return DropOffInfo(
        person_name=require_non_empty(info.person_name, "dropOffInfo.personName"),
        relationship=require_non_empty(info.relationship, "dropOffInfo.relationship"),
        signature=require_non_empty(info.signature, "dropOffInfo.signature"),
        notes=(info.notes or "").strip(),
    )


def validate_pick_up(info: Optional[PickUpInfo]) -> PickUpInfo:
    if info is None:
        raise ValidationError("pickUpInfo", "is required")
    return PickUpInfo(
        person_name=require_non_empty(info.person_name, "pickUpInfo.personName"),
        relationship=require_non_empty(info.relationship, "pickUpInfo.relationship"),
        signature=require_non_empty(info.signature, "pickUpInfo.signature"),
        notes=(info.notes or "").strip(),
        time=info.time,
    )


def validate_health_status(status: Optional[HealthStatus]) -> HealthStatus:
    status = status or HealthStatus()
    if status.has_fever:
        temperature = require_number(status.temperature, "healthStatus.temperature")
        return replace(status, temperature=temperature)
    return replace(status, temperature=None)


def validate_alternative_pickup(pickup: Optional[AlternativePickup]) -> Optional[AlternativePickup]:
    if pickup is None:
        return None
    return AlternativePickup(
        name=require_non_empty(pickup.name, "alternativePickup.name"),
        relationship=(pickup.relationship or "").strip(),
        phone=require_non_empty(pickup.phone, "alternativePickup.phone"),
    )


def clean_concerns(concerns: Optional[str]) -> Optional[str]:
    if concerns is not None and not isinstance(concerns, str):
        raise ValidationError("concerns", "must be text")
    return optional_text(concerns)


def validate_session_times(check_in_time: datetime, check_out_time: Optional[datetime], *, now: datetime) -> None:
    """No future timestamps, and check-out strictly after check-in."""
    if check_in_time > now:
        raise ValidationError("checkInTime", "cannot be in the future")
    if check_out_time is None:
        return
    if check_out_time <= check_in_time:
        raise ValidationError("checkOutTime", "must be after the check-in time")
    if check_out_time > now:
        raise ValidationError("checkOutTime", "cannot be in the future")
