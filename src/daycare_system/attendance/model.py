from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from ..common.datetime_utils import format_iso, parse_iso_datetime
from ..common.validators import optional_bool, optional_object, split_csv
from ..core.enums import SessionState
from ..core.exceptions import DomainError, ValidationError


@dataclass(frozen=True)
class DropOffInfo:
    """Who delivered the child, attested by signature."""

    person_name: str
    relationship: str
    signature: str
    notes: str = ""

    @classmethod
    def from_dict(cls, data: Any, field_name: str = "dropOffInfo") -> "DropOffInfo":
        data = optional_object(data, field_name)
        return cls(
            person_name=str(data.get("personName") or ""),
            relationship=str(data.get("relationship") or ""),
            signature=str(data.get("signature") or ""),
            notes=str(data.get("notes") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "personName": self.person_name,
            "relationship": self.relationship,
            "signature": self.signature,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class PickUpInfo:
    """Who collected the child; ``time`` is filled in at check-out."""

    person_name: str
    relationship: str
    signature: str
    notes: str = ""
    time: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Any, field_name: str = "pickUpInfo") -> "PickUpInfo":
        data = optional_object(data, field_name)
        raw_time = data.get("time") or None
        if raw_time is not None and not isinstance(raw_time, str):
            raise ValidationError(f"{field_name}.time", "must be an ISO-8601 timestamp")
        return cls(
            person_name=str(data.get("personName") or ""),
            relationship=str(data.get("relationship") or ""),
            signature=str(data.get("signature") or ""),
            notes=str(data.get("notes") or ""),
            time=parse_iso_datetime(raw_time, f"{field_name}.time") if raw_time else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "personName": self.person_name,
            "relationship": self.relationship,
            "signature": self.signature,
            "notes": self.notes,
            "time": format_iso(self.time),
        }


@dataclass(frozen=True)
class HealthStatus:
    has_fever: bool = False
    # Raw input until validated; a float (or None) afterwards.
    temperature: Any = None
    symptoms: tuple[str, ...] = ()
    medications: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Any, field_name: str = "healthStatus") -> "HealthStatus":
        data = optional_object(data, field_name)
        return cls(
            has_fever=optional_bool(data.get("hasFever"), f"{field_name}.hasFever"),
            temperature=data.get("temperature"),
            symptoms=tuple(split_csv(data.get("symptoms"), f"{field_name}.symptoms")),
            medications=tuple(split_csv(data.get("medications"), f"{field_name}.medications")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "hasFever": self.has_fever,
            "temperature": self.temperature,
            "symptoms": list(self.symptoms),
            "medications": list(self.medications),
        }


@dataclass(frozen=True)
class Meals:
    breakfast: bool = False
    lunch: bool = False
    snack: bool = False

    @classmethod
    def from_dict(cls, data: Any, field_name: str = "meals") -> "Meals":
        data = optional_object(data, field_name)
        return cls(
            breakfast=optional_bool(data.get("breakfast"), f"{field_name}.breakfast"),
            lunch=optional_bool(data.get("lunch"), f"{field_name}.lunch"),
            snack=optional_bool(data.get("snack"), f"{field_name}.snack"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"breakfast": self.breakfast, "lunch": self.lunch, "snack": self.snack}


@dataclass(frozen=True)
class AlternativePickup:
    name: str
    relationship: str = ""
    phone: str = ""

    @classmethod
    def from_dict(cls, data: Any, field_name: str = "alternativePickup") -> Optional["AlternativePickup"]:
        data = optional_object(data, field_name)
        if not data.get("name"):
            return None
        return cls(
            name=str(data.get("name") or ""),
            relationship=str(data.get("relationship") or ""),
            phone=str(data.get("phone") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "relationship": self.relationship, "phone": self.phone}


@dataclass(frozen=True)
class AttendanceSession:
    """Domain entity: one child's stay from check-in to check-out.

    A session without ``check_out_time`` is open.
    """

    session_id: str
    child_id: str
    guardian_id: str
    check_in_time: datetime
    check_out_time: Optional[datetime]
    drop_off: DropOffInfo
    health_status: HealthStatus = field(default_factory=HealthStatus)
    meals: Meals = field(default_factory=Meals)
    pick_up: Optional[PickUpInfo] = None
    concerns: Optional[str] = None
    alternative_pickup: Optional[AlternativePickup] = None
    created_at: Optional[datetime] = None
    created_by: Optional[str] = None
    updated_at: Optional[datetime] = None
    updated_by: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.check_out_time is None

    @property
    def state(self) -> SessionState:
        return SessionState.OPEN if self.is_open else SessionState.CLOSED

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.session_id,
            "childId": self.child_id,
            "guardianId": self.guardian_id,
            "state": self.state.value,
            "checkInTime": format_iso(self.check_in_time),
            "checkOutTime": format_iso(self.check_out_time),
            "dropOffInfo": self.drop_off.to_dict(),
            "pickUpInfo": self.pick_up.to_dict() if self.pick_up else None,
            "healthStatus": self.health_status.to_dict(),
            "meals": self.meals.to_dict(),
            "concerns": self.concerns,
            "alternativePickup": self.alternative_pickup.to_dict() if self.alternative_pickup else None,
            "createdAt": format_iso(self.created_at),
            "createdBy": self.created_by,
            "updatedAt": format_iso(self.updated_at),
            "updatedBy": self.updated_by,
        }


@dataclass(frozen=True)
class SessionPatch:
    """Corrections applied by ``edit_session``; None leaves a field unchanged.

    ``clear_check_out`` records a request to remove the check-out time, which
    would reopen the session.
    """

    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None
    clear_check_out: bool = False
    drop_off: Optional[DropOffInfo] = None
    pick_up: Optional[PickUpInfo] = None
    health_status: Optional[HealthStatus] = None
    meals: Optional[Meals] = None
    concerns: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SessionPatch":
        def _ts(key: str) -> Optional[datetime]:
            value = data.get(key)
            if value in (None, ""):
                return None
            if not isinstance(value, str):
                raise ValidationError(key, "must be an ISO-8601 timestamp")
            return parse_iso_datetime(value, key)

        if "checkInTime" in data and data["checkInTime"] in (None, ""):
            raise ValidationError("checkInTime", "cannot be removed")
        concerns = data.get("concerns")
        if concerns is not None and not isinstance(concerns, str):
            raise ValidationError("concerns", "must be text")

        return cls(
            check_in_time=_ts("checkInTime"),
            check_out_time=_ts("checkOutTime"),
            clear_check_out="checkOutTime" in data and data["checkOutTime"] in (None, ""),
            drop_off=DropOffInfo.from_dict(data["dropOffInfo"]) if data.get("dropOffInfo") is not None else None,
            pick_up=PickUpInfo.from_dict(data["pickUpInfo"]) if data.get("pickUpInfo") is not None else None,
            health_status=(
                HealthStatus.from_dict(data["healthStatus"]) if data.get("healthStatus") is not None else None
            ),
            meals=Meals.from_dict(data["meals"]) if data.get("meals") is not None else None,
            concerns=concerns,
        )


@dataclass
class BulkResult:
    """Per-child outcome of a bulk check-in/check-out."""

    succeeded: list[str] = field(default_factory=list)
    sessions: list[AttendanceSession] = field(default_factory=list)
    failed: list[tuple[str, DomainError]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "succeeded": list(self.succeeded),
            "sessions": [s.to_dict() for s in self.sessions],
            "failed": [
                {"childId": child_id, "error": type(err).__name__, "message": str(err)}
                for child_id, err in self.failed
            ],
        }
