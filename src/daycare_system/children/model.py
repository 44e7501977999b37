from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional

from ..common.datetime_utils import age_in_years
from ..common.validators import optional_object, split_csv


@dataclass(frozen=True)
class EmergencyContact:
    name: str
    relationship: str
    phone: str
    email: str = ""

    @classmethod
    def from_dict(cls, data: Any, field_name: str = "emergencyContact") -> "EmergencyContact":
        data = optional_object(data, field_name)
        return cls(
            name=str(data.get("name") or ""),
            relationship=str(data.get("relationship") or ""),
            phone=str(data.get("phone") or ""),
            email=str(data.get("email") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "relationship": self.relationship, "phone": self.phone, "email": self.email}


@dataclass(frozen=True)
class MedicalInfo:
    allergies: tuple[str, ...] = ()
    medications: tuple[str, ...] = ()
    conditions: tuple[str, ...] = ()
    notes: str = ""

    @classmethod
    def from_dict(cls, data: Any, field_name: str = "medicalInfo") -> "MedicalInfo":
        data = optional_object(data, field_name)
        return cls(
            allergies=tuple(split_csv(data.get("allergies"), f"{field_name}.allergies")),
            medications=tuple(split_csv(data.get("medications"), f"{field_name}.medications")),
            conditions=tuple(split_csv(data.get("conditions"), f"{field_name}.conditions")),
            notes=str(data.get("notes") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "allergies": list(self.allergies),
            "medications": list(self.medications),
            "conditions": list(self.conditions),
            "notes": self.notes,
        }


@dataclass(frozen=True)
class Child:
    """Domain entity: a child registered by a guardian.

    Age is never stored; use ``age_on`` to derive it from the date of birth.
    """

    child_id: str
    first_name: str
    last_name: str
    date_of_birth: date
    guardian_id: str
    emergency_contacts: tuple[EmergencyContact, ...] = ()
    medical_info: MedicalInfo = field(default_factory=MedicalInfo)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def age_on(self, today: date) -> int:
        return age_in_years(self.date_of_birth, today)
