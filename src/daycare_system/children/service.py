from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..common.validators import require_caller, require_non_empty
from ..core.context import Clock, SystemClock
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .model import Child, EmergencyContact, MedicalInfo
from .repository import ChildRepository

logger = logging.getLogger(__name__)


class ChildService:
    """Use cases: register and maintain children owned by a guardian."""

    def __init__(self, children: ChildRepository, *, clock: Optional[Clock] = None):
        self._children = children
        self._clock = clock or SystemClock()

    def get_child(self, child_id: str) -> Child:
        child = self._children.get_by_id(child_id)
        if not child:
            raise NotFoundError(f"Child {child_id} not found")
        return child

    def list_for_guardian(self, guardian_id: str) -> Sequence[Child]:
        return self._children.list_for_guardian(guardian_id)

    def _validate(
        self,
        *,
        first_name: str,
        last_name: str,
        date_of_birth: Optional[date],
        emergency_contacts: Sequence[EmergencyContact],
    ) -> tuple[str, str, date, tuple[EmergencyContact, ...]]:
        first_name = require_non_empty(first_name, "firstName")
        last_name = require_non_empty(last_name, "lastName")

        if date_of_birth is None:
            raise ValidationError("dateOfBirth", "is required")
        if date_of_birth > self._clock.now().date():
            raise ValidationError("dateOfBirth", "cannot be in the future")

        if not emergency_contacts:
            raise ValidationError("emergencyContacts", "at least one contact is required")
        contacts = []
        for i, c in enumerate(emergency_contacts):
            contacts.append(
                EmergencyContact(
                    name=require_non_empty(c.name, f"emergencyContacts[{i}].name"),
                    relationship=require_non_empty(c.relationship, f"emergencyContacts[{i}].relationship"),
                    phone=require_non_empty(c.phone, f"emergencyContacts[{i}].phone"),
                    email=(c.email or "").strip(),
                )
            )
        return first_name, last_name, date_of_birth, tuple(contacts)

    def register_child(
        self,
        caller_id: Optional[str],
        *,
        first_name: str,
        last_name: str,
        date_of_birth: Optional[date],
        emergency_contacts: Sequence[EmergencyContact],
        medical_info: Optional[MedicalInfo] = None,
    ) -> Child:
        guardian_id = require_caller(caller_id)
        first_name, last_name, date_of_birth, contacts = self._validate(
            first_name=first_name,
            last_name=last_name,
            date_of_birth=date_of_birth,
            emergency_contacts=emergency_contacts,
        )

        child_id = self._children.create_child(
            first_name=first_name,
            last_name=last_name,
            date_of_birth=date_of_birth,
            guardian_id=guardian_id,
            emergency_contacts=contacts,
            medical_info=medical_info or MedicalInfo(),
            created_at=self._clock.now(),
        )
        logger.info("Registered child %s for guardian %s", child_id, guardian_id)
        return self.get_child(child_id)

    def update_child(
        self,
        child_id: str,
        caller_id: Optional[str],
        *,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        date_of_birth: Optional[date] = None,
        emergency_contacts: Optional[Sequence[EmergencyContact]] = None,
        medical_info: Optional[MedicalInfo] = None,
    ) -> Child:
        caller = require_caller(caller_id)
        child = self.get_child(child_id)
        if child.guardian_id != caller:
            raise AuthorizationError("Only the child's guardian can edit this record")

        first_name, last_name, date_of_birth, contacts = self._validate(
            first_name=child.first_name if first_name is None else first_name,
            last_name=child.last_name if last_name is None else last_name,
            date_of_birth=date_of_birth or child.date_of_birth,
            emergency_contacts=child.emergency_contacts if emergency_contacts is None else emergency_contacts,
        )

        ok = self._children.update_child(
            child_id=child_id,
            first_name=first_name,
            last_name=last_name,
            date_of_birth=date_of_birth,
            emergency_contacts=contacts,
            medical_info=medical_info or child.medical_info,
            updated_at=self._clock.now(),
        )
        if not ok:
            raise NotFoundError(f"Child {child_id} not found")
        logger.info("Updated child %s", child_id)
        return self.get_child(child_id)
