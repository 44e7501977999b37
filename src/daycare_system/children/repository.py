from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import Child, EmergencyContact, MedicalInfo


class ChildRepository(Protocol):
    """Repository interface for Child.

    The service layer depends on this interface, not on a concrete database.
    """

    def get_by_id(self, child_id: str) -> Optional[Child]:
        raise NotImplementedError

    def list_for_guardian(self, guardian_id: str) -> Sequence[Child]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Child]:
        raise NotImplementedError

    def create_child(
        self,
        *,
        first_name: str,
        last_name: str,
        date_of_birth: date,
        guardian_id: str,
        emergency_contacts: Sequence[EmergencyContact],
        medical_info: MedicalInfo,
        created_at: datetime,
    ) -> str:
        raise NotImplementedError

    def update_child(
        self,
        *,
        child_id: str,
        first_name: str,
        last_name: str,
        date_of_birth: date,
        emergency_contacts: Sequence[EmergencyContact],
        medical_info: MedicalInfo,
        updated_at: datetime,
    ) -> bool:
        raise NotImplementedError
