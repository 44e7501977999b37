from __future__ import annotations

from datetime import datetime

import pytest

from daycare_system.attendance.model import DropOffInfo, HealthStatus, Meals, PickUpInfo, SessionPatch
from daycare_system.core.exceptions import ConflictError, NotFoundError, UnauthenticatedError, ValidationError


@pytest.fixture
def closed_session(service, drop_off, pick_up, clock):
    session = service.check_in("C1", "u1", drop_off)
    clock.advance(hours=9)
    closed = service.check_out(session.session_id, "u1", pick_up)
    clock.advance(days=1)
    return closed


def test_check_out_before_check_in_is_rejected(service, closed_session):
    assert closed_session.check_in_time == datetime(2024, 1, 1, 8, 0, 0)

    with pytest.raises(ValidationError) as exc:
        service.edit_session(closed_session.session_id, "u1", SessionPatch(check_out_time=datetime(2024, 1, 1, 7, 0, 0)))

    assert exc.value.field == "checkOutTime"


def test_check_out_equal_to_check_in_is_rejected(service, closed_session):
    with pytest.raises(ValidationError) as exc:
        service.edit_session(closed_session.session_id, "u1", SessionPatch(check_out_time=closed_session.check_in_time))

    assert exc.value.field == "checkOutTime"


def test_future_check_in_is_rejected(service, closed_session, clock):
    future = clock.now().replace(hour=23)
    with pytest.raises(ValidationError) as exc:
        service.edit_session(closed_session.session_id, "u1", SessionPatch(check_in_time=future))

    assert exc.value.field == "checkInTime"


def test_future_check_out_is_rejected(service, closed_session, clock):
    with pytest.raises(ValidationError) as exc:
        service.edit_session(
            closed_session.session_id, "u1", SessionPatch(check_out_time=clock.now().replace(hour=23, minute=59))
        )

    assert exc.value.field == "checkOutTime"
    assert "future" in exc.value.reason


def test_rejected_edit_leaves_record_unchanged(service, attendance, closed_session):
    with pytest.raises(ValidationError):
        service.edit_session(closed_session.session_id, "u1", SessionPatch(check_out_time=datetime(2024, 1, 1, 7, 0)))

    assert attendance.get_by_id(closed_session.session_id) == closed_session


def test_valid_time_correction(service, closed_session):
    edited = service.edit_session(
        closed_session.session_id,
        "staff-1",
        SessionPatch(check_in_time=datetime(2024, 1, 1, 7, 45), check_out_time=datetime(2024, 1, 1, 16, 30)),
    )

    assert edited.check_in_time == datetime(2024, 1, 1, 7, 45)
    assert edited.check_out_time == datetime(2024, 1, 1, 16, 30)
    assert edited.pick_up.time == datetime(2024, 1, 1, 16, 30)
    assert edited.updated_by == "staff-1"
    assert edited.created_by == "u1"
    assert not edited.is_open


def test_subordinate_fields_are_corrected(service, closed_session):
    edited = service.edit_session(
        closed_session.session_id,
        "u1",
        SessionPatch(
            drop_off=DropOffInfo(person_name="Jane", relationship="Mother", signature="J.D.", notes="late bus"),
            pick_up=PickUpInfo(person_name="Grandpa", relationship="Grandfather", signature="G."),
            health_status=HealthStatus(has_fever=True, temperature=37.9, symptoms=("cough",)),
            meals=Meals(lunch=True),
            concerns="Rash on arm",
        ),
    )

    assert edited.drop_off.notes == "late bus"
    assert edited.pick_up.person_name == "Grandpa"
    assert edited.pick_up.time == closed_session.pick_up.time
    assert edited.health_status.temperature == pytest.approx(37.9)
    assert edited.meals == Meals(lunch=True)
    assert edited.concerns == "Rash on arm"
    assert edited.check_out_time == closed_session.check_out_time


def test_edit_validates_patched_fever(service, closed_session):
    with pytest.raises(ValidationError) as exc:
        service.edit_session(closed_session.session_id, "u1", SessionPatch(health_status=HealthStatus(has_fever=True)))

    assert exc.value.field == "healthStatus.temperature"


def test_edit_cannot_close_open_session(service, drop_off, clock):
    session = service.check_in("C2", "u1", drop_off)
    clock.advance(hours=1)

    with pytest.raises(ConflictError):
        service.edit_session(session.session_id, "u1", SessionPatch(check_out_time=clock.now()))
    assert service.get_active_session("C2").session_id == session.session_id


def test_edit_open_session_keeps_it_open(service, drop_off, clock):
    session = service.check_in("C2", "u1", drop_off)
    clock.advance(hours=1)

    edited = service.edit_session(session.session_id, "u1", SessionPatch(concerns="Teething"))

    assert edited.is_open
    assert edited.concerns == "Teething"


def test_edit_unknown_session(service):
    with pytest.raises(NotFoundError):
        service.edit_session("missing", "u1", SessionPatch(concerns="x"))


def test_edit_requires_caller(service, closed_session):
    with pytest.raises(UnauthenticatedError):
        service.edit_session(closed_session.session_id, None, SessionPatch(concerns="x"))


def test_edit_cannot_reopen_closed_session(service, attendance, closed_session):
    with pytest.raises(ConflictError):
        service.edit_session(closed_session.session_id, "u1", SessionPatch(clear_check_out=True))

    assert attendance.get_by_id(closed_session.session_id) == closed_session


def test_edit_cannot_add_pick_up_to_open_session(service, attendance, drop_off, pick_up, clock):
    session = service.check_in("C2", "u1", drop_off)
    clock.advance(hours=1)

    with pytest.raises(ConflictError):
        service.edit_session(session.session_id, "u1", SessionPatch(pick_up=pick_up))
    assert attendance.get_by_id(session.session_id).pick_up is None


@pytest.mark.parametrize("value", [None, ""])
def test_patch_marks_removed_check_out(value):
    patch = SessionPatch.from_dict({"checkOutTime": value})

    assert patch.clear_check_out is True
    assert patch.check_out_time is None


def test_patch_without_check_out_key_leaves_it_alone():
    assert SessionPatch.from_dict({"concerns": "x"}).clear_check_out is False


def test_patch_cannot_remove_check_in():
    with pytest.raises(ValidationError) as exc:
        SessionPatch.from_dict({"checkInTime": None})

    assert exc.value.field == "checkInTime"


def test_patch_rejects_non_object_parts():
    with pytest.raises(ValidationError) as exc:
        SessionPatch.from_dict({"meals": ["lunch"]})

    assert exc.value.field == "meals"
