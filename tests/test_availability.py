import pytest
from datetime import timedelta
from roomres import db
from roomres.models import Room, Slot
from roomres.services.availability_service import AvailabilityService
from roomres.services.booking_service import BookingService
from roomres.services.slot_registry import SlotRegistry
from roomres.errors import Conflict, NotFound

LABELS = ['08:00-10:00', '10:00-12:00', '13:00-15:00', '15:00-17:00']

def statuses(room_id, on_date):
    return [s.status for s in SlotRegistry.ensure_slots(room_id, on_date)]

def test_disable_room_with_pending_slot_conflicts(app, init_data, now):
    s1, _, _, room, _ = init_data
    BookingService.book(s1.id, room.id, '08:00-10:00', now)

    with pytest.raises(Conflict, match="booked or pending"):
        AvailabilityService.disable_room(room.id, now.date())

    assert db.session.get(Room, room.id).is_disabled is False
    assert statuses(room.id, now.date()) == ['pending', 'free', 'free', 'free']

def test_disable_room_on_another_date_blocked_by_booking_today(app, init_data, now):
    s1, _, _, room, _ = init_data
    BookingService.book(s1.id, room.id, '08:00-10:00', now)
    tomorrow = now.date() + timedelta(days=1)

    with pytest.raises(Conflict, match="booked or pending"):
        AvailabilityService.disable_room(room.id, tomorrow, today=now.date())

    assert db.session.get(Room, room.id).is_disabled is False
    assert statuses(room.id, tomorrow) == ['free'] * 4
    assert statuses(room.id, now.date()) == ['pending', 'free', 'free', 'free']

def test_disable_room_with_all_slots_free(app, init_data, now):
    _, _, _, room, _ = init_data

    affected = AvailabilityService.disable_room(room.id, now.date())

    assert affected == 4
    assert db.session.get(Room, room.id).is_disabled is True
    assert statuses(room.id, now.date()) == ['disabled'] * 4

def test_disable_room_with_some_slots_already_disabled(app, init_data, now):
    _, _, _, room, _ = init_data
    AvailabilityService.disable_slot(room.id, '10:00-12:00', now.date())

    affected = AvailabilityService.disable_room(room.id, now.date())

    assert affected == 3
    assert statuses(room.id, now.date()) == ['disabled'] * 4

def test_enable_room(app, init_data, now):
    _, _, _, room, _ = init_data
    AvailabilityService.disable_room(room.id, now.date())

    affected = AvailabilityService.enable_room(room.id, now.date())

    assert affected == 4
    assert db.session.get(Room, room.id).is_disabled is False
    assert statuses(room.id, now.date()) == ['free'] * 4

def test_disable_unknown_room(app, init_data, now):
    with pytest.raises(NotFound):
        AvailabilityService.disable_room(9999, now.date())

def test_disable_slot_only_when_free(app, init_data, now):
    s1, _, _, room, _ = init_data
    BookingService.book(s1.id, room.id, '08:00-10:00', now)

    with pytest.raises(Conflict, match="Can only disable free"):
        AvailabilityService.disable_slot(room.id, '08:00-10:00', now.date())

    AvailabilityService.disable_slot(room.id, '10:00-12:00', now.date())
    assert statuses(room.id, now.date()) == ['pending', 'disabled', 'free', 'free']

def test_disabling_every_slot_disables_the_room(app, init_data, now):
    _, _, _, room, _ = init_data

    for label in LABELS[:-1]:
        AvailabilityService.disable_slot(room.id, label, now.date())
        assert db.session.get(Room, room.id).is_disabled is False

    AvailabilityService.disable_slot(room.id, LABELS[-1], now.date())
    assert db.session.get(Room, room.id).is_disabled is True

def test_disabling_every_slot_of_another_date_keeps_room_with_booking_today(app, init_data, now):
    s1, _, _, room, _ = init_data
    BookingService.book(s1.id, room.id, '08:00-10:00', now)
    tomorrow = now.date() + timedelta(days=1)

    for label in LABELS:
        AvailabilityService.disable_slot(room.id, label, tomorrow, today=now.date())

    assert statuses(room.id, tomorrow) == ['disabled'] * 4
    assert db.session.get(Room, room.id).is_disabled is False

def test_enabling_one_slot_reenables_the_room(app, init_data, now):
    _, _, _, room, _ = init_data
    AvailabilityService.disable_room(room.id, now.date())

    AvailabilityService.enable_slot(room.id, '13:00-15:00', now.date())

    assert db.session.get(Room, room.id).is_disabled is False
    assert statuses(room.id, now.date()) == ['disabled', 'disabled', 'free', 'disabled']

def test_enable_slot_requires_disabled(app, init_data, now):
    _, _, _, room, _ = init_data

    with pytest.raises(Conflict, match="Can only enable disabled"):
        AvailabilityService.enable_slot(room.id, '13:00-15:00', now.date())

def test_claim_is_compare_and_swap(app, init_data, now):
    s1, s2, _, room, _ = init_data
    SlotRegistry.ensure_slots(room.id, now.date())

    assert AvailabilityService.claim_slot(room.id, now.date(), '08:00-10:00', s1.id) is True
    assert AvailabilityService.claim_slot(room.id, now.date(), '08:00-10:00', s2.id) is False

    slot = Slot.query.filter_by(room_id=room.id, time_slot='08:00-10:00').one()
    assert slot.student_id == s1.id

def test_release_only_undoes_own_claim(app, init_data, now):
    s1, s2, _, room, _ = init_data
    SlotRegistry.ensure_slots(room.id, now.date())
    AvailabilityService.claim_slot(room.id, now.date(), '08:00-10:00', s1.id)

    assert AvailabilityService.release_slot(room.id, now.date(), '08:00-10:00', s2.id) == 0
    assert AvailabilityService.release_slot(room.id, now.date(), '08:00-10:00', s1.id) == 1
