import pytest
from datetime import date, datetime, time, timedelta
from unittest.mock import patch
from sqlalchemy.exc import OperationalError
from roomres import db
from roomres.models import Slot
from roomres.services.slot_registry import SlotRegistry, parse_time_slot, is_slot_open
from roomres.errors import StorageError, ValidationError

LABELS = ['08:00-10:00', '10:00-12:00', '13:00-15:00', '15:00-17:00']

def test_ensure_slots_materializes_free_slots(app, init_data, now):
    _, _, _, room, _ = init_data

    slots = SlotRegistry.ensure_slots(room.id, now.date())

    assert [s.time_slot for s in slots] == LABELS
    assert all(s.status == 'free' for s in slots)
    assert all(s.student_id is None and s.booking_id is None for s in slots)

def test_ensure_slots_is_idempotent(app, init_data, now):
    _, _, _, room, _ = init_data

    for _ in range(3):
        SlotRegistry.ensure_slots(room.id, now.date())

    assert Slot.query.filter_by(room_id=room.id, availability_date=now.date()).count() == 4

def test_ensure_slots_fills_missing_labels_only(app, init_data, now):
    _, student, _, room, _ = init_data
    existing = Slot(room_id=room.id, availability_date=now.date(), time_slot='10:00-12:00',
                    status='pending', student_id=student.id)
    db.session.add(existing)
    db.session.commit()

    slots = SlotRegistry.ensure_slots(room.id, now.date())

    assert len(slots) == 4
    kept = [s for s in slots if s.time_slot == '10:00-12:00'][0]
    assert kept.status == 'pending'
    assert kept.student_id == student.id

def test_slots_are_per_date(app, init_data, now):
    _, _, _, room, _ = init_data

    SlotRegistry.ensure_slots(room.id, now.date())
    SlotRegistry.ensure_slots(room.id, now.date() + timedelta(days=1))

    assert Slot.query.filter_by(room_id=room.id).count() == 8

def test_student_view_hides_lapsed_slots(app, init_data, now):
    _, _, _, room, _ = init_data
    lunchtime = datetime.combine(now.date(), time(12, 30))

    student_view = SlotRegistry.ensure_slots(room.id, now.date(), now=lunchtime)
    staff_view = SlotRegistry.ensure_slots(room.id, now.date())

    assert [s.time_slot for s in student_view] == ['13:00-15:00', '15:00-17:00']
    assert len(staff_view) == 4

def test_student_view_of_other_dates(app, init_data, now):
    _, _, _, room, _ = init_data

    assert SlotRegistry.ensure_slots(room.id, now.date() - timedelta(days=1), now=now) == []
    assert len(SlotRegistry.ensure_slots(room.id, now.date() + timedelta(days=1), now=now)) == 4

def test_storage_failure_materializes_nothing(app, init_data, now):
    _, _, _, room, _ = init_data

    with patch.object(SlotRegistry, '_insert_missing',
                      side_effect=OperationalError('INSERT', {}, Exception('disk I/O error'))):
        with pytest.raises(StorageError):
            SlotRegistry.ensure_slots(room.id, now.date())

    assert Slot.query.filter_by(room_id=room.id).count() == 0

def test_parse_time_slot():
    assert parse_time_slot('13:00-15:00') == (time(13, 0), time(15, 0))
    for bad in ['13:00', '15:00-13:00', 'ab:cd-ef:gh', None]:
        with pytest.raises(ValidationError):
            parse_time_slot(bad)

def test_is_slot_open():
    today = date(2026, 3, 2)
    assert is_slot_open('08:00-10:00', today, datetime(2026, 3, 2, 9, 59))
    assert not is_slot_open('08:00-10:00', today, datetime(2026, 3, 2, 10, 0))
    assert is_slot_open('08:00-10:00', today + timedelta(days=1), datetime(2026, 3, 2, 23, 0))
    assert not is_slot_open('15:00-17:00', today - timedelta(days=1), datetime(2026, 3, 2, 8, 0))

def test_validate_label_rejects_unconfigured_slot(app):
    with pytest.raises(ValidationError):
        SlotRegistry.validate_label('17:00-19:00')
