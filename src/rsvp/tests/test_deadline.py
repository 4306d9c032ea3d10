from datetime import UTC, datetime, timedelta

from src.rsvp.deadline import DeadlineGate

DEADLINE = datetime(2025, 11, 16, 6, 0, tzinfo=UTC)


def test_before_deadline_is_open():
    gate = DeadlineGate(deadline=DEADLINE, now=lambda: DEADLINE - timedelta(minutes=1))

    assert gate.is_past_deadline() is False


def test_deadline_instant_is_closed():
    gate = DeadlineGate(deadline=DEADLINE, now=lambda: DEADLINE)

    assert gate.is_past_deadline() is True


def test_now_function_can_be_passed_per_call():
    gate = DeadlineGate(deadline=DEADLINE, now=lambda: DEADLINE - timedelta(days=1))

    assert gate.is_past_deadline(lambda: DEADLINE + timedelta(seconds=1)) is True


def test_defaults_come_from_settings():
    gate = DeadlineGate()

    assert gate.deadline == DEADLINE
    assert gate.label == "15 de noviembre de 2025"
