"""
Tests for the pure booking wizard transition function.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date, timedelta

import pytest

from smart_booking.application.utils.wizard_transitions import (
    CLOSED_DAY_MESSAGE,
    PAST_DATE_MESSAGE,
    is_bookable_date,
    transition,
)
from smart_booking.domain.entities.appointment import Appointment, AppointmentStatus
from smart_booking.domain.entities.time_slot import TimeSlot
from smart_booking.domain.entities.wizard_events import (
    BackRequested,
    BookAnotherRequested,
    DateChosen,
    DetailsEdited,
    ServiceChosen,
    SlotsFailed,
    SlotsLoaded,
    SubmitFailed,
    SubmitRequested,
    SubmitSucceeded,
    TimeChosen,
)
from smart_booking.domain.entities.wizard_state import WizardState, WizardStep

TODAY = date(2024, 6, 10)  # Monday
SLOTS = (
    TimeSlot(time="10:00", available=False),
    TimeSlot(time="10:30", available=True),
)


def step(state: WizardState, event) -> WizardState:
    return transition(state, event, today=TODAY)


def at_time_step() -> WizardState:
    state = step(WizardState.initial(TODAY), DateChosen(TODAY))
    return step(state, SlotsLoaded(date=TODAY, service_id=None, slots=SLOTS))


def at_details_step(name: str = "Alice", email: str = "alice@example.com") -> WizardState:
    state = step(at_time_step(), TimeChosen("10:30"))
    return step(state, DetailsEdited(name=name, email=email, message="Hi"))


def test_initial_state_defaults_to_today():
    state = WizardState.initial(TODAY)
    assert state.step == WizardStep.SELECTING_DATE
    assert state.draft.date == TODAY
    assert state.draft.time is None


@pytest.mark.parametrize(
    "day",
    [
        TODAY - timedelta(days=1),
        TODAY - timedelta(days=30),
        date(2024, 6, 15),  # Saturday
        date(2024, 6, 16),  # Sunday
    ],
)
def test_past_and_closed_dates_do_not_advance(day):
    state = step(WizardState.initial(TODAY), DateChosen(day))
    assert state.step == WizardStep.SELECTING_DATE
    assert state.draft.date == TODAY
    assert state.error is not None


def test_today_and_future_weekdays_advance():
    for day in (TODAY, date(2024, 6, 14), date(2024, 7, 1)):
        state = step(WizardState.initial(TODAY), DateChosen(day))
        assert state.step == WizardStep.SELECTING_TIME
        assert state.draft.date == day
        assert state.slots_loading


def test_disabled_weekdays_are_configurable():
    state = transition(
        WizardState.initial(TODAY),
        DateChosen(date(2024, 6, 15)),
        today=TODAY,
        disabled_weekdays=frozenset({0}),
    )
    assert state.step == WizardStep.SELECTING_TIME
    assert not is_bookable_date(TODAY, TODAY, frozenset({0}))


def test_unavailable_slot_is_rejected():
    state = at_time_step()
    after = step(state, TimeChosen("10:00"))
    assert after.step == WizardStep.SELECTING_TIME
    assert after.draft.time is None
    assert after.error is not None


def test_unknown_slot_is_rejected():
    after = step(at_time_step(), TimeChosen("23:00"))
    assert after.step == WizardStep.SELECTING_TIME


def test_available_slot_advances():
    after = step(at_time_step(), TimeChosen("10:30"))
    assert after.step == WizardStep.ENTERING_DETAILS
    assert after.draft.time == "10:30"


def test_slots_for_an_abandoned_date_are_dropped():
    state = step(WizardState.initial(TODAY), DateChosen(TODAY))
    state = step(state, DateChosen(date(2024, 6, 11)))

    late = step(state, SlotsLoaded(date=TODAY, service_id=None, slots=SLOTS))
    assert late is state

    late_failure = step(state, SlotsFailed(date=TODAY, service_id=None, message="boom"))
    assert late_failure is state


def test_slots_for_another_service_are_dropped():
    state = step(WizardState.initial(TODAY), DateChosen(TODAY))
    state = step(state, ServiceChosen("2"))
    assert state.slots_loading
    assert step(state, SlotsLoaded(date=TODAY, service_id=None, slots=SLOTS)) is state
    assert step(state, SlotsLoaded(date=TODAY, service_id="2", slots=SLOTS)).slots == SLOTS


def test_slots_failure_attaches_error_without_moving():
    state = step(WizardState.initial(TODAY), DateChosen(TODAY))
    state = step(state, SlotsFailed(date=TODAY, service_id=None, message="Could not load"))
    assert state.step == WizardStep.SELECTING_TIME
    assert state.error.message == "Could not load"
    assert not state.slots_loading


def test_submit_requires_name_and_email():
    state = at_details_step(name="  ", email="alice@example.com")
    after = step(state, SubmitRequested())
    assert not after.submitting
    assert after.error is not None

    state = at_details_step(name="Alice", email="")
    assert not step(state, SubmitRequested()).submitting


def test_submit_success_confirms_with_snapshot():
    state = step(at_details_step(), SubmitRequested())
    assert state.submitting
    appointment = Appointment(
        id="a1", user_id="u1", service_id="", date="2024-06-10", time="10:30", status=AppointmentStatus.pending
    )

    confirmed = step(state, SubmitSucceeded(draft=state.draft, appointment=appointment))

    assert confirmed.step == WizardStep.CONFIRMED
    assert confirmed.confirmation.draft == state.draft
    assert confirmed.confirmation.appointment.id == "a1"


def test_submit_failure_keeps_fields():
    state = step(at_details_step(), SubmitRequested())
    failed = step(state, SubmitFailed(draft=state.draft, message="Failed to create appointment"))

    assert failed.step == WizardStep.ENTERING_DETAILS
    assert failed.draft == state.draft
    assert not failed.submitting
    assert failed.error.message == "Failed to create appointment"


def test_submit_result_for_other_draft_is_ignored():
    state = step(at_details_step(), SubmitRequested())
    other = replace(state.draft, name="Bob")
    appointment = Appointment(
        id="a1", user_id="u1", service_id="", date="2024-06-10", time="10:30", status=AppointmentStatus.pending
    )
    assert step(state, SubmitSucceeded(draft=other, appointment=appointment)) is state


def test_back_keeps_draft():
    state = at_details_step()
    back = step(state, BackRequested())
    assert back.step == WizardStep.SELECTING_TIME
    assert back.draft == state.draft


def test_edits_and_back_are_ignored_while_submitting():
    state = step(at_details_step(), SubmitRequested())
    assert step(state, BackRequested()) is state
    assert step(state, DetailsEdited(name="Bob")) is state


def test_book_another_resets_everything():
    state = step(at_details_step(), SubmitRequested())
    appointment = Appointment(
        id="a1", user_id="u1", service_id="", date="2024-06-10", time="10:30", status=AppointmentStatus.pending
    )
    confirmed = step(state, SubmitSucceeded(draft=state.draft, appointment=appointment))

    fresh = transition(confirmed, BookAnotherRequested(), today=date(2024, 6, 12))

    assert fresh.step == WizardStep.SELECTING_DATE
    assert fresh.draft.date == date(2024, 6, 12)
    assert fresh.draft.time is None
    assert (fresh.draft.name, fresh.draft.email, fresh.draft.message) == ("", "", "")
    assert fresh.confirmation is None


def test_events_for_other_steps_are_noops():
    initial = WizardState.initial(TODAY)
    assert step(initial, TimeChosen("10:30")) is initial
    assert step(initial, SubmitRequested()) is initial
    assert step(initial, BackRequested()) is initial
    assert step(initial, BookAnotherRequested()) is initial


def test_rejected_date_explains_why():
    past = step(WizardState.initial(TODAY), DateChosen(TODAY - timedelta(days=1)))
    closed = step(WizardState.initial(TODAY), DateChosen(date(2024, 6, 15)))

    assert past.error.message == PAST_DATE_MESSAGE
    assert closed.error.message == CLOSED_DAY_MESSAGE
    assert is_bookable_date(date(2024, 6, 14), TODAY)
    assert not is_bookable_date(date(2024, 6, 15), TODAY)
