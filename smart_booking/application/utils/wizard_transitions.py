from __future__ import annotations

from dataclasses import replace
from datetime import date

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
    WizardEvent,
)
from smart_booking.domain.entities.wizard_state import Confirmation, WizardError, WizardState, WizardStep

DEFAULT_DISABLED_WEEKDAYS = frozenset({5, 6})  # Saturday, Sunday

PAST_DATE_MESSAGE = "Please choose today or a later date."
CLOSED_DAY_MESSAGE = "We're closed on that day. Please pick another date."
UNAVAILABLE_SLOT_MESSAGE = "That time is not available. Please pick another one."
MISSING_DETAILS_MESSAGE = "Please enter your name and email."


def is_bookable_date(day: date, today: date, disabled_weekdays: frozenset[int] = DEFAULT_DISABLED_WEEKDAYS) -> bool:
    return day >= today and day.weekday() not in disabled_weekdays


def transition(
    state: WizardState,
    event: WizardEvent,
    *,
    today: date,
    disabled_weekdays: frozenset[int] = DEFAULT_DISABLED_WEEKDAYS,
) -> WizardState:
    """
    Pure transition function for the booking wizard.

    Events that do not apply to the current step, or that answer a request the
    wizard has since moved away from, return the state unchanged.
    """
    if isinstance(event, ServiceChosen):
        return _choose_service(state, event)

    if isinstance(event, DateChosen):
        return _choose_date(state, event, today, disabled_weekdays)

    if isinstance(event, SlotsLoaded):
        if not _is_active_slot_interest(state, event.date, event.service_id):
            return state
        return replace(state, slots=tuple(event.slots), slots_loading=False, error=None)

    if isinstance(event, SlotsFailed):
        if not _is_active_slot_interest(state, event.date, event.service_id):
            return state
        return replace(state, slots=(), slots_loading=False, error=WizardError(event.message))

    if isinstance(event, TimeChosen):
        return _choose_time(state, event)

    if isinstance(event, DetailsEdited):
        if state.step != WizardStep.ENTERING_DETAILS or state.submitting:
            return state
        draft = replace(
            state.draft,
            name=state.draft.name if event.name is None else event.name,
            email=state.draft.email if event.email is None else event.email,
            message=state.draft.message if event.message is None else event.message,
        )
        return replace(state, draft=draft)

    if isinstance(event, SubmitRequested):
        if state.step != WizardStep.ENTERING_DETAILS or state.submitting:
            return state
        if not state.draft.name.strip() or not state.draft.email.strip():
            return replace(state, error=WizardError(MISSING_DETAILS_MESSAGE))
        return replace(state, submitting=True, error=None)

    if isinstance(event, SubmitSucceeded):
        if state.step != WizardStep.ENTERING_DETAILS or state.draft != event.draft:
            return state
        return replace(
            state,
            step=WizardStep.CONFIRMED,
            submitting=False,
            error=None,
            confirmation=Confirmation(draft=event.draft, appointment=event.appointment),
        )

    if isinstance(event, SubmitFailed):
        if state.step != WizardStep.ENTERING_DETAILS or state.draft != event.draft:
            return state
        return replace(state, submitting=False, error=WizardError(event.message))

    if isinstance(event, BackRequested):
        if state.step != WizardStep.ENTERING_DETAILS or state.submitting:
            return state
        return replace(state, step=WizardStep.SELECTING_TIME, error=None)

    if isinstance(event, BookAnotherRequested):
        if state.step != WizardStep.CONFIRMED:
            return state
        return WizardState.initial(today)

    return state


def _choose_service(state: WizardState, event: ServiceChosen) -> WizardState:
    if state.step not in (WizardStep.SELECTING_DATE, WizardStep.SELECTING_TIME):
        return state
    draft = replace(state.draft, service_id=event.service_id, time=None)
    if state.step == WizardStep.SELECTING_TIME:
        return replace(state, draft=draft, slots=(), slots_loading=True, error=None)
    return replace(state, draft=draft, error=None)


def _choose_date(
    state: WizardState,
    event: DateChosen,
    today: date,
    disabled_weekdays: frozenset[int],
) -> WizardState:
    if state.step not in (WizardStep.SELECTING_DATE, WizardStep.SELECTING_TIME):
        return state
    if not is_bookable_date(event.date, today, disabled_weekdays):
        message = PAST_DATE_MESSAGE if event.date < today else CLOSED_DAY_MESSAGE
        return replace(state, error=WizardError(message, retryable=False))
    return replace(
        state,
        step=WizardStep.SELECTING_TIME,
        draft=replace(state.draft, date=event.date, time=None),
        slots=(),
        slots_loading=True,
        error=None,
    )


def _choose_time(state: WizardState, event: TimeChosen) -> WizardState:
    if state.step != WizardStep.SELECTING_TIME:
        return state
    slot = next((s for s in state.slots if s.time == event.time), None)
    if slot is None or not slot.available:
        return replace(state, error=WizardError(UNAVAILABLE_SLOT_MESSAGE, retryable=False))
    return replace(
        state,
        step=WizardStep.ENTERING_DETAILS,
        draft=replace(state.draft, time=event.time),
        error=None,
    )


def _is_active_slot_interest(state: WizardState, day: date, service_id: str | None) -> bool:
    return (
        state.step == WizardStep.SELECTING_TIME
        and state.draft.date == day
        and state.draft.service_id == service_id
    )
