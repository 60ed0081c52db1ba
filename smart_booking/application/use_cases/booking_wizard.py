from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable
from zoneinfo import ZoneInfo

from smart_booking.application.exceptions import BookingApiError, user_message
from smart_booking.application.use_cases.appointments import AppointmentsUseCase
from smart_booking.application.utils.wizard_transitions import DEFAULT_DISABLED_WEEKDAYS, transition
from smart_booking.domain.entities.appointment import CreateAppointmentRequest
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
    WizardEvent,
)
from smart_booking.domain.entities.wizard_state import WizardDraft, WizardState, WizardStep

SLOTS_FAILED_MESSAGE = "Could not load available times"
CREATE_FAILED_MESSAGE = "Failed to create appointment"
SLOT_TAKEN_MESSAGE = "Sorry, that time was just booked. Please go back and pick another one."

StateListener = Callable[[WizardState], None]


class BookingWizardUseCase:
    """
    Drives WizardState through `transition` and performs the side effects:
    slot fetches on entering the time step, and the create request on submit.
    While a day is shown, refreshed availability for it is applied as it lands.
    """

    def __init__(
        self,
        appointments: AppointmentsUseCase,
        timezone: ZoneInfo,
        disabled_weekdays: frozenset[int] = DEFAULT_DISABLED_WEEKDAYS,
        revalidate_slot: bool = True,
        today: Callable[[], date] | None = None,
    ) -> None:
        self._appointments = appointments
        self._timezone = timezone
        self._disabled_weekdays = frozenset(disabled_weekdays)
        self._revalidate_slot = revalidate_slot
        self._today = today or (lambda: datetime.now(self._timezone).date())
        self._listeners: list[StateListener] = []
        self._watched: tuple[date, str | None] | None = None
        self._unwatch: Callable[[], None] | None = None
        self._logger = logging.getLogger(__name__)
        self._state = WizardState.initial(self._today())

    @property
    def state(self) -> WizardState:
        return self._state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, event: WizardEvent) -> WizardState:
        previous = self._state
        self._state = transition(
            previous,
            event,
            today=self._today(),
            disabled_weekdays=self._disabled_weekdays,
        )
        if self._state is not previous:
            if self._state.step != previous.step:
                self._logger.info("Wizard step changed", extra={"step": self._state.step.value})
            for listener in list(self._listeners):
                listener(self._state)
        return self._state

    async def select_service(self, service_id: str | None) -> WizardState:
        self.dispatch(ServiceChosen(service_id))
        if self._state.step == WizardStep.SELECTING_TIME and self._state.slots_loading:
            await self._load_slots()
        return self._state

    async def select_date(self, day: date) -> WizardState:
        self.dispatch(DateChosen(day))
        if self._state.step == WizardStep.SELECTING_TIME and self._state.slots_loading:
            await self._load_slots()
        return self._state

    def select_time(self, time: str) -> WizardState:
        return self.dispatch(TimeChosen(time))

    def update_details(
        self,
        name: str | None = None,
        email: str | None = None,
        message: str | None = None,
    ) -> WizardState:
        return self.dispatch(DetailsEdited(name=name, email=email, message=message))

    async def back(self) -> WizardState:
        previous = self._state
        self.dispatch(BackRequested())
        if previous.step == WizardStep.ENTERING_DETAILS and self._state.step == WizardStep.SELECTING_TIME:
            await self._load_slots()
        return self._state

    def book_another(self) -> WizardState:
        self._unwatch_slots()
        return self.dispatch(BookAnotherRequested())

    def reset(self) -> WizardState:
        self._unwatch_slots()
        self._state = WizardState.initial(self._today())
        for listener in list(self._listeners):
            listener(self._state)
        return self._state

    async def submit(self) -> WizardState:
        """
        Submit the current draft. Never raises for API failures: they are
        attached to the state and the wizard stays on the details step.
        """
        before = self._state
        self.dispatch(SubmitRequested())
        if not self._state.submitting or before.submitting:
            return self._state

        draft = self._state.draft

        if self._revalidate_slot and not await self._slot_still_available(draft):
            return self.dispatch(SubmitFailed(draft=draft, message=SLOT_TAKEN_MESSAGE))

        request = CreateAppointmentRequest(
            service_id=draft.service_id,
            date=draft.date.isoformat(),
            time=draft.time or "",
            notes=draft.message.strip() or None,
        )
        try:
            appointment = await self._appointments.create_appointment(request)
        except BookingApiError as e:
            return self.dispatch(SubmitFailed(draft=draft, message=user_message(e, CREATE_FAILED_MESSAGE)))

        return self.dispatch(SubmitSucceeded(draft=draft, appointment=appointment))

    async def _slot_still_available(self, draft: WizardDraft) -> bool:
        day = draft.date.isoformat()
        self._appointments.invalidate_slots(day, draft.service_id)
        try:
            slots = await self._appointments.available_slots(day, draft.service_id)
        except BookingApiError as e:
            self._logger.warning("Slot re-check failed, letting the backend decide", extra={"error": str(e)})
            return True
        return any(s.time == draft.time and s.available for s in slots)

    async def _load_slots(self) -> None:
        draft = self._state.draft
        self._watch_slots(draft.date, draft.service_id)
        try:
            slots = await self._appointments.available_slots(draft.date.isoformat(), draft.service_id)
        except BookingApiError as e:
            self.dispatch(
                SlotsFailed(
                    date=draft.date,
                    service_id=draft.service_id,
                    message=user_message(e, SLOTS_FAILED_MESSAGE),
                )
            )
            return
        self._apply_slots(draft.date, draft.service_id, slots)

    def _watch_slots(self, day: date, service_id: str | None) -> None:
        # A background revalidation of the shown day reaches the time step too.
        if self._watched == (day, service_id):
            return
        self._unwatch_slots()
        self._watched = (day, service_id)
        self._unwatch = self._appointments.watch_slots(
            day.isoformat(),
            service_id,
            lambda slots: self._apply_slots(day, service_id, slots),
        )

    def _unwatch_slots(self) -> None:
        if self._unwatch is not None:
            self._unwatch()
        self._watched = None
        self._unwatch = None

    def _apply_slots(self, day: date, service_id: str | None, slots: list[TimeSlot]) -> None:
        current = self._state
        if not current.slots_loading and current.slots == tuple(slots):
            return
        self.dispatch(SlotsLoaded(date=day, service_id=service_id, slots=tuple(slots)))
