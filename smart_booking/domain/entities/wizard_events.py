from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from smart_booking.domain.entities.appointment import Appointment
from smart_booking.domain.entities.time_slot import TimeSlot
from smart_booking.domain.entities.wizard_state import WizardDraft


@dataclass(frozen=True)
class ServiceChosen:
    service_id: str | None


@dataclass(frozen=True)
class DateChosen:
    date: date


@dataclass(frozen=True)
class SlotsLoaded:
    date: date
    service_id: str | None
    slots: tuple[TimeSlot, ...]


@dataclass(frozen=True)
class SlotsFailed:
    date: date
    service_id: str | None
    message: str


@dataclass(frozen=True)
class TimeChosen:
    time: str


@dataclass(frozen=True)
class DetailsEdited:
    name: str | None = None
    email: str | None = None
    message: str | None = None


@dataclass(frozen=True)
class SubmitRequested:
    pass


@dataclass(frozen=True)
class SubmitSucceeded:
    draft: WizardDraft
    appointment: Appointment


@dataclass(frozen=True)
class SubmitFailed:
    draft: WizardDraft
    message: str


@dataclass(frozen=True)
class BackRequested:
    pass


@dataclass(frozen=True)
class BookAnotherRequested:
    pass


WizardEvent = (
    ServiceChosen
    | DateChosen
    | SlotsLoaded
    | SlotsFailed
    | TimeChosen
    | DetailsEdited
    | SubmitRequested
    | SubmitSucceeded
    | SubmitFailed
    | BackRequested
    | BookAnotherRequested
)
