from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum

from smart_booking.domain.entities.appointment import Appointment
from smart_booking.domain.entities.time_slot import TimeSlot


class WizardStep(str, Enum):
    SELECTING_DATE = "selecting_date"
    SELECTING_TIME = "selecting_time"
    ENTERING_DETAILS = "entering_details"
    CONFIRMED = "confirmed"


@dataclass(frozen=True)
class WizardDraft:
    date: date
    time: str | None = None
    service_id: str | None = None
    name: str = ""
    email: str = ""
    message: str = ""


@dataclass(frozen=True)
class WizardError:
    message: str
    retryable: bool = True


@dataclass(frozen=True)
class Confirmation:
    draft: WizardDraft
    appointment: Appointment


@dataclass(frozen=True)
class WizardState:
    step: WizardStep
    draft: WizardDraft
    slots: tuple[TimeSlot, ...] = ()
    slots_loading: bool = False
    submitting: bool = False
    error: WizardError | None = None
    confirmation: Confirmation | None = None

    @staticmethod
    def initial(today: date) -> "WizardState":
        return WizardState(step=WizardStep.SELECTING_DATE, draft=WizardDraft(date=today))
