from __future__ import annotations

import asyncio
from collections import Counter
from dataclasses import replace
from datetime import date
from zoneinfo import ZoneInfo

import pytest

from smart_booking.application.cache.resource_cache import ResourceCache
from smart_booking.application.cache.staleness import StalenessPolicy
from smart_booking.application.exceptions import ApiTransportError
from smart_booking.application.ports.booking_api import BookingApiPort
from smart_booking.application.use_cases.appointments import AppointmentsUseCase
from smart_booking.application.use_cases.booking_wizard import BookingWizardUseCase
from smart_booking.domain.entities.appointment import (
    Appointment,
    AppointmentStatus,
    AppointmentUpdate,
    CreateAppointmentRequest,
)
from smart_booking.domain.entities.service import Service
from smart_booking.domain.entities.time_slot import TimeSlot
from smart_booking.domain.entities.user import AuthResult, User, UserUpdate

# 2024-06-10 is a Monday.
TODAY = date(2024, 6, 10)


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeBookingApi(BookingApiPort):
    """In-process stand-in for the backend. Records calls; can be told to fail or to block."""

    def __init__(self) -> None:
        self.calls: Counter[str] = Counter()
        self.appointments: dict[str, Appointment] = {}
        self.slots: dict[str, list[TimeSlot]] = {}
        self.services = [
            Service(id="1", name="Consultation", description="", duration=30, price=0, category="consultation"),
        ]
        self.user = User(id="u1", name="Alice", email="alice@example.com")
        self.fail: dict[str, Exception] = {}
        self.gates: dict[str, asyncio.Event] = {}
        self.created: list[CreateAppointmentRequest] = []
        self._next_id = 1

    async def _enter(self, name: str) -> None:
        self.calls[name] += 1
        gate = self.gates.get(name)
        if gate is not None:
            await gate.wait()
        error = self.fail.get(name)
        if error is not None:
            raise error

    async def list_appointments(self) -> list[Appointment]:
        await self._enter("list_appointments")
        return list(self.appointments.values())

    async def get_appointment(self, appointment_id: str) -> Appointment:
        await self._enter("get_appointment")
        return self.appointments[appointment_id]

    async def create_appointment(self, request: CreateAppointmentRequest) -> Appointment:
        await self._enter("create_appointment")
        self.created.append(request)
        appointment = Appointment(
            id=f"a{self._next_id}",
            user_id=self.user.id,
            service_id=request.service_id or "",
            date=request.date,
            time=request.time,
            status=AppointmentStatus.pending,
            notes=request.notes,
        )
        self._next_id += 1
        self.appointments[appointment.id] = appointment
        return appointment

    async def update_appointment(self, appointment_id: str, update: AppointmentUpdate) -> Appointment:
        await self._enter("update_appointment")
        current = self.appointments[appointment_id]
        updated = replace(
            current,
            date=update.date or current.date,
            time=update.time or current.time,
            notes=update.notes if update.notes is not None else current.notes,
        )
        self.appointments[appointment_id] = updated
        return updated

    async def cancel_appointment(self, appointment_id: str) -> Appointment:
        await self._enter("cancel_appointment")
        cancelled = replace(self.appointments[appointment_id], status=AppointmentStatus.cancelled)
        self.appointments[appointment_id] = cancelled
        return cancelled

    async def get_available_slots(self, date: str, service_id: str | None = None) -> list[TimeSlot]:
        await self._enter("get_available_slots")
        return list(self.slots.get(date, []))

    async def list_services(self) -> list[Service]:
        await self._enter("list_services")
        return list(self.services)

    async def get_service(self, service_id: str) -> Service:
        await self._enter("get_service")
        return next(s for s in self.services if s.id == service_id)

    async def get_profile(self) -> User:
        await self._enter("get_profile")
        return self.user

    async def update_profile(self, update: UserUpdate) -> User:
        await self._enter("update_profile")
        self.user = replace(self.user, **update.to_payload())
        return self.user

    async def login(self, email: str, password: str) -> AuthResult:
        await self._enter("login")
        return AuthResult(token="token-1", user=self.user)

    async def register(self, name: str, email: str, password: str) -> AuthResult:
        await self._enter("register")
        self.user = replace(self.user, name=name, email=email)
        return AuthResult(token="token-2", user=self.user)

    async def health_check(self) -> bool:
        self.calls["health_check"] += 1
        return "health_check" not in self.fail


def network_down() -> ApiTransportError:
    return ApiTransportError("Network error: connection refused")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_api() -> FakeBookingApi:
    api = FakeBookingApi()
    api.slots["2024-06-10"] = [
        TimeSlot(time="09:30", available=True),
        TimeSlot(time="10:00", available=False, appointment_id="x9"),
        TimeSlot(time="10:30", available=True),
    ]
    return api


@pytest.fixture
def cache(clock: FakeClock) -> ResourceCache:
    policy = StalenessPolicy(
        {"appointments": 300.0, "services": 1800.0, "user": 600.0, "available_slots": 120.0}
    )
    return ResourceCache(policy=policy, clock=clock)


@pytest.fixture
def appointments(fake_api: FakeBookingApi, cache: ResourceCache) -> AppointmentsUseCase:
    return AppointmentsUseCase(api=fake_api, cache=cache)


@pytest.fixture
def wizard(appointments: AppointmentsUseCase) -> BookingWizardUseCase:
    return BookingWizardUseCase(
        appointments=appointments,
        timezone=ZoneInfo("UTC"),
        today=lambda: TODAY,
    )
