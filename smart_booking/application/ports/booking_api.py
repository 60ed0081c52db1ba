from __future__ import annotations

from abc import ABC, abstractmethod

from smart_booking.domain.entities.appointment import Appointment, AppointmentUpdate, CreateAppointmentRequest
from smart_booking.domain.entities.service import Service
from smart_booking.domain.entities.time_slot import TimeSlot
from smart_booking.domain.entities.user import AuthResult, User, UserUpdate


class BookingApiPort(ABC):
    @abstractmethod
    async def list_appointments(self) -> list[Appointment]:
        raise NotImplementedError

    @abstractmethod
    async def get_appointment(self, appointment_id: str) -> Appointment:
        raise NotImplementedError

    @abstractmethod
    async def create_appointment(self, request: CreateAppointmentRequest) -> Appointment:
        raise NotImplementedError

    @abstractmethod
    async def update_appointment(self, appointment_id: str, update: AppointmentUpdate) -> Appointment:
        raise NotImplementedError

    @abstractmethod
    async def cancel_appointment(self, appointment_id: str) -> Appointment:
        """Request cancellation. Returns the backend's appointment with status=cancelled."""
        raise NotImplementedError

    @abstractmethod
    async def get_available_slots(self, date: str, service_id: str | None = None) -> list[TimeSlot]:
        raise NotImplementedError

    @abstractmethod
    async def list_services(self) -> list[Service]:
        raise NotImplementedError

    @abstractmethod
    async def get_service(self, service_id: str) -> Service:
        raise NotImplementedError

    @abstractmethod
    async def get_profile(self) -> User:
        raise NotImplementedError

    @abstractmethod
    async def update_profile(self, update: UserUpdate) -> User:
        raise NotImplementedError

    @abstractmethod
    async def login(self, email: str, password: str) -> AuthResult:
        raise NotImplementedError

    @abstractmethod
    async def register(self, name: str, email: str, password: str) -> AuthResult:
        raise NotImplementedError

    @abstractmethod
    async def health_check(self) -> bool:
        """Return True on any 2xx from /health. Never raises."""
        raise NotImplementedError
