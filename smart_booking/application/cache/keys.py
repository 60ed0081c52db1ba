from __future__ import annotations

from typing import Any

CacheKey = tuple[Any, ...]

APPOINTMENTS = "appointments"
APPOINTMENT = "appointment"
SERVICES = "services"
SERVICE = "service"
USER = "user"
AVAILABLE_SLOTS = "available_slots"


class QueryKeys:
    """Structured cache keys: (resource class, optional id, optional filters)."""

    @staticmethod
    def appointments() -> CacheKey:
        return (APPOINTMENTS,)

    @staticmethod
    def appointment(appointment_id: str) -> CacheKey:
        return (APPOINTMENT, appointment_id)

    @staticmethod
    def services() -> CacheKey:
        return (SERVICES,)

    @staticmethod
    def service(service_id: str) -> CacheKey:
        return (SERVICE, service_id)

    @staticmethod
    def user() -> CacheKey:
        return (USER,)

    @staticmethod
    def available_slots(date: str, service_id: str | None = None) -> CacheKey:
        return (AVAILABLE_SLOTS, date, service_id)


def resource_of(key: CacheKey) -> str:
    return str(key[0])
