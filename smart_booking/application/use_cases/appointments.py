from __future__ import annotations

import logging
from typing import Callable

from smart_booking.application.cache.keys import AVAILABLE_SLOTS, CacheKey, QueryKeys
from smart_booking.application.cache.resource_cache import CacheEntry, ResourceCache
from smart_booking.application.exceptions import BookingApiError, user_message
from smart_booking.application.ports.booking_api import BookingApiPort
from smart_booking.domain.entities.appointment import Appointment, AppointmentUpdate, CreateAppointmentRequest
from smart_booking.domain.entities.time_slot import TimeSlot


class AppointmentsUseCase:
    """Cached reads and write-through mutations for appointments and slot availability."""

    def __init__(self, api: BookingApiPort, cache: ResourceCache) -> None:
        self._api = api
        self._cache = cache
        self._logger = logging.getLogger(__name__)

    async def list_appointments(self) -> list[Appointment]:
        return await self._cache.read(QueryKeys.appointments(), self._api.list_appointments)

    async def get_appointment(self, appointment_id: str) -> Appointment:
        return await self._cache.read(
            QueryKeys.appointment(appointment_id),
            lambda: self._api.get_appointment(appointment_id),
        )

    async def available_slots(self, date: str, service_id: str | None = None) -> list[TimeSlot]:
        return await self._cache.read(
            QueryKeys.available_slots(date, service_id),
            lambda: self._api.get_available_slots(date, service_id),
        )

    def invalidate_slots(self, date: str, service_id: str | None = None) -> None:
        self._cache.invalidate(QueryKeys.available_slots(date, service_id))

    def watch_slots(
        self,
        date: str,
        service_id: str | None,
        on_slots: Callable[[list[TimeSlot]], None],
    ) -> Callable[[], None]:
        """Call `on_slots` whenever fresh availability for the date lands in the cache."""

        def forward(key: CacheKey, entry: CacheEntry) -> None:
            if entry.has_value and not entry.invalidated and entry.error is None:
                on_slots(entry.value)

        return self._cache.subscribe(QueryKeys.available_slots(date, service_id), forward)

    async def create_appointment(self, request: CreateAppointmentRequest) -> Appointment:
        try:
            appointment = await self._api.create_appointment(request)
        except BookingApiError as e:
            self._logger.warning(
                "Create appointment failed",
                extra={"error": user_message(e, "Failed to create appointment")},
            )
            raise

        self._apply(appointment)
        self._logger.info("Appointment Created!", extra={"appointment_id": appointment.id})
        return appointment

    async def update_appointment(self, appointment_id: str, update: AppointmentUpdate) -> Appointment:
        try:
            appointment = await self._api.update_appointment(appointment_id, update)
        except BookingApiError as e:
            self._logger.warning(
                "Update appointment failed",
                extra={"appointment_id": appointment_id, "error": user_message(e, "Failed to update appointment")},
            )
            raise

        self._apply(appointment)
        self._logger.info("Appointment Updated!", extra={"appointment_id": appointment.id})
        return appointment

    async def cancel_appointment(self, appointment_id: str) -> Appointment:
        try:
            appointment = await self._api.cancel_appointment(appointment_id)
        except BookingApiError as e:
            self._logger.warning(
                "Cancel appointment failed",
                extra={"appointment_id": appointment_id, "error": user_message(e, "Failed to cancel appointment")},
            )
            raise

        self._apply(appointment)
        self._logger.info("Appointment Cancelled", extra={"appointment_id": appointment.id})
        return appointment

    def _apply(self, appointment: Appointment) -> None:
        # Entity key gets the authoritative copy; list and availability refetch on next read.
        self._cache.write(QueryKeys.appointment(appointment.id), appointment)
        self._cache.invalidate(QueryKeys.appointments())
        self._cache.invalidate_prefix(AVAILABLE_SLOTS)
