from __future__ import annotations

import logging
from typing import Any, Callable, TypeVar

import httpx
from pydantic import ValidationError

from smart_booking.application.dto.envelope import ApiEnvelope
from smart_booking.application.exceptions import (
    ApiContractError,
    ApiRequestError,
    ApiServerError,
    ApiTransportError,
    ApiUnauthorizedError,
)
from smart_booking.application.ports.booking_api import BookingApiPort
from smart_booking.application.session import AuthSession
from smart_booking.core.config import settings
from smart_booking.domain.entities.appointment import Appointment, AppointmentUpdate, CreateAppointmentRequest
from smart_booking.domain.entities.service import Service
from smart_booking.domain.entities.time_slot import TimeSlot
from smart_booking.domain.entities.user import AuthResult, User, UserUpdate

T = TypeVar("T")

APPOINTMENTS = "/appointments"
AVAILABLE_SLOTS = "/appointments/available-slots"
SERVICES = "/services"
LOGIN = "/auth/login"
REGISTER = "/auth/register"
PROFILE = "/auth/profile"
HEALTH = "/health"


def appointment_path(appointment_id: str) -> str:
    return f"{APPOINTMENTS}/{appointment_id}"


def service_path(service_id: str) -> str:
    return f"{SERVICES}/{service_id}"


class BookingApiClient(BookingApiPort):
    """
    httpx-backed adapter implementing BookingApiPort.

    Contract guarantees:
    - every response body is parsed as ApiEnvelope and `data` is unwrapped
    - the session token, when present, is sent as a bearer credential
    - a 401 from any endpoint clears the session before raising
    - Raises:
        ApiTransportError: connection failures and timeouts
        ApiUnauthorizedError: 401
        ApiRequestError: other 4xx, with the server message
        ApiServerError: 5xx
        ApiContractError: malformed envelope or payload
    """

    def __init__(
        self,
        session: AuthSession,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._session = session
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.API_BASE_URL,
            timeout=timeout if timeout is not None else settings.REQUEST_TIMEOUT_SECONDS,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )
        self._logger = logging.getLogger(__name__)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "BookingApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def list_appointments(self) -> list[Appointment]:
        data = await self._request("GET", APPOINTMENTS)
        return _parse_list(data, Appointment.from_payload, what="appointments")

    async def get_appointment(self, appointment_id: str) -> Appointment:
        data = await self._request("GET", appointment_path(appointment_id))
        return _parse_one(data, Appointment.from_payload, what="appointment")

    async def create_appointment(self, request: CreateAppointmentRequest) -> Appointment:
        data = await self._request("POST", APPOINTMENTS, json=request.to_payload())
        appointment = _parse_one(data, Appointment.from_payload, what="appointment")
        self._logger.info("Appointment created", extra={"appointment_id": appointment.id})
        return appointment

    async def update_appointment(self, appointment_id: str, update: AppointmentUpdate) -> Appointment:
        data = await self._request("PUT", appointment_path(appointment_id), json=update.to_payload())
        return _parse_one(data, Appointment.from_payload, what="appointment")

    async def cancel_appointment(self, appointment_id: str) -> Appointment:
        data = await self._request("PATCH", f"{appointment_path(appointment_id)}/cancel")
        appointment = _parse_one(data, Appointment.from_payload, what="appointment")
        self._logger.info("Appointment cancelled", extra={"appointment_id": appointment.id})
        return appointment

    async def get_available_slots(self, date: str, service_id: str | None = None) -> list[TimeSlot]:
        params = {"date": date}
        if service_id:
            params["serviceId"] = service_id
        data = await self._request("GET", AVAILABLE_SLOTS, params=params)
        return _parse_list(data, TimeSlot.from_payload, what="available slots")

    async def list_services(self) -> list[Service]:
        data = await self._request("GET", SERVICES)
        return _parse_list(data, Service.from_payload, what="services")

    async def get_service(self, service_id: str) -> Service:
        data = await self._request("GET", service_path(service_id))
        return _parse_one(data, Service.from_payload, what="service")

    async def get_profile(self) -> User:
        data = await self._request("GET", PROFILE)
        return _parse_one(data, User.from_payload, what="profile")

    async def update_profile(self, update: UserUpdate) -> User:
        data = await self._request("PUT", PROFILE, json=update.to_payload())
        return _parse_one(data, User.from_payload, what="profile")

    async def login(self, email: str, password: str) -> AuthResult:
        data = await self._request("POST", LOGIN, json={"email": email, "password": password})
        return _parse_one(data, AuthResult.from_payload, what="login")

    async def register(self, name: str, email: str, password: str) -> AuthResult:
        data = await self._request(
            "POST",
            REGISTER,
            json={"name": name, "email": email, "password": password},
        )
        return _parse_one(data, AuthResult.from_payload, what="register")

    async def health_check(self) -> bool:
        try:
            response = await self._client.get(HEALTH)
        except httpx.HTTPError as e:
            self._logger.error("Health check failed", extra={"error": str(e)})
            return False
        if not response.is_success:
            self._logger.error("Health check failed", extra={"status": response.status_code})
            return False
        return True

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
    ) -> Any:
        headers = {}
        if self._session.token:
            headers["Authorization"] = f"Bearer {self._session.token}"

        try:
            response = await self._client.request(method, path, json=json, params=params, headers=headers)
        except httpx.TimeoutException as e:
            self._logger.error("Request timed out", extra={"method": method, "path": path, "error": str(e)})
            raise ApiTransportError("Request timed out") from e
        except httpx.HTTPError as e:
            self._logger.error("Request failed", extra={"method": method, "path": path, "error": str(e)})
            raise ApiTransportError(f"Network error: {e}") from e

        envelope = _read_envelope(response)
        if response.is_success:
            if envelope is None:
                raise ApiContractError(f"{method} {path}: response is not a JSON envelope", response.status_code)
            if not envelope.success:
                detail = envelope.detail()
                raise ApiRequestError(detail or "Request rejected", response.status_code, detail)
            self._logger.debug("Request ok", extra={"method": method, "path": path, "status": response.status_code})
            return envelope.data

        detail = envelope.detail() if envelope else None
        self._logger.error(
            "API error",
            extra={"method": method, "path": path, "status": response.status_code, "error": detail},
        )

        if response.status_code == 401:
            self._session.clear()
            raise ApiUnauthorizedError(detail or "Unauthorized", 401, detail)
        if response.status_code >= 500:
            raise ApiServerError(detail or "Server error", response.status_code, detail)
        raise ApiRequestError(detail or "Request rejected", response.status_code, detail)


def _read_envelope(response: httpx.Response) -> ApiEnvelope | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    try:
        return ApiEnvelope.model_validate(body)
    except ValidationError:
        return None


def _parse_one(data: Any, parse: Callable[[dict[str, Any]], T], what: str) -> T:
    if not isinstance(data, dict):
        raise ApiContractError(f"{what}: expected an object in 'data'.")
    try:
        return parse(data)
    except (KeyError, TypeError, ValueError) as e:
        raise ApiContractError(f"{what}: {e}") from e


def _parse_list(data: Any, parse: Callable[[dict[str, Any]], T], what: str) -> list[T]:
    if not isinstance(data, list):
        raise ApiContractError(f"{what}: expected a list in 'data'.")
    return [_parse_one(item, parse, what) for item in data]
