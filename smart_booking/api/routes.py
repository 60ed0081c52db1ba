from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Header, Query, Request

from smart_booking.api.schemas import (
    CreateAppointmentSchema,
    LoginSchema,
    RegisterSchema,
    UpdateAppointmentSchema,
    UpdateProfileSchema,
)
from smart_booking.infrastructure.store.dev_backend_store import DevBackendStore

router = APIRouter()
logger = logging.getLogger(__name__)


def ok(data: Any, message: str | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"success": True, "data": data}
    if message:
        body["message"] = message
    return body


def get_store(request: Request) -> DevBackendStore:
    return request.app.state.store


def current_user(
    store: DevBackendStore = Depends(get_store),
    authorization: str | None = Header(None),
) -> dict[str, Any]:
    token = None
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization[7:].strip()
    return store.user_for_token(token)


@router.get("/health")
def health() -> dict[str, Any]:
    return ok({"status": "ok"})


@router.get("/services")
def list_services(store: DevBackendStore = Depends(get_store)) -> dict[str, Any]:
    return ok(store.list_services())


@router.get("/services/{service_id}")
def get_service(service_id: str, store: DevBackendStore = Depends(get_store)) -> dict[str, Any]:
    return ok(store.get_service(service_id))


# Registered before /appointments/{appointment_id} so the literal path wins.
@router.get("/appointments/available-slots")
def available_slots(
    date: str = Query(...),
    service_id: str | None = Query(None, alias="serviceId"),
    store: DevBackendStore = Depends(get_store),
) -> dict[str, Any]:
    return ok(store.available_slots(date, service_id))


@router.get("/appointments")
def list_appointments(
    user: dict[str, Any] = Depends(current_user),
    store: DevBackendStore = Depends(get_store),
) -> dict[str, Any]:
    return ok(store.list_appointments(user["id"]))


@router.get("/appointments/{appointment_id}")
def get_appointment(
    appointment_id: str,
    user: dict[str, Any] = Depends(current_user),
    store: DevBackendStore = Depends(get_store),
) -> dict[str, Any]:
    return ok(store.get_appointment(user["id"], appointment_id))


@router.post("/appointments", status_code=201)
def create_appointment(
    payload: CreateAppointmentSchema,
    user: dict[str, Any] = Depends(current_user),
    store: DevBackendStore = Depends(get_store),
) -> dict[str, Any]:
    appointment = store.create_appointment(
        user["id"],
        date=payload.date,
        time=payload.time,
        service_id=payload.service_id,
        notes=payload.notes,
    )
    logger.info("Appointment booked", extra={"appointment_id": appointment["id"]})
    return ok(appointment, "Appointment created")


@router.put("/appointments/{appointment_id}")
def update_appointment(
    appointment_id: str,
    payload: UpdateAppointmentSchema,
    user: dict[str, Any] = Depends(current_user),
    store: DevBackendStore = Depends(get_store),
) -> dict[str, Any]:
    fields = payload.model_dump(by_alias=True, exclude_none=True)
    return ok(store.update_appointment(user["id"], appointment_id, fields), "Appointment updated")


@router.patch("/appointments/{appointment_id}/cancel")
def cancel_appointment(
    appointment_id: str,
    user: dict[str, Any] = Depends(current_user),
    store: DevBackendStore = Depends(get_store),
) -> dict[str, Any]:
    appointment = store.cancel_appointment(user["id"], appointment_id)
    logger.info("Appointment cancelled", extra={"appointment_id": appointment_id})
    return ok(appointment, "Appointment cancelled")


@router.post("/auth/login")
def login(payload: LoginSchema, store: DevBackendStore = Depends(get_store)) -> dict[str, Any]:
    return ok(store.login(payload.email, payload.password))


@router.post("/auth/register", status_code=201)
def register(payload: RegisterSchema, store: DevBackendStore = Depends(get_store)) -> dict[str, Any]:
    return ok(store.register(payload.name, payload.email, payload.password))


@router.get("/auth/profile")
def get_profile(user: dict[str, Any] = Depends(current_user)) -> dict[str, Any]:
    return ok(dict(user))


@router.put("/auth/profile")
def update_profile(
    payload: UpdateProfileSchema,
    user: dict[str, Any] = Depends(current_user),
    store: DevBackendStore = Depends(get_store),
) -> dict[str, Any]:
    return ok(store.update_profile(user["id"], payload.model_dump(exclude_none=True)))
