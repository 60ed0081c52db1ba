from __future__ import annotations

import secrets
import uuid
from datetime import datetime, timezone
from typing import Any

SLOT_TIMES = tuple(f"{hour:02d}:{minute:02d}" for hour in range(9, 17) for minute in (0, 30))

SEED_SERVICES: tuple[dict[str, Any], ...] = (
    {
        "id": "1",
        "name": "Initial Consultation",
        "description": "A 30 minute call to discuss your goals.",
        "duration": 30,
        "price": 0,
        "category": "consultation",
    },
    {
        "id": "2",
        "name": "Strategy Session",
        "description": "A focused working session on a single topic.",
        "duration": 60,
        "price": 120,
        "category": "session",
    },
    {
        "id": "3",
        "name": "Follow-up",
        "description": "Review progress since the last session.",
        "duration": 30,
        "price": 60,
        "category": "session",
    },
)

DEMO_USER_EMAIL = "demo@example.com"
DEMO_USER_PASSWORD = "password"

# pending -> confirmed/cancelled, confirmed -> completed/cancelled
ALLOWED_STATUS_CHANGES = {
    "pending": {"confirmed", "cancelled"},
    "confirmed": {"completed", "cancelled"},
    "cancelled": set(),
    "completed": set(),
}


class DevBackendError(Exception):
    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class DevBackendStore:
    """In-memory data behind the development backend. Slots come from a fixed grid."""

    def __init__(self, seed_demo_user: bool = True) -> None:
        self._services: dict[str, dict[str, Any]] = {s["id"]: dict(s) for s in SEED_SERVICES}
        self._users: dict[str, dict[str, Any]] = {}
        self._passwords: dict[str, str] = {}
        self._tokens: dict[str, str] = {}
        self._appointments: dict[str, dict[str, Any]] = {}
        if seed_demo_user:
            self.register("Demo User", DEMO_USER_EMAIL, DEMO_USER_PASSWORD)

    # auth

    def register(self, name: str, email: str, password: str) -> dict[str, Any]:
        if not name.strip() or not email.strip() or not password:
            raise DevBackendError(400, "Name, email and password are required")
        if self._find_user_by_email(email):
            raise DevBackendError(409, "An account with this email already exists")
        now = _now()
        user = {
            "id": uuid.uuid4().hex[:12],
            "name": name.strip(),
            "email": email.strip().lower(),
            "phone": None,
            "createdAt": now,
            "updatedAt": now,
        }
        self._users[user["id"]] = user
        self._passwords[user["id"]] = password
        return {"token": self._issue_token(user["id"]), "user": dict(user)}

    def login(self, email: str, password: str) -> dict[str, Any]:
        user = self._find_user_by_email(email)
        if user is None or self._passwords.get(user["id"]) != password:
            raise DevBackendError(401, "Invalid email or password")
        return {"token": self._issue_token(user["id"]), "user": dict(user)}

    def user_for_token(self, token: str | None) -> dict[str, Any]:
        user_id = self._tokens.get(token or "")
        if user_id is None or user_id not in self._users:
            raise DevBackendError(401, "Authentication required")
        return self._users[user_id]

    def update_profile(self, user_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        user = self._users[user_id]
        email = fields.get("email")
        if email:
            other = self._find_user_by_email(email)
            if other is not None and other["id"] != user_id:
                raise DevBackendError(409, "An account with this email already exists")
            fields = {**fields, "email": email.strip().lower()}
        user.update({k: v for k, v in fields.items() if k in ("name", "email", "phone")})
        user["updatedAt"] = _now()
        return dict(user)

    # services

    def list_services(self) -> list[dict[str, Any]]:
        return [dict(s) for s in self._services.values()]

    def get_service(self, service_id: str) -> dict[str, Any]:
        service = self._services.get(service_id)
        if service is None:
            raise DevBackendError(404, "Service not found")
        return dict(service)

    # appointments

    def list_appointments(self, user_id: str) -> list[dict[str, Any]]:
        return [dict(a) for a in self._appointments.values() if a["userId"] == user_id]

    def get_appointment(self, user_id: str, appointment_id: str) -> dict[str, Any]:
        return dict(self._owned(user_id, appointment_id))

    def create_appointment(
        self,
        user_id: str,
        date: str,
        time: str,
        service_id: str | None,
        notes: str | None,
    ) -> dict[str, Any]:
        if service_id is not None:
            self.get_service(service_id)
        self._check_slot(date, time)
        now = _now()
        appointment = {
            "id": uuid.uuid4().hex[:12],
            "userId": user_id,
            "serviceId": service_id or "",
            "date": date,
            "time": time,
            "status": "pending",
            "notes": notes,
            "createdAt": now,
            "updatedAt": now,
        }
        self._appointments[appointment["id"]] = appointment
        return dict(appointment)

    def update_appointment(self, user_id: str, appointment_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        appointment = self._owned(user_id, appointment_id)
        if appointment["status"] in ("cancelled", "completed"):
            raise DevBackendError(400, f"A {appointment['status']} appointment cannot be changed")
        if fields.get("serviceId") is not None:
            self.get_service(fields["serviceId"])
        date = fields.get("date") or appointment["date"]
        time = fields.get("time") or appointment["time"]
        if (date, time) != (appointment["date"], appointment["time"]):
            self._check_slot(date, time, ignore_id=appointment_id)
        appointment.update({k: v for k, v in fields.items() if k in ("serviceId", "date", "time", "notes")})
        appointment["updatedAt"] = _now()
        return dict(appointment)

    def cancel_appointment(self, user_id: str, appointment_id: str) -> dict[str, Any]:
        appointment = self._owned(user_id, appointment_id)
        if "cancelled" not in ALLOWED_STATUS_CHANGES[appointment["status"]]:
            raise DevBackendError(400, f"A {appointment['status']} appointment cannot be cancelled")
        appointment["status"] = "cancelled"
        appointment["updatedAt"] = _now()
        return dict(appointment)

    def available_slots(self, date: str, service_id: str | None = None) -> list[dict[str, Any]]:
        _parse_date(date)
        if service_id is not None:
            self.get_service(service_id)
        taken = {a["time"]: a["id"] for a in self._active_on(date)}
        slots = []
        for time in SLOT_TIMES:
            slot: dict[str, Any] = {"time": time, "available": time not in taken}
            if time in taken:
                slot["appointmentId"] = taken[time]
            slots.append(slot)
        return slots

    def _check_slot(self, date: str, time: str, ignore_id: str | None = None) -> None:
        _parse_date(date)
        if time not in SLOT_TIMES:
            raise DevBackendError(400, f"{time} is not a bookable time")
        for other in self._active_on(date):
            if other["time"] == time and other["id"] != ignore_id:
                raise DevBackendError(409, "That time slot is no longer available")

    def _active_on(self, date: str) -> list[dict[str, Any]]:
        return [a for a in self._appointments.values() if a["date"] == date and a["status"] != "cancelled"]

    def _owned(self, user_id: str, appointment_id: str) -> dict[str, Any]:
        appointment = self._appointments.get(appointment_id)
        if appointment is None or appointment["userId"] != user_id:
            raise DevBackendError(404, "Appointment not found")
        return appointment

    def _find_user_by_email(self, email: str) -> dict[str, Any] | None:
        normalized = email.strip().lower()
        return next((u for u in self._users.values() if u["email"] == normalized), None)

    def _issue_token(self, user_id: str) -> str:
        token = secrets.token_urlsafe(24)
        self._tokens[token] = user_id
        return token


def _parse_date(value: str) -> None:
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        raise DevBackendError(400, f"Invalid date: {value}") from None
