from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class AppointmentStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    cancelled = "cancelled"
    completed = "completed"


@dataclass(frozen=True)
class Appointment:
    id: str
    user_id: str
    service_id: str
    date: str  # YYYY-MM-DD
    time: str  # HH:MM
    status: AppointmentStatus
    notes: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @staticmethod
    def from_payload(payload: dict[str, Any]) -> "Appointment":
        return Appointment(
            id=str(payload["id"]),
            user_id=str(payload.get("userId") or ""),
            service_id=str(payload.get("serviceId") or ""),
            date=str(payload["date"]),
            time=str(payload["time"]),
            status=AppointmentStatus(payload.get("status") or "pending"),
            notes=payload.get("notes"),
            created_at=payload.get("createdAt"),
            updated_at=payload.get("updatedAt"),
        )


@dataclass(frozen=True)
class CreateAppointmentRequest:
    date: str
    time: str
    service_id: str | None = None
    notes: str | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"date": self.date, "time": self.time}
        if self.service_id:
            payload["serviceId"] = self.service_id
        if self.notes:
            payload["notes"] = self.notes
        return payload


@dataclass(frozen=True)
class AppointmentUpdate:
    service_id: str | None = None
    date: str | None = None
    time: str | None = None
    notes: str | None = None

    def to_payload(self) -> dict[str, Any]:
        fields = {
            "serviceId": self.service_id,
            "date": self.date,
            "time": self.time,
            "notes": self.notes,
        }
        return {k: v for k, v in fields.items() if v is not None}
