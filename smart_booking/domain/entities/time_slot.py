from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class TimeSlot:
    time: str  # HH:MM
    available: bool
    appointment_id: str | None = None

    @staticmethod
    def from_payload(payload: dict[str, Any]) -> "TimeSlot":
        appointment_id = payload.get("appointmentId")
        return TimeSlot(
            time=str(payload["time"]),
            available=bool(payload.get("available")),
            appointment_id=str(appointment_id) if appointment_id else None,
        )
