from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Service:
    id: str
    name: str
    description: str
    duration: int  # minutes
    price: float
    category: str

    @staticmethod
    def from_payload(payload: dict[str, Any]) -> "Service":
        duration = int(payload["duration"])
        price = float(payload.get("price") or 0)
        if duration <= 0:
            raise ValueError(f"Service duration must be positive, got {duration}")
        if price < 0:
            raise ValueError(f"Service price must be non-negative, got {price}")
        return Service(
            id=str(payload["id"]),
            name=str(payload.get("name") or ""),
            description=str(payload.get("description") or ""),
            duration=duration,
            price=price,
            category=str(payload.get("category") or ""),
        )
