from __future__ import annotations

from smart_booking.application.cache.keys import (
    APPOINTMENTS,
    AVAILABLE_SLOTS,
    SERVICES,
    USER,
    CacheKey,
    resource_of,
)
from smart_booking.core.config import Settings


class StalenessPolicy:
    """Seconds a cached value stays fresh, per resource class. Zero means always revalidate."""

    def __init__(self, windows: dict[str, float] | None = None, default: float = 0.0) -> None:
        self._windows = dict(windows or {})
        self._default = default

    def window_for(self, key: CacheKey) -> float:
        return self._windows.get(resource_of(key), self._default)

    @classmethod
    def from_settings(cls, settings: Settings) -> "StalenessPolicy":
        return cls(
            {
                APPOINTMENTS: settings.STALE_APPOINTMENTS_SECONDS,
                SERVICES: settings.STALE_SERVICES_SECONDS,
                USER: settings.STALE_USER_SECONDS,
                AVAILABLE_SLOTS: settings.STALE_SLOTS_SECONDS,
            }
        )
