from __future__ import annotations

from smart_booking.application.cache.keys import QueryKeys
from smart_booking.application.cache.resource_cache import ResourceCache
from smart_booking.application.ports.booking_api import BookingApiPort
from smart_booking.domain.entities.service import Service


class CatalogUseCase:
    def __init__(self, api: BookingApiPort, cache: ResourceCache) -> None:
        self._api = api
        self._cache = cache

    async def list_services(self) -> list[Service]:
        return await self._cache.read(QueryKeys.services(), self._api.list_services)

    async def get_service(self, service_id: str) -> Service:
        return await self._cache.read(
            QueryKeys.service(service_id),
            lambda: self._api.get_service(service_id),
        )
