from __future__ import annotations

import logging
from dataclasses import dataclass
from zoneinfo import ZoneInfo

import httpx

from smart_booking.application.cache.resource_cache import ResourceCache
from smart_booking.application.cache.staleness import StalenessPolicy
from smart_booking.application.ports.token_store import TokenStorePort
from smart_booking.application.session import AuthSession
from smart_booking.application.use_cases.account import AccountUseCase
from smart_booking.application.use_cases.appointments import AppointmentsUseCase
from smart_booking.application.use_cases.booking_wizard import BookingWizardUseCase
from smart_booking.application.use_cases.catalog import CatalogUseCase
from smart_booking.core.config import Settings, settings as default_settings
from smart_booking.infrastructure.http.api_client import BookingApiClient
from smart_booking.infrastructure.store.json_store import JsonTokenStore
from smart_booking.infrastructure.store.memory_store import MemoryTokenStore


@dataclass
class Container:
    session: AuthSession
    api: BookingApiClient
    cache: ResourceCache
    appointments: AppointmentsUseCase
    catalog: CatalogUseCase
    account: AccountUseCase
    wizard: BookingWizardUseCase

    async def aclose(self) -> None:
        await self.api.aclose()


def get_token_store(config: Settings) -> TokenStorePort:
    if config.ENV.lower() == "test":
        return MemoryTokenStore()
    return JsonTokenStore(path=config.TOKEN_STORE_PATH)


def get_business_timezone(config: Settings) -> ZoneInfo:
    try:
        return ZoneInfo(config.BUSINESS_TIMEZONE)
    except Exception as e:
        logging.getLogger(__name__).warning(
            "Unknown BUSINESS_TIMEZONE, falling back to UTC",
            extra={"error": str(e)},
        )
        return ZoneInfo("UTC")


def build_container(
    config: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    token_store: TokenStorePort | None = None,
) -> Container:
    config = config or default_settings
    session = AuthSession(token_store or get_token_store(config))
    api = BookingApiClient(
        session=session,
        base_url=config.API_BASE_URL,
        timeout=config.REQUEST_TIMEOUT_SECONDS,
        transport=transport,
    )
    cache = ResourceCache(policy=StalenessPolicy.from_settings(config))
    appointments = AppointmentsUseCase(api=api, cache=cache)
    return Container(
        session=session,
        api=api,
        cache=cache,
        appointments=appointments,
        catalog=CatalogUseCase(api=api, cache=cache),
        account=AccountUseCase(api=api, cache=cache, session=session),
        wizard=BookingWizardUseCase(
            appointments=appointments,
            timezone=get_business_timezone(config),
            disabled_weekdays=frozenset(config.DISABLED_WEEKDAYS),
            revalidate_slot=config.WIZARD_REVALIDATE_SLOT,
        ),
    )
