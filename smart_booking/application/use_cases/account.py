from __future__ import annotations

import logging

from smart_booking.application.cache.keys import QueryKeys
from smart_booking.application.cache.resource_cache import ResourceCache
from smart_booking.application.exceptions import BookingApiError, user_message
from smart_booking.application.ports.booking_api import BookingApiPort
from smart_booking.application.session import AuthSession
from smart_booking.domain.entities.user import User, UserUpdate


class AccountUseCase:
    def __init__(self, api: BookingApiPort, cache: ResourceCache, session: AuthSession) -> None:
        self._api = api
        self._cache = cache
        self._session = session
        self._logger = logging.getLogger(__name__)

    @property
    def is_authenticated(self) -> bool:
        return self._session.is_authenticated

    async def get_profile(self) -> User:
        return await self._cache.read(QueryKeys.user(), self._api.get_profile)

    async def update_profile(self, update: UserUpdate) -> User:
        try:
            user = await self._api.update_profile(update)
        except BookingApiError as e:
            self._logger.warning("Profile update failed", extra={"error": user_message(e, "Failed to update profile")})
            raise
        self._cache.write(QueryKeys.user(), user)
        self._logger.info("Profile Updated!")
        return user

    async def login(self, email: str, password: str) -> User:
        try:
            result = await self._api.login(email, password)
        except BookingApiError as e:
            self._logger.warning("Login failed", extra={"error": user_message(e, "Invalid email or password")})
            raise
        self._session.set_token(result.token)
        self._cache.write(QueryKeys.user(), result.user)
        self._logger.info("Welcome back!")
        return result.user

    async def register(self, name: str, email: str, password: str) -> User:
        try:
            result = await self._api.register(name, email, password)
        except BookingApiError as e:
            self._logger.warning("Registration failed", extra={"error": user_message(e, "Failed to create account")})
            raise
        self._session.set_token(result.token)
        self._cache.write(QueryKeys.user(), result.user)
        self._logger.info("Account Created!")
        return result.user

    def logout(self) -> None:
        self._session.clear()
        self._cache.clear()
        self._logger.info("Logged Out")
