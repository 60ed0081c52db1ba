from __future__ import annotations

import logging

from smart_booking.application.ports.token_store import TokenStorePort


class AuthSession:
    """
    Holds the single auth token for the process.

    Lifecycle: absent until login/register succeeds, then set; cleared on
    logout or when any request comes back 401. The token store keeps it
    across restarts.
    """

    def __init__(self, store: TokenStorePort) -> None:
        self._store = store
        self._token = store.load()
        self._logger = logging.getLogger(__name__)

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return bool(self._token)

    def set_token(self, token: str) -> None:
        self._token = token
        self._store.save(token)
        self._logger.info("Auth token stored")

    def clear(self) -> None:
        if self._token is None:
            return
        self._token = None
        self._store.clear()
        self._logger.info("Auth token cleared")
