from __future__ import annotations

from smart_booking.application.ports.token_store import TokenStorePort


class MemoryTokenStore(TokenStorePort):
    def __init__(self, token: str | None = None) -> None:
        self._token = token

    def load(self) -> str | None:
        return self._token

    def save(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None
