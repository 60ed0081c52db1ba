from __future__ import annotations

import json
import logging
import threading
from datetime import datetime
from pathlib import Path

from smart_booking.application.ports.token_store import TokenStorePort


class JsonTokenStore(TokenStorePort):
    def __init__(self, path: str = "./data/auth_token.json") -> None:
        self._path = Path(path)
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def load(self) -> str | None:
        """Read the stored token, or None if the file is missing or unreadable."""
        if not self._path.exists():
            return None
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            self._logger.warning("Token file unreadable, ignoring", extra={"error": str(e)})
            return None
        token = data.get("token") if isinstance(data, dict) else None
        return str(token) if token else None

    def save(self, token: str) -> None:
        """Write the token atomically."""
        data = {"token": token, "saved_at": datetime.now().isoformat()}
        with self._lock:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            temp_path = self._path.with_suffix(".json.tmp")
            try:
                with open(temp_path, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2)
                temp_path.replace(self._path)
            except Exception:
                if temp_path.exists():
                    temp_path.unlink()
                raise

    def clear(self) -> None:
        with self._lock:
            if self._path.exists():
                self._path.unlink()
