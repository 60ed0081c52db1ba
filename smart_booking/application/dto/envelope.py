from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class ApiEnvelope(BaseModel):
    success: bool = True
    data: Any = None
    message: str | None = None
    error: str | None = None

    def detail(self) -> str | None:
        return self.message or self.error
