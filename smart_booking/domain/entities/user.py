from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class User:
    id: str
    name: str
    email: str
    phone: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @staticmethod
    def from_payload(payload: dict[str, Any]) -> "User":
        return User(
            id=str(payload["id"]),
            name=str(payload.get("name") or ""),
            email=str(payload.get("email") or ""),
            phone=payload.get("phone"),
            created_at=payload.get("createdAt"),
            updated_at=payload.get("updatedAt"),
        )


@dataclass(frozen=True)
class UserUpdate:
    name: str | None = None
    email: str | None = None
    phone: str | None = None

    def to_payload(self) -> dict[str, Any]:
        fields = {"name": self.name, "email": self.email, "phone": self.phone}
        return {k: v for k, v in fields.items() if v is not None}


@dataclass(frozen=True)
class AuthResult:
    token: str
    user: User

    @staticmethod
    def from_payload(payload: dict[str, Any]) -> "AuthResult":
        return AuthResult(token=str(payload["token"]), user=User.from_payload(payload["user"]))
