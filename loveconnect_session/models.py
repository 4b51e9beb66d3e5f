from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class Identity(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str = Field(min_length=1)
    name: str
    email: str
    avatar: Optional[str] = None
    # pairing: заполняет сервер, частично заполненные поля допустимы
    partner_id: Optional[str] = None
    partner_name: Optional[str] = None
    partner_email: Optional[str] = None
    partner_code: Optional[str] = None
    is_paired: Optional[bool] = None

    def to_public(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class SessionState(BaseModel):
    model_config = ConfigDict(frozen=True)

    identity: Optional[Identity] = None
    authenticated: bool = False

    @model_validator(mode="after")
    def _check_consistent(self) -> "SessionState":
        if self.authenticated != (self.identity is not None):
            raise ValueError("authenticated must be set exactly when identity is present")
        return self

    @classmethod
    def unauthenticated(cls) -> "SessionState":
        return cls()

    @classmethod
    def authenticated_as(cls, identity: Identity) -> "SessionState":
        return cls(identity=identity, authenticated=True)

    def to_public(self) -> dict:
        return {
            "identity": self.identity.to_public() if self.identity else None,
            "authenticated": self.authenticated,
        }


@dataclass(frozen=True)
class AuthResult:
    ok: bool
    status_code: Optional[int] = None
    reason: Optional[str] = None
    identity: Optional[Identity] = None

    @classmethod
    def success(cls, status_code: int, identity: Optional[Identity] = None) -> "AuthResult":
        return cls(ok=True, status_code=status_code, identity=identity)

    @classmethod
    def failure(cls, reason: str, status_code: Optional[int] = None) -> "AuthResult":
        return cls(ok=False, status_code=status_code, reason=reason)
