"""Identity request/response schemas."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

IdentityRole = Literal["member", "administrator"]


class Identity(BaseModel):
    """Authenticated caller, supplied per session by the identity provider."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str = Field(min_length=1)
    display_name: str = Field(min_length=1)
    role: IdentityRole = "member"
    group_label: str | None = None

    @property
    def is_administrator(self) -> bool:
        return self.role == "administrator"


class LoginRequest(BaseModel):
    """Demo email/password login payload."""

    email: str
    password: str = ""


class RegisterRequest(BaseModel):
    """Demo registration payload."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    password: str = ""
    group_label: str | None = None


class LoginResult(BaseModel):
    """Outcome of a login attempt: an identity or a user-facing error."""

    identity: Identity | None = None
    error: str | None = None
