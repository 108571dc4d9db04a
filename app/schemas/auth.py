from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class TokenRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Missing or non-string token is treated like a malformed one (401), not a 422.
    id_token: str = Field(default="", alias="idToken")

    @field_validator("id_token", mode="before")
    @classmethod
    def non_string_to_empty(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""


class VerifiedUserOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    email: str
    email_verified: bool
    first_name: str
    last_name: str
    avatar: str
    subject_id: str
    provider: str


class VerifyOut(BaseModel):
    valid: bool = True
    user: VerifiedUserOut


class VerifyErrorOut(BaseModel):
    valid: bool = False
    error: str


class ConfigErrorOut(BaseModel):
    error: str


class LogoutOut(BaseModel):
    message: str


class HealthOut(BaseModel):
    status: str
    timestamp: datetime
