from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class CredentialsIn(BaseModel):
    email: str = Field(..., max_length=254, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=6, max_length=128)

    @field_validator("email", mode="before")
    @classmethod
    def _normalise_email(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
