from __future__ import annotations

from pydantic import BaseModel


class Account(BaseModel):
    """Sign-in record; the password is only ever stored as a PBKDF2 digest."""

    email: str
    user_id: str
    salt: str              # hex
    password_hash: str     # hex
