# api/v1/deps.py
from __future__ import annotations

from datetime import date

import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.calorie_plan import utc_today
from services.auth import verify_token
from services.storage import DataStorage

_bearer = HTTPBearer(auto_error=False)


def get_storage(request: Request) -> DataStorage:
    """The backend built once in the app lifespan."""
    return request.app.state.storage


def get_today() -> date:
    return utc_today()


def current_user(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> str:
    if creds is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return verify_token(creds.credentials)
    except (jwt.PyJWTError, KeyError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
