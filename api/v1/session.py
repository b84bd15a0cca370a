from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, status

from api.v1.deps import get_storage
from api.v1.schemas import CredentialsIn, TokenOut
from core.models.account import Account
from services.auth import check_password, create_token, hash_password
from services.storage import DataStorage

router = APIRouter()
_LOG = logging.getLogger(__name__)


# ───────────────────────── sign up ──────────────────────────
@router.post("/signup", response_model=TokenOut, status_code=status.HTTP_201_CREATED)
async def sign_up(
    body: CredentialsIn,
    storage: DataStorage = Depends(get_storage),
) -> TokenOut:
    salt, digest = hash_password(body.password)
    account = Account(
        email=body.email,
        user_id=str(uuid.uuid4()),
        salt=salt,
        password_hash=digest,
    )
    if not await storage.create_account(account):
        raise HTTPException(status_code=409, detail="Email already registered")
    _LOG.info("new account %s", account.user_id)
    return TokenOut(access_token=create_token(account.user_id), user_id=account.user_id)


# ───────────────────────── sign in ──────────────────────────
@router.post("", response_model=TokenOut, status_code=status.HTTP_201_CREATED)
async def sign_in(
    body: CredentialsIn,
    storage: DataStorage = Depends(get_storage),
) -> TokenOut:
    account = await storage.get_account(body.email)
    if account is None or not check_password(
        body.password, account.salt, account.password_hash
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return TokenOut(access_token=create_token(account.user_id), user_id=account.user_id)
