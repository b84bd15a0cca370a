import hashlib
import hmac
import secrets
from datetime import datetime, timedelta, timezone

import jwt

from config import settings

_ALGO = "HS256"
_PBKDF2_ROUNDS = 200_000

def create_token(user_id: str, ttl_minutes: int | None = None) -> str:
    ttl = ttl_minutes if ttl_minutes is not None else settings.token_ttl_minutes
    exp = datetime.now(timezone.utc) + timedelta(minutes=ttl)
    payload = {"sub": user_id, "exp": exp}
    return jwt.encode(payload, settings.jwt_secret, algorithm=_ALGO)

def verify_token(token: str) -> str:
    """Return the user id carried by `token`; raises jwt.PyJWTError if invalid."""
    payload = jwt.decode(token, settings.jwt_secret, algorithms=[_ALGO])
    return payload["sub"]

# ───────── passwords ──────────────────────────────────────────────────
def hash_password(password: str, salt: str | None = None) -> tuple[str, str]:
    """(salt_hex, digest_hex) for `password`; a fresh salt unless one is given."""
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode(), bytes.fromhex(salt), _PBKDF2_ROUNDS
    )
    return salt, digest.hex()

def check_password(password: str, salt: str, password_hash: str) -> bool:
    _, digest = hash_password(password, salt)
    return hmac.compare_digest(digest, password_hash)
