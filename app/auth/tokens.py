"""JWT access/refresh tokens (HS256)."""

from datetime import datetime, timedelta, timezone

import jwt

from app.config import settings
from app.db.models import User

JWT_ALGORITHM = "HS256"
ACCESS = "access"
REFRESH = "refresh"


def user_claims(user: User) -> dict:
    return {
        "id": str(user.id),
        "email": user.email,
        "role": user.role.value,
        "walletAddress": user.wallet_address,
    }


def _encode(claims: dict, token_type: str, secret: str, lifetime: timedelta) -> str:
    payload = {
        "id": claims["id"],
        "email": claims.get("email"),
        "role": claims["role"],
        "walletAddress": claims["walletAddress"],
        "type": token_type,
        "exp": datetime.now(timezone.utc) + lifetime,
    }
    return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)


def create_access_token(claims: dict) -> str:
    return _encode(
        claims, ACCESS, settings.jwt_secret, timedelta(minutes=settings.access_token_expire_minutes)
    )


def create_refresh_token(claims: dict) -> str:
    return _encode(
        claims, REFRESH, settings.refresh_token_secret, timedelta(days=settings.refresh_token_expire_days)
    )


def _decode(token: str, token_type: str, secret: str) -> dict:
    payload = jwt.decode(token, secret, algorithms=[JWT_ALGORITHM])
    if payload.get("type") != token_type:
        raise jwt.InvalidTokenError(f"Expected {token_type} token")
    return payload


def decode_access_token(token: str) -> dict:
    """Raises jwt.InvalidTokenError (incl. ExpiredSignatureError) on bad tokens."""
    return _decode(token, ACCESS, settings.jwt_secret)


def decode_refresh_token(token: str) -> dict:
    return _decode(token, REFRESH, settings.refresh_token_secret)
