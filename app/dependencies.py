from dataclasses import dataclass
from typing import Optional

import jwt
from fastapi import Depends, Header, HTTPException, Request

from app.auth.tokens import decode_access_token
from app.chain.base import BaseNetwork
from app.chain.executor import TransactionExecutor
from app.db.models import UserRole


@dataclass(frozen=True)
class CurrentUser:
    id: str
    email: Optional[str]
    role: str
    wallet_address: str


def get_current_user(authorization: Optional[str] = Header(None, alias="Authorization")) -> CurrentUser:
    if not authorization:
        raise HTTPException(status_code=401, detail="Access Denied. No token provided.")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise HTTPException(status_code=401, detail="Access Denied. No token provided.")
    try:
        claims = decode_access_token(token)
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=403, detail="Invalid or expired token.")
    return CurrentUser(
        id=claims["id"],
        email=claims.get("email"),
        role=claims["role"],
        wallet_address=claims["walletAddress"],
    )


def require_roles(*roles: UserRole):
    allowed = {r.value for r in roles}

    def checker(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role not in allowed:
            raise HTTPException(status_code=403, detail="Unauthorized access.")
        return user

    return checker


require_admin = require_roles(UserRole.DEFAULT_ADMIN, UserRole.PLATFORM_ADMIN)


def get_network(request: Request) -> BaseNetwork:
    return request.app.state.network


def get_executor(network: BaseNetwork = Depends(get_network)) -> TransactionExecutor:
    return TransactionExecutor(network)
