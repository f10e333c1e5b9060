import logging

import jwt
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.tokens import (
    create_access_token,
    create_refresh_token,
    decode_access_token,
    decode_refresh_token,
    user_claims,
)
from app.db.engine import get_db
from app.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RefreshTokenRequest,
    RegisterRequest,
    RegisterResponse,
    UserResponse,
    VerifyTokenRequest,
)
from app.services.users import authenticate, register_user

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=RegisterResponse, response_model_by_alias=True, status_code=201)
async def register(req: RegisterRequest, db: AsyncSession = Depends(get_db)):
    user = await register_user(db, req.wallet_address, req.role, email=req.email, password=req.password)
    claims = user_claims(user)
    return RegisterResponse(
        token=create_access_token(claims),
        refresh_token=create_refresh_token(claims),
        user=UserResponse(id=user.id, email=user.email, wallet_address=user.wallet_address, role=user.role.value),
    )


@router.post("/login", response_model=LoginResponse, response_model_by_alias=True)
async def login(req: LoginRequest, db: AsyncSession = Depends(get_db)):
    user = await authenticate(db, req.identifier, req.password)
    claims = user_claims(user)
    logger.info(f"User {user.id} logged in")
    return LoginResponse(access_token=create_access_token(claims), refresh_token=create_refresh_token(claims))


@router.post("/logout")
async def logout():
    # Tokens are stateless; the client discards them
    return {"message": "Logged out successfully"}


@router.post("/refresh-token")
async def refresh_token(req: RefreshTokenRequest):
    if not req.refresh_token:
        raise HTTPException(status_code=401, detail="Refresh Token is required")
    try:
        claims = decode_refresh_token(req.refresh_token)
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=403, detail="Invalid or expired Refresh Token")
    return {"accessToken": create_access_token(claims)}


@router.post("/verify-token")
async def verify_token(req: VerifyTokenRequest):
    if not req.token:
        raise HTTPException(status_code=401, detail="Token is required")
    try:
        claims = decode_access_token(req.token)
    except jwt.InvalidTokenError as e:
        return JSONResponse(status_code=403, content={"valid": False, "error": str(e)})
    user = {k: claims.get(k) for k in ("id", "email", "role", "walletAddress")}
    return {"valid": True, "user": user}
