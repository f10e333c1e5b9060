"""User store: registration and credential checks."""

import logging
from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.passwords import hash_password, verify_password
from app.chain.contracts import checksum
from app.db.models import REGISTRABLE_ROLES, User, UserRole
from app.errors import GatewayError, ValidationError

logger = logging.getLogger(__name__)


async def register_user(
    db: AsyncSession,
    wallet_address: str,
    role: str,
    email: Optional[str] = None,
    password: Optional[str] = None,
) -> User:
    """Create a user. Only non-admin roles may self-register; they all need a password."""
    try:
        user_role = UserRole(role)
    except ValueError:
        raise ValidationError("Invalid role.")
    if user_role not in REGISTRABLE_ROLES:
        raise ValidationError("Invalid role.")
    if not password:
        raise ValidationError("Password is required.")

    wallet = checksum(wallet_address, "walletAddress")
    conditions = [User.wallet_address == wallet]
    if email:
        conditions.append(User.email == email)
    existing = await db.execute(select(User).where(or_(*conditions)))
    if existing.scalars().first():
        raise GatewayError("Email or wallet address already registered", status_code=409)

    user = User(
        email=email,
        password_hash=hash_password(password),
        wallet_address=wallet,
        role=user_role,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        # concurrent registration of the same email or wallet
        await db.rollback()
        raise GatewayError("Email or wallet address already registered", status_code=409)
    await db.refresh(user)
    logger.info(f"Registered {user_role.value} user {user.id}")
    return user


async def authenticate(db: AsyncSession, identifier: str, password: Optional[str]) -> User:
    """Look a user up by email (identifier contains '@') or wallet address and check the password."""
    if "@" in identifier:
        query = select(User).where(User.email == identifier)
    else:
        if not identifier or not identifier.startswith("0x"):
            raise ValidationError("Invalid credentials.")
        query = select(User).where(User.wallet_address == checksum(identifier, "identifier"))

    user = (await db.execute(query)).scalar_one_or_none()
    if not user:
        raise ValidationError("Invalid credentials.")
    # Password-less accounts (seeded default admins) authenticate by wallet alone
    if user.password_hash and not (password and verify_password(password, user.password_hash)):
        raise ValidationError("Invalid credentials.")
    return user
