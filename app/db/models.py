import enum
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, String, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class UserRole(str, enum.Enum):
    DEFAULT_ADMIN = "DEFAULT_ADMIN"
    PLATFORM_ADMIN = "PLATFORM_ADMIN"
    FUNDS_MANAGER = "FUNDS_MANAGER"
    AUTHOR = "AUTHOR"
    BUYER = "BUYER"


# DEFAULT_ADMIN is seeded by operators, never self-registered
REGISTRABLE_ROLES = {UserRole.PLATFORM_ADMIN, UserRole.FUNDS_MANAGER, UserRole.AUTHOR, UserRole.BUYER}


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email: Mapped[str | None] = mapped_column(String(255), unique=True)
    password_hash: Mapped[str | None] = mapped_column(String(255))
    wallet_address: Mapped[str] = mapped_column(String(42), unique=True, nullable=False)
    role: Mapped[UserRole] = mapped_column(Enum(UserRole), default=UserRole.BUYER, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
