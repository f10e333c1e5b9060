"""Initial schema: users table

Revision ID: 001
Revises:
Create Date: 2025-01-01
"""

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import UUID

revision = "001"
down_revision = None
branch_labels = None
depends_on = None

user_role = sa.Enum("DEFAULT_ADMIN", "PLATFORM_ADMIN", "FUNDS_MANAGER", "AUTHOR", "BUYER", name="userrole")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("email", sa.String(255), unique=True),
        sa.Column("password_hash", sa.String(255)),
        sa.Column("wallet_address", sa.String(42), unique=True, nullable=False),
        sa.Column("role", user_role, nullable=False, server_default="BUYER"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("users")
    user_role.drop(op.get_bind(), checkfirst=True)
