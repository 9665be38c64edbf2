"""Administrator model definition using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import Column, DateTime, String, Table, Uuid, func

from cafe_backend.models.base import metadata

admin_users = Table(
    "admin_users",
    metadata,
    Column("id", Uuid(as_uuid=True), primary_key=True, default=uuid4),
    # Login identity
    Column("username", String(50), nullable=False, unique=True, index=True),
    Column("email", String(100), nullable=False, unique=True),
    Column("password_hash", String(255), nullable=False),
    # Profile
    Column("first_name", String(50), nullable=False),
    Column("last_name", String(50), nullable=False),
    # Audit
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("last_login", DateTime(timezone=True)),
)
