"""Staff member model definition using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    String,
    Table,
    Uuid,
    func,
)

from cafe_backend.core.roles import ROLE_NAMES
from cafe_backend.models.base import metadata

_role_list = ", ".join(f"'{name}'" for name in ROLE_NAMES)

staff_members = Table(
    "staff_members",
    metadata,
    Column("id", Uuid(as_uuid=True), primary_key=True, default=uuid4),
    # Human-readable identifier, assigned once at creation (e.g. "BA003")
    Column("staff_id", String(10), nullable=False, unique=True, index=True),
    Column("role", String(20), nullable=False, index=True),
    # Profile
    Column("first_name", String(50), nullable=False),
    Column("last_name", String(50), nullable=False),
    Column("email", String(100), nullable=False, unique=True),
    Column("phone", String(20), nullable=False),
    # Optional alternative login name
    Column("username", String(50), unique=True),
    # Credentials
    Column("password_hash", String(255), nullable=False),
    # Employment
    Column("hire_date", Date, nullable=False),
    # Audit
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column(
        "created_by",
        Uuid(as_uuid=True),
        ForeignKey("admin_users.id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column("last_login", DateTime(timezone=True)),
    CheckConstraint(f"role IN ({_role_list})", name="role_valid"),
)
