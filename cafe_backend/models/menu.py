"""Menu category and item models using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Table,
    Text,
    Uuid,
    false,
    func,
    text,
    true,
)

from cafe_backend.models.base import metadata

menu_categories = Table(
    "menu_categories",
    metadata,
    Column("id", Uuid(as_uuid=True), primary_key=True, default=uuid4),
    Column("name", String(100), nullable=False, unique=True),
    Column("description", Text),
    Column("display_order", Integer, nullable=False, server_default=text("0")),
    Column("is_active", Boolean, nullable=False, server_default=true()),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
)

menu_items = Table(
    "menu_items",
    metadata,
    Column("id", Uuid(as_uuid=True), primary_key=True, default=uuid4),
    Column("name", String(100), nullable=False),
    Column("description", Text),
    Column("price", Numeric(8, 2), nullable=False),
    Column(
        "category_id",
        Uuid(as_uuid=True),
        ForeignKey("menu_categories.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    ),
    Column("image_url", String(255)),
    Column("is_available", Boolean, nullable=False, server_default=true()),
    Column("is_featured", Boolean, nullable=False, server_default=false()),
    Column("allergens", String(255)),
    # Minutes
    Column("preparation_time", Integer, nullable=False, server_default=text("5")),
    Column("display_order", Integer, nullable=False, server_default=text("0")),
    # Audit
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column(
        "created_by",
        Uuid(as_uuid=True),
        ForeignKey("admin_users.id", ondelete="SET NULL"),
        nullable=True,
    ),
    CheckConstraint("price >= 0", name="price_non_negative"),
    CheckConstraint("preparation_time BETWEEN 1 AND 120", name="preparation_time_range"),
)
