"""Per-role staff identifier counters using SQLAlchemy Core."""

from sqlalchemy import CheckConstraint, Column, Integer, String, Table, text

from cafe_backend.models.base import metadata

role_counters = Table(
    "role_counters",
    metadata,
    Column("role", String(20), primary_key=True),
    # Only ever incremented; one row per role
    Column("counter", Integer, nullable=False, server_default=text("0")),
    CheckConstraint("counter >= 0", name="counter_non_negative"),
)
