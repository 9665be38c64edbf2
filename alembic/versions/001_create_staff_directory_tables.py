"""Create admin, role counter and staff member tables.

Revision ID: 001
Revises:
Create Date: 2026-09-14 00:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ROLES = ("Manager", "Barista", "Cashier", "Baker", "Cleaner")


def upgrade() -> None:
    """Upgrade database schema."""
    op.execute('CREATE EXTENSION IF NOT EXISTS "pgcrypto"')

    # Administrators
    op.create_table(
        "admin_users",
        sa.Column(
            "id", postgresql.UUID(), server_default=sa.text("gen_random_uuid()"), nullable=False
        ),
        sa.Column("username", sa.VARCHAR(length=50), nullable=False),
        sa.Column("email", sa.VARCHAR(length=100), nullable=False),
        sa.Column("password_hash", sa.VARCHAR(length=255), nullable=False),
        sa.Column("first_name", sa.VARCHAR(length=50), nullable=False),
        sa.Column("last_name", sa.VARCHAR(length=50), nullable=False),
        sa.Column(
            "created_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.Column("last_login", postgresql.TIMESTAMP(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_admin_users"),
        sa.UniqueConstraint("email", name="uq_admin_users_email"),
    )
    op.create_index("ix_admin_users_username", "admin_users", ["username"], unique=True)

    # One counter row per role
    op.create_table(
        "role_counters",
        sa.Column("role", sa.VARCHAR(length=20), nullable=False),
        sa.Column("counter", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.CheckConstraint("counter >= 0", name="ck_role_counters_counter_non_negative"),
        sa.PrimaryKeyConstraint("role", name="pk_role_counters"),
    )
    role_counters = sa.table(
        "role_counters",
        sa.column("role", sa.VARCHAR),
        sa.column("counter", sa.Integer),
    )
    op.bulk_insert(role_counters, [{"role": role, "counter": 0} for role in ROLES])

    # Staff directory
    role_list = ", ".join(f"'{role}'" for role in ROLES)
    op.create_table(
        "staff_members",
        sa.Column(
            "id", postgresql.UUID(), server_default=sa.text("gen_random_uuid()"), nullable=False
        ),
        sa.Column("staff_id", sa.VARCHAR(length=10), nullable=False),
        sa.Column("role", sa.VARCHAR(length=20), nullable=False),
        sa.Column("first_name", sa.VARCHAR(length=50), nullable=False),
        sa.Column("last_name", sa.VARCHAR(length=50), nullable=False),
        sa.Column("email", sa.VARCHAR(length=100), nullable=False),
        sa.Column("phone", sa.VARCHAR(length=20), nullable=False),
        sa.Column("username", sa.VARCHAR(length=50), nullable=True),
        sa.Column("password_hash", sa.VARCHAR(length=255), nullable=False),
        sa.Column("hire_date", sa.Date(), nullable=False),
        sa.Column(
            "created_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.Column("created_by", postgresql.UUID(), nullable=True),
        sa.Column("last_login", postgresql.TIMESTAMP(timezone=True), nullable=True),
        sa.CheckConstraint(f"role IN ({role_list})", name="ck_staff_members_role_valid"),
        sa.ForeignKeyConstraint(
            ["created_by"],
            ["admin_users.id"],
            name="fk_staff_members_created_by_admin_users",
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_staff_members"),
        sa.UniqueConstraint("email", name="uq_staff_members_email"),
        sa.UniqueConstraint("username", name="uq_staff_members_username"),
    )
    op.create_index("ix_staff_members_staff_id", "staff_members", ["staff_id"], unique=True)
    op.create_index("ix_staff_members_role", "staff_members", ["role"])


def downgrade() -> None:
    """Downgrade database schema."""
    op.drop_index("ix_staff_members_role", table_name="staff_members")
    op.drop_index("ix_staff_members_staff_id", table_name="staff_members")
    op.drop_table("staff_members")
    op.drop_table("role_counters")
    op.drop_index("ix_admin_users_username", table_name="admin_users")
    op.drop_table("admin_users")
