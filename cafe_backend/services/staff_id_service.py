"""Staff identifier allocation backed by per-role database counters."""

import structlog
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from cafe_backend.core.exceptions import UnknownRoleException
from cafe_backend.core.roles import StaffRole, parse_role, prefix_for
from cafe_backend.database import insert_ignoring_conflicts
from cafe_backend.models.role_counters import role_counters

logger = structlog.get_logger(__name__)

# Minimum width of the numeric part; wider values are kept as-is
STAFF_ID_DIGITS = 3


def format_staff_id(prefix: str, value: int) -> str:
    """Combine a role prefix and counter value into a staff identifier."""
    return f"{prefix}{value:0{STAFF_ID_DIGITS}d}"


class RoleCounterStore:
    """Durable per-role sequence numbers."""

    @staticmethod
    async def ensure_counters(db: AsyncSession) -> None:
        """Create a zero counter for every known role, leaving existing ones untouched."""
        statement = insert_ignoring_conflicts(db, role_counters, ["role"])
        await db.execute(
            statement,
            [{"role": role.value, "counter": 0} for role in StaffRole],
        )

    @staticmethod
    async def next_value(db: AsyncSession, role: StaffRole | str) -> int:
        """
        Advance the counter for a role and return the new value.

        The increment is a single ``UPDATE ... RETURNING`` statement, so
        concurrent callers are serialised on the counter row. The change is
        part of the caller's transaction and is undone if it rolls back.

        Args:
            db: Database session
            role: Staff role

        Returns:
            The incremented counter value

        Raises:
            UnknownRoleException: If the role is unknown or has no counter row
        """
        role = parse_role(role)

        query = (
            update(role_counters)
            .where(role_counters.c.role == role.value)
            .values(counter=role_counters.c.counter + 1)
            .returning(role_counters.c.counter)
        )
        result = await db.execute(query)
        value = result.scalar_one_or_none()

        if value is None:
            raise UnknownRoleException(role.value)

        return value

    @staticmethod
    async def current_value(db: AsyncSession, role: StaffRole | str) -> int | None:
        """Read the counter for a role without advancing it."""
        role = parse_role(role)
        query = select(role_counters.c.counter).where(role_counters.c.role == role.value)
        result = await db.execute(query)
        return result.scalar_one_or_none()


class StaffIdAllocator:
    """Allocates unique, human-readable staff identifiers such as ``MA007``."""

    def __init__(self, counter_store: RoleCounterStore | None = None):
        """Initialize allocator with an optional counter store."""
        self.counters = counter_store or RoleCounterStore()

    async def allocate(self, db: AsyncSession, role: StaffRole | str) -> str:
        """
        Allocate the next staff identifier for a role.

        Does not commit: the allocation becomes durable together with
        whatever the caller commits in the same transaction.

        Args:
            db: Database session
            role: Staff role

        Returns:
            Staff identifier, e.g. "BA004"

        Raises:
            UnknownRoleException: If the role is not in the registry
        """
        prefix = prefix_for(role)
        value = await self.counters.next_value(db, role)
        staff_id = format_staff_id(prefix, value)

        logger.info("staff_id_allocated", role=parse_role(role).value, staff_id=staff_id)

        return staff_id
