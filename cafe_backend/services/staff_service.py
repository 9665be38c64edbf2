"""Staff directory service for business logic."""

from collections.abc import Mapping
from datetime import UTC, date, datetime
from typing import Any
from uuid import UUID

import structlog
from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from cafe_backend.core.exceptions import (
    ConflictException,
    DuplicateEmailException,
    DuplicateUsernameException,
    NotFoundException,
    ValidationException,
)
from cafe_backend.core.roles import StaffRole
from cafe_backend.core.security import hash_password
from cafe_backend.models.admin_users import admin_users
from cafe_backend.models.staff_members import staff_members
from cafe_backend.schemas.auth import Principal
from cafe_backend.schemas.common import parse_payload
from cafe_backend.schemas.staff import PASSWORD_MIN_LENGTH, StaffCreate, StaffUpdate
from cafe_backend.services.staff_id_service import StaffIdAllocator

logger = structlog.get_logger(__name__)

# Columns returned on reads; the password hash never leaves the service
_PUBLIC_COLUMNS = [column for column in staff_members.c if column.name != "password_hash"]

# Update fields that may be explicitly set to null
NULLABLE_UPDATE_FIELDS = frozenset({"username"})


class StaffService:
    """Service for staff directory operations."""

    def __init__(self, allocator: StaffIdAllocator | None = None):
        """Initialize service with an optional identifier allocator."""
        self.allocator = allocator or StaffIdAllocator()

    @staticmethod
    def _staff_query():
        """Base query: public staff columns joined with the creator's username."""
        return select(
            *_PUBLIC_COLUMNS,
            admin_users.c.username.label("created_by_username"),
        ).select_from(
            staff_members.outerjoin(admin_users, staff_members.c.created_by == admin_users.c.id)
        )

    @staticmethod
    def _duplicate_error(
        error: IntegrityError, email: str | None, username: str | None
    ) -> ConflictException:
        """Map a unique-constraint violation to the matching conflict exception."""
        error_msg = str(error.orig) if hasattr(error, "orig") else str(error)
        if "email" in error_msg:
            return DuplicateEmailException(email)
        if "username" in error_msg:
            return DuplicateUsernameException(username)
        return ConflictException("Staff record conflicts with an existing record")

    async def _ensure_unique(
        self,
        db: AsyncSession,
        email: str | None = None,
        username: str | None = None,
        exclude_id: UUID | None = None,
    ) -> None:
        """Fail early on an email or login name already used by another staff member."""
        if email is not None:
            query = select(staff_members.c.id).where(staff_members.c.email == email)
            if exclude_id is not None:
                query = query.where(staff_members.c.id != exclude_id)
            if (await db.execute(query)).first():
                raise DuplicateEmailException(email)

        if username is not None:
            # Usernames share the login namespace with staff identifiers
            query = select(staff_members.c.id).where(
                or_(staff_members.c.username == username, staff_members.c.staff_id == username)
            )
            if exclude_id is not None:
                query = query.where(staff_members.c.id != exclude_id)
            if (await db.execute(query)).first():
                raise DuplicateUsernameException(username)

    async def create_staff(
        self,
        db: AsyncSession,
        staff_data: StaffCreate | Mapping[str, Any],
        actor: Principal | None = None,
    ) -> dict:
        """
        Create a staff member with a freshly allocated staff identifier.

        The identifier allocation and the insert commit together; a conflict
        detected by the database rolls both back.

        Args:
            db: Database session
            staff_data: Validated schema or raw fields
            actor: Caller creating the record

        Returns:
            Created staff record

        Raises:
            ValidationException: If any field is invalid
            DuplicateEmailException: If the email is already registered
            DuplicateUsernameException: If the username is already taken
        """
        data = parse_payload(StaffCreate, staff_data)

        await self._ensure_unique(db, email=data.email, username=data.username)

        password = await run_in_threadpool(hash_password, data.password)
        created_by = actor.id if actor is not None and actor.is_admin else None

        try:
            staff_id = await self.allocator.allocate(db, data.role)
            query = (
                staff_members.insert()
                .values(
                    staff_id=staff_id,
                    role=data.role.value,
                    first_name=data.first_name,
                    last_name=data.last_name,
                    email=data.email,
                    phone=data.phone,
                    username=data.username,
                    password_hash=password.hash,
                    hire_date=data.hire_date or date.today(),
                    created_at=datetime.now(UTC),
                    created_by=created_by,
                )
                .returning(staff_members.c.id)
            )
            result = await db.execute(query)
            new_id = result.scalar_one()
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            raise self._duplicate_error(e, data.email, data.username) from e
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "staff_created",
            staff_id=staff_id,
            role=data.role.value,
            created_by=str(created_by) if created_by else None,
        )

        staff = await self.get_staff(db, new_id)
        if staff is None:
            raise NotFoundException("Staff member not found")
        return staff

    async def get_staff(self, db: AsyncSession, staff_pk: UUID) -> dict | None:
        """Get a staff member by internal ID."""
        query = self._staff_query().where(staff_members.c.id == staff_pk)
        result = await db.execute(query)
        staff = result.mappings().first()
        return dict(staff) if staff else None

    async def get_staff_by_login(self, db: AsyncSession, login: str) -> dict | None:
        """Get a staff member by staff identifier (e.g. "BA003") or username."""
        query = self._staff_query().where(
            or_(staff_members.c.staff_id == login, staff_members.c.username == login)
        )
        result = await db.execute(query)
        staff = result.mappings().first()
        return dict(staff) if staff else None

    async def get_staff_credentials(self, db: AsyncSession, login: str) -> dict | None:
        """
        Get the full staff row, password hash included, by staff ID or username.

        A staff identifier match takes precedence over a username match.
        """
        query = (
            select(staff_members)
            .where(or_(staff_members.c.staff_id == login, staff_members.c.username == login))
            .order_by((staff_members.c.staff_id == login).desc())
        )
        result = await db.execute(query)
        staff = result.mappings().first()
        return dict(staff) if staff else None

    async def list_staff(self, db: AsyncSession, role: StaffRole | None = None) -> list[dict]:
        """List staff members, newest first."""
        query = self._staff_query()
        if role is not None:
            query = query.where(staff_members.c.role == role.value)
        query = query.order_by(staff_members.c.created_at.desc(), staff_members.c.staff_id.desc())

        result = await db.execute(query)
        return [dict(row) for row in result.mappings().all()]

    async def count_staff(self, db: AsyncSession) -> int:
        """Count all staff members."""
        result = await db.execute(select(func.count()).select_from(staff_members))
        return result.scalar_one()

    async def update_staff(
        self,
        db: AsyncSession,
        staff_pk: UUID,
        staff_data: StaffUpdate | Mapping[str, Any],
    ) -> dict:
        """
        Update role, name or contact fields of a staff member.

        Fields outside the update schema are ignored. The staff identifier is
        never changed, even when the role changes.

        Raises:
            ValidationException: If a supplied field is invalid
            NotFoundException: If the staff member does not exist
            DuplicateEmailException: If the new email is already registered
            DuplicateUsernameException: If the new username is already taken
        """
        data = parse_payload(StaffUpdate, staff_data)
        # username is nullable and may be cleared; other fields ignore nulls
        updates = {
            field: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if value is not None or field in NULLABLE_UPDATE_FIELDS
        }

        existing = await self.get_staff(db, staff_pk)
        if existing is None:
            raise NotFoundException("Staff member not found")

        if not updates:
            return existing

        if "role" in updates:
            updates["role"] = updates["role"].value

        await self._ensure_unique(
            db,
            email=updates.get("email"),
            username=updates.get("username"),
            exclude_id=staff_pk,
        )

        try:
            query = update(staff_members).where(staff_members.c.id == staff_pk).values(**updates)
            result = await db.execute(query)
            if result.rowcount == 0:  # type: ignore[attr-defined]
                raise NotFoundException("Staff member not found")
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            raise self._duplicate_error(e, updates.get("email"), updates.get("username")) from e
        except Exception:
            await db.rollback()
            raise

        logger.info("staff_updated", staff_id=existing["staff_id"], fields=sorted(updates))

        staff = await self.get_staff(db, staff_pk)
        if staff is None:
            raise NotFoundException("Staff member not found")
        return staff

    async def delete_staff(self, db: AsyncSession, staff_pk: UUID) -> None:
        """
        Delete a staff member (hard delete).

        Raises:
            NotFoundException: If the staff member does not exist
        """
        query = delete(staff_members).where(staff_members.c.id == staff_pk)
        result = await db.execute(query)

        if result.rowcount == 0:  # type: ignore[attr-defined]
            await db.rollback()
            raise NotFoundException("Staff member not found")

        await db.commit()
        logger.info("staff_deleted", staff_pk=str(staff_pk))

    async def reset_password(self, db: AsyncSession, staff_pk: UUID, new_password: str) -> dict:
        """
        Replace a staff member's password.

        Returns:
            The staff record whose password was reset

        Raises:
            ValidationException: If the password is shorter than six characters
            NotFoundException: If the staff member does not exist
        """
        if not isinstance(new_password, str) or len(new_password) < PASSWORD_MIN_LENGTH:
            raise ValidationException(
                "Validation failed",
                errors=[
                    {
                        "field": "newPassword",
                        "message": (
                            f"New password must be at least {PASSWORD_MIN_LENGTH} "
                            "characters long"
                        ),
                    }
                ],
            )

        existing = await self.get_staff(db, staff_pk)
        if existing is None:
            raise NotFoundException("Staff member not found")

        password = await run_in_threadpool(hash_password, new_password)
        query = (
            update(staff_members)
            .where(staff_members.c.id == staff_pk)
            .values(password_hash=password.hash)
        )
        result = await db.execute(query)

        if result.rowcount == 0:  # type: ignore[attr-defined]
            await db.rollback()
            raise NotFoundException("Staff member not found")

        await db.commit()
        logger.info("staff_password_reset", staff_id=existing["staff_id"])

        return existing

    async def record_login(self, db: AsyncSession, staff_pk: UUID) -> None:
        """Update a staff member's last login timestamp."""
        query = (
            update(staff_members)
            .where(staff_members.c.id == staff_pk)
            .values(last_login=datetime.now(UTC))
        )
        await db.execute(query)
        await db.commit()
