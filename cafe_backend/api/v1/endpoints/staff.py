"""Staff directory endpoints (administrators and managers)."""

from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from cafe_backend.core.roles import StaffRole
from cafe_backend.dependencies import DatabaseSession, StaffManager
from cafe_backend.schemas.staff import (
    MessageResponse,
    PasswordReset,
    StaffCreate,
    StaffListResponse,
    StaffResponse,
    StaffUpdate,
)
from cafe_backend.services.staff_service import StaffService

router = APIRouter(prefix="/staff", tags=["Staff"])


@router.get("", response_model=StaffListResponse, summary="List staff members")
async def list_staff(
    db: DatabaseSession,
    principal: StaffManager,
    role: StaffRole | None = Query(None, description="Filter by role"),
) -> StaffListResponse:
    """Get all staff members, newest first."""
    staff = await StaffService().list_staff(db, role=role)
    return StaffListResponse(
        staff=[StaffResponse.model_validate(s) for s in staff],
        total=len(staff),
    )


@router.post(
    "",
    response_model=StaffResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a staff member",
)
async def create_staff(
    staff_data: StaffCreate,
    db: DatabaseSession,
    principal: StaffManager,
) -> StaffResponse:
    """
    Create a staff member.

    A staff identifier is allocated from the role's counter, e.g. the third
    barista becomes "BA003".

    Args:
        staff_data: Staff fields including the initial password
        db: Database session
        principal: Authenticated administrator or manager

    Returns:
        Created staff record
    """
    staff = await StaffService().create_staff(db, staff_data, actor=principal)
    return StaffResponse.model_validate(staff)


@router.get("/{staff_pk}", response_model=StaffResponse, summary="Get a staff member")
async def get_staff(
    staff_pk: UUID,
    db: DatabaseSession,
    principal: StaffManager,
) -> StaffResponse:
    """Get a staff member by internal ID."""
    staff = await StaffService().get_staff(db, staff_pk)

    if not staff:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Staff member not found",
        )

    return StaffResponse.model_validate(staff)


@router.put("/{staff_pk}", response_model=StaffResponse, summary="Update a staff member")
async def update_staff(
    staff_pk: UUID,
    staff_data: StaffUpdate,
    db: DatabaseSession,
    principal: StaffManager,
) -> StaffResponse:
    """Update role, name or contact fields. The staff identifier never changes."""
    staff = await StaffService().update_staff(db, staff_pk, staff_data)
    return StaffResponse.model_validate(staff)


@router.post(
    "/{staff_pk}/reset-password",
    response_model=MessageResponse,
    summary="Reset a staff member's password",
)
async def reset_staff_password(
    staff_pk: UUID,
    request: PasswordReset,
    db: DatabaseSession,
    principal: StaffManager,
) -> MessageResponse:
    """Replace a staff member's password."""
    staff = await StaffService().reset_password(db, staff_pk, request.new_password)
    return MessageResponse(
        message=(
            f"Password for {staff['first_name']} {staff['last_name']} "
            "has been reset successfully"
        )
    )


@router.delete(
    "/{staff_pk}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a staff member",
)
async def delete_staff(
    staff_pk: UUID,
    db: DatabaseSession,
    principal: StaffManager,
) -> None:
    """Delete a staff member permanently."""
    await StaffService().delete_staff(db, staff_pk)
