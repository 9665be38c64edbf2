"""Staff authentication endpoints."""

from fastapi import APIRouter, HTTPException, status

from cafe_backend.dependencies import AuthServiceDep, DatabaseSession, StaffPrincipal
from cafe_backend.schemas.auth import StaffLoginRequest, StaffLoginResponse
from cafe_backend.schemas.staff import StaffResponse
from cafe_backend.services.staff_service import StaffService

router = APIRouter()


@router.post(
    "/login",
    response_model=StaffLoginResponse,
    status_code=status.HTTP_200_OK,
    summary="Staff login",
)
async def staff_login(
    request: StaffLoginRequest,
    db: DatabaseSession,
    auth_service: AuthServiceDep,
) -> StaffLoginResponse:
    """
    Check staff credentials and return an access token.

    The login field accepts either the staff identifier (e.g. "BA003")
    or the staff member's username.
    """
    staff, token = await auth_service.authenticate_staff(db, request.staff_id, request.password)

    return StaffLoginResponse(
        access_token=token,
        expires_in=auth_service.expires_in,
        staff=StaffResponse.model_validate(staff),
    )


@router.get(
    "/me",
    response_model=StaffResponse,
    summary="Current staff member",
)
async def get_current_staff(
    principal: StaffPrincipal,
    db: DatabaseSession,
) -> StaffResponse:
    """Get the authenticated staff member's record."""
    staff = await StaffService().get_staff(db, principal.id)

    if not staff:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Staff member not found",
        )

    return StaffResponse.model_validate(staff)
