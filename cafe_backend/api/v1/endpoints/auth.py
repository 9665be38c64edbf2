"""Administrator authentication endpoints."""

from fastapi import APIRouter, status

from cafe_backend.dependencies import AdminPrincipal, AuthServiceDep, DatabaseSession, TokenPayload
from cafe_backend.schemas.auth import AdminLoginRequest, AdminLoginResponse, AdminResponse
from cafe_backend.services.admin_service import AdminService

router = APIRouter()


@router.post(
    "/login",
    response_model=AdminLoginResponse,
    status_code=status.HTTP_200_OK,
    summary="Administrator login",
)
async def login(
    request: AdminLoginRequest,
    db: DatabaseSession,
    auth_service: AuthServiceDep,
) -> AdminLoginResponse:
    """
    Check administrator credentials and return an access token.

    Args:
        request: Username and password
        db: Database session
        auth_service: Auth service

    Returns:
        Access token and administrator profile
    """
    admin, token = await auth_service.authenticate_admin(db, request.username, request.password)

    return AdminLoginResponse(
        access_token=token,
        expires_in=auth_service.expires_in,
        user=AdminResponse.model_validate(admin),
    )


@router.get(
    "/me",
    response_model=AdminResponse,
    summary="Current administrator",
)
async def get_current_admin(
    principal: AdminPrincipal,
    db: DatabaseSession,
) -> AdminResponse:
    """Get the authenticated administrator's profile."""
    admin = await AdminService.get_admin_by_id(db, principal.id)
    return AdminResponse.model_validate(admin)


@router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Logout and revoke token",
)
async def logout(
    payload: TokenPayload,
    auth_service: AuthServiceDep,
) -> None:
    """Revoke the presented access token."""
    auth_service.revoke_token(payload)
