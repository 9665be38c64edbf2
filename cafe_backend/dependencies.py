"""FastAPI dependencies."""

from typing import Annotated, Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from cafe_backend.core.exceptions import UnauthorizedException
from cafe_backend.core.redis_client import CacheManager, get_redis_client
from cafe_backend.database import get_db
from cafe_backend.schemas.auth import Principal
from cafe_backend.services.auth_service import AuthService

# Security
security = HTTPBearer()


def get_cache_manager(redis_client: Annotated[Any, Depends(get_redis_client)]) -> CacheManager:
    """Wrap the Redis client in a cache manager."""
    return CacheManager(redis_client)


def get_auth_service(
    cache_manager: Annotated[CacheManager, Depends(get_cache_manager)],
) -> AuthService:
    """Build the auth service for this request."""
    return AuthService(cache_manager)


async def get_token_payload(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> dict[str, Any]:
    """
    Decode and validate the bearer token.

    Raises:
        HTTPException: If token is invalid, expired or revoked
    """
    try:
        return auth_service.decode_token(credentials.credentials)
    except UnauthorizedException as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


async def get_current_principal(
    payload: Annotated[dict[str, Any], Depends(get_token_payload)],
    db: Annotated[AsyncSession, Depends(get_db)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> Principal:
    """
    Resolve the caller from the directory on every request.

    Raises:
        HTTPException: If the account behind the token no longer exists
    """
    try:
        return await auth_service.resolve_principal(db, payload)
    except UnauthorizedException as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


async def require_admin(
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> Principal:
    """Ensure the caller is an administrator."""
    if not principal.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. Admin token required.",
        )
    return principal


async def require_staff(
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> Principal:
    """Ensure the caller is a staff member."""
    if principal.user_type != "staff":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. Staff token required.",
        )
    return principal


async def require_admin_or_manager(
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> Principal:
    """Ensure the caller is an administrator or a staff member with the Manager role."""
    if not (principal.is_admin or principal.is_manager):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. Admin or Manager role required.",
        )
    return principal


# Type aliases for dependency injection
DatabaseSession = Annotated[AsyncSession, Depends(get_db)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
TokenPayload = Annotated[dict[str, Any], Depends(get_token_payload)]
CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]
AdminPrincipal = Annotated[Principal, Depends(require_admin)]
StaffPrincipal = Annotated[Principal, Depends(require_staff)]
StaffManager = Annotated[Principal, Depends(require_admin_or_manager)]
