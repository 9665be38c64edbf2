"""Authentication service for administrators and staff."""

from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from cafe_backend.config import settings
from cafe_backend.core.exceptions import UnauthorizedException
from cafe_backend.core.redis_client import CacheManager
from cafe_backend.core.security import create_access_token, decode_access_token, verify_password
from cafe_backend.schemas.auth import Principal, UserType
from cafe_backend.services.admin_service import AdminService
from cafe_backend.services.staff_service import StaffService

logger = structlog.get_logger(__name__)


class AuthService:
    """Authentication service for credential checks and JWT handling."""

    def __init__(self, cache_manager: CacheManager | None = None):
        """Initialize auth service with optional cache manager for revocations."""
        self.cache = cache_manager

    @staticmethod
    def _revocation_key(jti: str) -> str:
        """Generate cache key for a revoked token."""
        return f"revoked:{jti}"

    @staticmethod
    async def _check_password(password: str, hashed_password: str) -> bool:
        """Verify a password on the thread pool; bcrypt would otherwise stall the event loop."""
        return await run_in_threadpool(verify_password, password, hashed_password)

    @property
    def expires_in(self) -> int:
        """Access token lifetime in seconds."""
        return settings.access_token_expire_minutes * 60

    def create_token(
        self,
        user_id: UUID,
        username: str,
        user_type: UserType,
        role: str | None = None,
    ) -> str:
        """
        Create an access token for an administrator or staff member.

        Args:
            user_id: Internal ID of the account
            username: Admin username or staff identifier
            user_type: "admin" or "staff"
            role: Staff role, if any

        Returns:
            Encoded JWT
        """
        data: dict[str, Any] = {
            "sub": str(user_id),
            "username": username,
            "user_type": user_type,
        }
        if role is not None:
            data["role"] = role

        return create_access_token(
            data=data,
            expires_delta=timedelta(minutes=settings.access_token_expire_minutes),
        )

    async def authenticate_admin(
        self, db: AsyncSession, username: str, password: str
    ) -> tuple[dict, str]:
        """
        Check administrator credentials and issue a token.

        Returns:
            Tuple of (administrator dict, access token)

        Raises:
            UnauthorizedException: If the username or password is wrong
        """
        admin = await AdminService.get_admin_credentials(db, username)

        if not admin or not await self._check_password(password, admin["password_hash"]):
            logger.warning("admin_login_failed", username=username)
            raise UnauthorizedException("Invalid username or password")

        await AdminService.record_login(db, admin["id"])
        token = self.create_token(admin["id"], admin["username"], "admin")

        logger.info("admin_login_succeeded", username=username)

        admin_profile = await AdminService.get_admin_by_id(db, admin["id"])
        return admin_profile or admin, token

    async def authenticate_staff(
        self, db: AsyncSession, login: str, password: str
    ) -> tuple[dict, str]:
        """
        Check staff credentials (staff ID or username) and issue a token.

        Returns:
            Tuple of (staff dict, access token)

        Raises:
            UnauthorizedException: If the login or password is wrong
        """
        staff_service = StaffService()
        staff = await staff_service.get_staff_credentials(db, login)

        if not staff or not await self._check_password(password, staff["password_hash"]):
            logger.warning("staff_login_failed", login=login)
            raise UnauthorizedException("Invalid staff ID or password")

        await staff_service.record_login(db, staff["id"])
        token = self.create_token(staff["id"], staff["staff_id"], "staff", role=staff["role"])

        logger.info("staff_login_succeeded", staff_id=staff["staff_id"])

        staff_profile = await staff_service.get_staff(db, staff["id"])
        if staff_profile is None:
            raise UnauthorizedException("Invalid staff ID or password")
        return staff_profile, token

    def decode_token(self, token: str) -> dict[str, Any]:
        """
        Decode a token and reject revoked ones.

        Raises:
            UnauthorizedException: If the token is invalid, expired or revoked
        """
        payload = decode_access_token(token)
        if payload is None:
            raise UnauthorizedException("Could not validate credentials")

        jti = payload.get("jti")
        if self.cache and jti and self.cache.exists(self._revocation_key(jti)):
            raise UnauthorizedException("Token has been revoked")

        return payload

    async def resolve_principal(self, db: AsyncSession, payload: dict[str, Any]) -> Principal:
        """
        Build the caller identity from the current directory entry.

        Token claims only locate the account; role and existence are always
        re-read so deleted accounts lose access immediately.

        Raises:
            UnauthorizedException: If the account no longer exists
        """
        subject = payload.get("sub")
        user_type = payload.get("user_type", "admin")

        try:
            user_id = UUID(str(subject))
        except ValueError:
            raise UnauthorizedException("Invalid user ID format") from None

        if user_type == "staff":
            staff = await StaffService().get_staff(db, user_id)
            if not staff:
                raise UnauthorizedException("Invalid token. Staff not found.")
            return Principal(
                id=staff["id"],
                username=staff["staff_id"],
                user_type="staff",
                role=staff["role"],
            )

        if user_type == "admin":
            admin = await AdminService.get_admin_by_id(db, user_id)
            if not admin:
                raise UnauthorizedException("Invalid token. User not found.")
            return Principal(id=admin["id"], username=admin["username"], user_type="admin")

        raise UnauthorizedException("Could not validate credentials")

    def revoke_token(self, payload: dict[str, Any]) -> None:
        """
        Revoke a token until its natural expiry.

        Args:
            payload: Decoded token payload
        """
        jti = payload.get("jti")
        if not self.cache or not jti:
            return

        expires_at = payload.get("exp")
        ttl = self.expires_in
        if isinstance(expires_at, int | float):
            ttl = max(int(expires_at - datetime.now(UTC).timestamp()), 1)

        self.cache.set(self._revocation_key(jti), "1", ttl=ttl)
        logger.info("token_revoked", username=payload.get("username"))
