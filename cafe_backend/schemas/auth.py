"""Authentication schemas."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

from cafe_backend.schemas.common import CamelModel
from cafe_backend.schemas.staff import StaffResponse

UserType = Literal["admin", "staff"]


class Principal(BaseModel):
    """
    Identity of the authenticated caller for one request.

    Built from the directory row on every request, never from token claims
    alone.
    """

    id: UUID
    username: str
    user_type: UserType
    role: str | None = None

    @property
    def is_admin(self) -> bool:
        """Check if the caller is an administrator."""
        return self.user_type == "admin"

    @property
    def is_manager(self) -> bool:
        """Check if the caller is a staff member with the Manager role."""
        return self.user_type == "staff" and self.role == "Manager"


class AdminLoginRequest(BaseModel):
    """Administrator login request."""

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class StaffLoginRequest(CamelModel):
    """Staff login request (staff identifier or username)."""

    staff_id: str = Field(..., min_length=1, description="Staff ID (e.g. BA003) or username")
    password: str = Field(..., min_length=1)


class AdminResponse(CamelModel):
    """Administrator profile."""

    id: UUID
    username: str
    email: str
    first_name: str
    last_name: str
    created_at: datetime | None = None
    last_login: datetime | None = None


class AdminLoginResponse(BaseModel):
    """Administrator login response with token and profile."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: AdminResponse


class StaffLoginResponse(BaseModel):
    """Staff login response with token and profile."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int
    staff: StaffResponse
