"""Staff directory schemas for request/response validation."""

import re
from datetime import date, datetime
from typing import Annotated
from uuid import UUID

from pydantic import AfterValidator, ConfigDict, EmailStr, Field, StringConstraints

from cafe_backend.core.roles import StaffRole
from cafe_backend.schemas.common import CamelModel

PASSWORD_MIN_LENGTH = 6

# Shape of an allocated staff identifier, e.g. "BA003" or "MA1000"
STAFF_ID_PATTERN = re.compile(r"^[A-Z]{2}\d{3,}$")


def _not_a_staff_id(value: str) -> str:
    """Keep usernames out of the staff identifier namespace; both are login names."""
    if STAFF_ID_PATTERN.match(value):
        raise ValueError("Username must not have the form of a staff ID")
    return value


NameStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=50)]
PhoneStr = Annotated[
    str,
    StringConstraints(strip_whitespace=True, max_length=20, pattern=r"^[\d\s\-\+\(\)]+$"),
]
UsernameStr = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=3, max_length=50, pattern=r"^[\w.\-]+$"),
    AfterValidator(_not_a_staff_id),
]
PasswordStr = Annotated[str, Field(min_length=PASSWORD_MIN_LENGTH, max_length=128)]


class StaffCreate(CamelModel):
    """Schema for creating a staff member."""

    role: StaffRole
    first_name: NameStr
    last_name: NameStr
    email: EmailStr
    phone: PhoneStr
    password: PasswordStr
    username: UsernameStr | None = None
    hire_date: date | None = Field(None, description="Defaults to today")


class StaffUpdate(CamelModel):
    """
    Schema for updating a staff member.

    Only the fields below are applied; anything else in the payload
    (including the staff identifier and password) is ignored.
    """

    model_config = ConfigDict(extra="ignore")

    role: StaffRole | None = None
    first_name: NameStr | None = None
    last_name: NameStr | None = None
    email: EmailStr | None = None
    phone: PhoneStr | None = None
    username: UsernameStr | None = None
    hire_date: date | None = None


class PasswordReset(CamelModel):
    """Schema for resetting a staff member's password."""

    new_password: str


class StaffResponse(CamelModel):
    """Staff record as returned by the API."""

    id: UUID
    staff_id: str
    role: StaffRole
    first_name: str
    last_name: str
    email: str
    phone: str
    username: str | None = None
    hire_date: date
    created_at: datetime
    created_by: UUID | None = None
    created_by_username: str | None = None
    last_login: datetime | None = None


class StaffListResponse(CamelModel):
    """Response schema for staff listing."""

    staff: list[StaffResponse]
    total: int


class MessageResponse(CamelModel):
    """Plain confirmation message."""

    message: str
