"""Menu schemas for request/response validation."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import ConfigDict, Field, HttpUrl

from cafe_backend.schemas.common import CamelModel


class CategoryCreate(CamelModel):
    """Schema for creating a menu category."""

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(None, max_length=255)
    display_order: int = Field(0, ge=0)


class CategoryResponse(CamelModel):
    """Menu category response."""

    id: UUID
    name: str
    description: str | None = None
    display_order: int
    is_active: bool
    created_at: datetime | None = None


class MenuItemCreate(CamelModel):
    """Schema for creating a menu item."""

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)
    price: Decimal = Field(..., ge=0, max_digits=8, decimal_places=2)
    category_id: UUID
    image_url: HttpUrl | None = None
    is_available: bool = True
    is_featured: bool = False
    allergens: str | None = Field(None, max_length=255)
    preparation_time: int = Field(5, ge=1, le=120, description="Minutes")
    display_order: int = Field(0, ge=0)


class MenuItemUpdate(CamelModel):
    """Schema for updating a menu item; unknown fields are ignored."""

    model_config = ConfigDict(extra="ignore")

    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)
    price: Decimal | None = Field(None, ge=0, max_digits=8, decimal_places=2)
    category_id: UUID | None = None
    image_url: HttpUrl | None = None
    is_available: bool | None = None
    is_featured: bool | None = None
    allergens: str | None = Field(None, max_length=255)
    preparation_time: int | None = Field(None, ge=1, le=120)
    display_order: int | None = Field(None, ge=0)


class MenuItemResponse(CamelModel):
    """Menu item response, joined with its category name."""

    id: UUID
    name: str
    description: str | None = None
    price: Decimal
    category_id: UUID
    category_name: str | None = None
    image_url: str | None = None
    is_available: bool
    is_featured: bool
    allergens: str | None = None
    preparation_time: int
    display_order: int
    created_at: datetime | None = None
    updated_at: datetime | None = None
    created_by: UUID | None = None


class CategoryListResponse(CamelModel):
    """Response schema for category listing."""

    categories: list[CategoryResponse]


class MenuItemListResponse(CamelModel):
    """Response schema for menu item listing."""

    items: list[MenuItemResponse]
