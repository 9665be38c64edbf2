"""Menu management endpoints."""

from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from cafe_backend.dependencies import CurrentPrincipal, DatabaseSession, StaffManager
from cafe_backend.schemas.menu import (
    CategoryCreate,
    CategoryListResponse,
    CategoryResponse,
    MenuItemCreate,
    MenuItemListResponse,
    MenuItemResponse,
    MenuItemUpdate,
)
from cafe_backend.services.menu_service import MenuService

router = APIRouter(prefix="/menu", tags=["Menu"])


@router.get("/categories", response_model=CategoryListResponse, summary="List menu categories")
async def list_categories(
    db: DatabaseSession,
    principal: CurrentPrincipal,
) -> CategoryListResponse:
    """Get all menu categories in display order."""
    categories = await MenuService.list_categories(db)
    return CategoryListResponse(
        categories=[CategoryResponse.model_validate(c) for c in categories],
    )


@router.post(
    "/categories",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a menu category",
)
async def create_category(
    category_data: CategoryCreate,
    db: DatabaseSession,
    principal: StaffManager,
) -> CategoryResponse:
    """Create a menu category (administrators and managers)."""
    category = await MenuService().create_category(db, category_data)
    return CategoryResponse.model_validate(category)


@router.get("/items", response_model=MenuItemListResponse, summary="List menu items")
async def list_items(
    db: DatabaseSession,
    principal: CurrentPrincipal,
) -> MenuItemListResponse:
    """Get all menu items with their category names."""
    items = await MenuService().list_items(db)
    return MenuItemListResponse(items=[MenuItemResponse.model_validate(i) for i in items])


@router.get("/items/{item_id}", response_model=MenuItemResponse, summary="Get a menu item")
async def get_item(
    item_id: UUID,
    db: DatabaseSession,
    principal: CurrentPrincipal,
) -> MenuItemResponse:
    """Get a menu item by ID."""
    item = await MenuService().get_item(db, item_id)

    if not item:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Menu item not found",
        )

    return MenuItemResponse.model_validate(item)


@router.post(
    "/items",
    response_model=MenuItemResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a menu item",
)
async def create_item(
    item_data: MenuItemCreate,
    db: DatabaseSession,
    principal: StaffManager,
) -> MenuItemResponse:
    """Create a menu item (administrators and managers)."""
    item = await MenuService().create_item(db, item_data, actor=principal)
    return MenuItemResponse.model_validate(item)


@router.put("/items/{item_id}", response_model=MenuItemResponse, summary="Update a menu item")
async def update_item(
    item_id: UUID,
    item_data: MenuItemUpdate,
    db: DatabaseSession,
    principal: StaffManager,
) -> MenuItemResponse:
    """Update a menu item (administrators and managers)."""
    item = await MenuService().update_item(db, item_id, item_data)
    return MenuItemResponse.model_validate(item)


@router.delete(
    "/items/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a menu item",
)
async def delete_item(
    item_id: UUID,
    db: DatabaseSession,
    principal: StaffManager,
) -> None:
    """Delete a menu item (administrators and managers)."""
    await MenuService().delete_item(db, item_id)
