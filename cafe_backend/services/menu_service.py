"""Menu service for categories and items."""

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

import structlog
from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cafe_backend.core.exceptions import ConflictException, NotFoundException
from cafe_backend.database import insert_ignoring_conflicts
from cafe_backend.models.menu import menu_categories, menu_items
from cafe_backend.schemas.auth import Principal
from cafe_backend.schemas.common import parse_payload
from cafe_backend.schemas.menu import CategoryCreate, MenuItemCreate, MenuItemUpdate

logger = structlog.get_logger(__name__)

DEFAULT_CATEGORIES = [
    {
        "name": "Coffee & Espresso",
        "description": "Hot and cold coffee beverages",
        "display_order": 1,
    },
    {
        "name": "Tea & Infusions",
        "description": "Premium teas and herbal infusions",
        "display_order": 2,
    },
    {
        "name": "Cold Beverages",
        "description": "Iced drinks and refreshers",
        "display_order": 3,
    },
    {
        "name": "Pastries & Desserts",
        "description": "Fresh baked goods and sweet treats",
        "display_order": 4,
    },
    {
        "name": "Breakfast & Light Meals",
        "description": "Sandwiches, salads, and breakfast items",
        "display_order": 5,
    },
]


class MenuService:
    """Service for menu category and item operations."""

    @staticmethod
    def _item_query():
        """Base query: menu items joined with their category name."""
        return select(
            menu_items,
            menu_categories.c.name.label("category_name"),
        ).select_from(
            menu_items.outerjoin(menu_categories, menu_items.c.category_id == menu_categories.c.id)
        )

    @staticmethod
    async def ensure_default_categories(db: AsyncSession) -> None:
        """Insert the default categories that are missing."""
        statement = insert_ignoring_conflicts(db, menu_categories, ["name"])
        await db.execute(statement, DEFAULT_CATEGORIES)

    @staticmethod
    async def list_categories(db: AsyncSession) -> list[dict]:
        """List categories in display order."""
        query = select(menu_categories).order_by(
            menu_categories.c.display_order.asc(), menu_categories.c.name.asc()
        )
        result = await db.execute(query)
        return [dict(row) for row in result.mappings().all()]

    @staticmethod
    async def get_category(db: AsyncSession, category_id: UUID) -> dict | None:
        """Get category by ID."""
        query = select(menu_categories).where(menu_categories.c.id == category_id)
        result = await db.execute(query)
        category = result.mappings().first()
        return dict(category) if category else None

    async def create_category(
        self, db: AsyncSession, category_data: CategoryCreate | Mapping[str, Any]
    ) -> dict:
        """
        Create a menu category.

        Raises:
            ValidationException: If any field is invalid
            ConflictException: If a category with the same name exists
        """
        data = parse_payload(CategoryCreate, category_data)

        query = (
            menu_categories.insert()
            .values(
                name=data.name,
                description=data.description,
                display_order=data.display_order,
                created_at=datetime.now(UTC),
            )
            .returning(menu_categories)
        )

        try:
            result = await db.execute(query)
            category = result.mappings().first()
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            raise ConflictException(f"Category '{data.name}' already exists") from e

        if not category:
            raise ValueError("Failed to create category")

        logger.info("menu_category_created", name=data.name)
        return dict(category)

    async def list_items(self, db: AsyncSession) -> list[dict]:
        """List menu items ordered by category then item display order."""
        query = self._item_query().order_by(
            menu_categories.c.display_order.asc(),
            menu_items.c.display_order.asc(),
            menu_items.c.name.asc(),
        )
        result = await db.execute(query)
        return [dict(row) for row in result.mappings().all()]

    async def get_item(self, db: AsyncSession, item_id: UUID) -> dict | None:
        """Get menu item by ID."""
        query = self._item_query().where(menu_items.c.id == item_id)
        result = await db.execute(query)
        item = result.mappings().first()
        return dict(item) if item else None

    async def _require_category(self, db: AsyncSession, category_id: UUID) -> None:
        if await self.get_category(db, category_id) is None:
            raise NotFoundException("Menu category not found")

    async def create_item(
        self,
        db: AsyncSession,
        item_data: MenuItemCreate | Mapping[str, Any],
        actor: Principal | None = None,
    ) -> dict:
        """
        Create a menu item.

        Raises:
            ValidationException: If any field is invalid
            NotFoundException: If the category does not exist
        """
        data = parse_payload(MenuItemCreate, item_data)
        await self._require_category(db, data.category_id)

        now = datetime.now(UTC)
        query = (
            menu_items.insert()
            .values(
                name=data.name,
                description=data.description,
                price=data.price,
                category_id=data.category_id,
                image_url=str(data.image_url) if data.image_url else None,
                is_available=data.is_available,
                is_featured=data.is_featured,
                allergens=data.allergens,
                preparation_time=data.preparation_time,
                display_order=data.display_order,
                created_at=now,
                updated_at=now,
                created_by=actor.id if actor is not None and actor.is_admin else None,
            )
            .returning(menu_items.c.id)
        )

        result = await db.execute(query)
        item_id = result.scalar_one()
        await db.commit()

        logger.info("menu_item_created", name=data.name)

        item = await self.get_item(db, item_id)
        if item is None:
            raise NotFoundException("Menu item not found")
        return item

    async def update_item(
        self,
        db: AsyncSession,
        item_id: UUID,
        item_data: MenuItemUpdate | Mapping[str, Any],
    ) -> dict:
        """
        Update the allow-listed fields of a menu item.

        Raises:
            ValidationException: If a supplied field is invalid
            NotFoundException: If the item or new category does not exist
        """
        data = parse_payload(MenuItemUpdate, item_data)
        updates = data.model_dump(exclude_unset=True, exclude_none=True)

        if await self.get_item(db, item_id) is None:
            raise NotFoundException("Menu item not found")

        if "category_id" in updates:
            await self._require_category(db, updates["category_id"])
        if "image_url" in updates:
            updates["image_url"] = str(updates["image_url"])

        if updates:
            updates["updated_at"] = datetime.now(UTC)
            query = update(menu_items).where(menu_items.c.id == item_id).values(**updates)
            await db.execute(query)
            await db.commit()
            logger.info("menu_item_updated", item_id=str(item_id), fields=sorted(updates))

        item = await self.get_item(db, item_id)
        if item is None:
            raise NotFoundException("Menu item not found")
        return item

    async def delete_item(self, db: AsyncSession, item_id: UUID) -> None:
        """
        Delete a menu item.

        Raises:
            NotFoundException: If the item does not exist
        """
        result = await db.execute(delete(menu_items).where(menu_items.c.id == item_id))

        if result.rowcount == 0:  # type: ignore[attr-defined]
            await db.rollback()
            raise NotFoundException("Menu item not found")

        await db.commit()
        logger.info("menu_item_deleted", item_id=str(item_id))
