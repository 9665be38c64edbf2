"""Database models."""

from cafe_backend.models.admin_users import admin_users
from cafe_backend.models.base import metadata
from cafe_backend.models.menu import menu_categories, menu_items
from cafe_backend.models.role_counters import role_counters
from cafe_backend.models.staff_members import staff_members

__all__ = [
    "admin_users",
    "menu_categories",
    "menu_items",
    "metadata",
    "role_counters",
    "staff_members",
]
