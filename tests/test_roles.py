"""Tests for the staff role registry."""

import pytest

from cafe_backend.core.exceptions import BadRequestException, UnknownRoleException
from cafe_backend.core.roles import (
    FALLBACK_PREFIX,
    ROLE_NAMES,
    ROLE_PREFIXES,
    StaffRole,
    parse_role,
    prefix_for,
)


class TestRoleRegistry:
    """Tests for role lookup and identifier prefixes."""

    def test_registry_is_closed_set(self):
        """Exactly five roles are known."""
        assert set(ROLE_NAMES) == {"Manager", "Barista", "Cashier", "Baker", "Cleaner"}

    @pytest.mark.parametrize(
        ("role", "prefix"),
        [
            ("Manager", "MA"),
            ("Barista", "BA"),
            ("Cashier", "CA"),
            ("Baker", "BK"),
            ("Cleaner", "CL"),
        ],
    )
    def test_prefix_for_known_roles(self, role: str, prefix: str):
        """Each role maps to its two-letter prefix."""
        assert prefix_for(role) == prefix
        assert prefix_for(StaffRole(role)) == prefix

    def test_prefixes_are_unique(self):
        """No two roles share a prefix."""
        prefixes = list(ROLE_PREFIXES.values())
        assert len(prefixes) == len(set(prefixes))
        assert FALLBACK_PREFIX not in prefixes

    def test_unknown_role_raises(self):
        """Unknown roles are rejected by default."""
        with pytest.raises(UnknownRoleException) as exc_info:
            prefix_for("Sommelier")

        assert exc_info.value.role == "Sommelier"
        assert isinstance(exc_info.value, BadRequestException)
        assert exc_info.value.status_code == 400

    def test_unknown_role_fallback_prefix(self):
        """The generic prefix is only used when explicitly allowed."""
        assert prefix_for("Sommelier", allow_fallback=True) == "ST"
        assert prefix_for("Barista", allow_fallback=True) == "BA"

    def test_role_names_are_case_sensitive(self):
        """Role names must match exactly."""
        with pytest.raises(UnknownRoleException):
            parse_role("barista")

    def test_parse_role_accepts_member(self):
        """Registry members pass through unchanged."""
        assert parse_role(StaffRole.BAKER) is StaffRole.BAKER
        assert parse_role("Cleaner") is StaffRole.CLEANER
