"""Staff role registry and identifier prefixes."""

from enum import Enum

from cafe_backend.core.exceptions import UnknownRoleException


class StaffRole(str, Enum):
    """Closed set of café staff roles."""

    MANAGER = "Manager"
    BARISTA = "Barista"
    CASHIER = "Cashier"
    BAKER = "Baker"
    CLEANER = "Cleaner"


ROLE_PREFIXES: dict[StaffRole, str] = {
    StaffRole.MANAGER: "MA",
    StaffRole.BARISTA: "BA",
    StaffRole.CASHIER: "CA",
    StaffRole.BAKER: "BK",
    StaffRole.CLEANER: "CL",
}

# Generic prefix for roles outside the registry
FALLBACK_PREFIX = "ST"

ROLE_NAMES: tuple[str, ...] = tuple(role.value for role in StaffRole)


def parse_role(value: "StaffRole | str") -> StaffRole:
    """
    Resolve a role name to a registry member.

    Args:
        value: Role member or its name (e.g. "Barista")

    Returns:
        Matching StaffRole

    Raises:
        UnknownRoleException: If the role is not in the registry
    """
    if isinstance(value, StaffRole):
        return value
    try:
        return StaffRole(value)
    except ValueError:
        raise UnknownRoleException(str(value)) from None


def prefix_for(role: "StaffRole | str", allow_fallback: bool = False) -> str:
    """
    Get the two-letter staff identifier prefix for a role.

    Args:
        role: Role member or name
        allow_fallback: Return the generic "ST" prefix for unknown roles
            instead of raising

    Returns:
        Identifier prefix

    Raises:
        UnknownRoleException: If the role is unknown and no fallback is allowed
    """
    try:
        return ROLE_PREFIXES[parse_role(role)]
    except UnknownRoleException:
        if allow_fallback:
            return FALLBACK_PREFIX
        raise
