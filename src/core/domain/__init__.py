"""
Domain models and value objects.

Contains currency units, roles and the persisted engine snapshot.
"""

from src.core.domain.roles import Role
from src.core.domain.snapshot import EngineSnapshot, RoleGrant
from src.core.domain.units import (
    UNIT_DECIMALS,
    WEI_PER_UNIT,
    from_base_units,
    to_base_units,
)

__all__ = [
    # Units module
    "UNIT_DECIMALS",
    "WEI_PER_UNIT",
    "from_base_units",
    "to_base_units",
    # Roles
    "Role",
    # Snapshot model
    "EngineSnapshot",
    "RoleGrant",
]
