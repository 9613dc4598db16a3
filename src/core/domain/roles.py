"""
Roles: роли AccessControl

Плоская модель ролей: иерархии и revoke нет.
"""

from enum import Enum


class Role(str, Enum):
    """Роль, которую может держать аккаунт."""

    ADMIN = "ADMIN"
