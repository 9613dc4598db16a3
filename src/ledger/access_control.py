"""AccessControl — хранилище членства в ролях.

Внешний коллаборатор settlement core. Core требует только
has_role(account, role) и выдачу ADMIN инициализирующему аккаунту.

Модель плоская: иерархии ролей нет, revoke нет. Аккаунт может держать
несколько ролей одновременно.
"""

from abc import ABC, abstractmethod
from typing import List, Set, Tuple

from src.core.domain.roles import Role
from src.core.errors import Unauthorized
from src.ledger.ledger import validate_account


class AccessControl(ABC):
    """Интерфейс role store, который потребляет Settlement/Treasury."""

    @abstractmethod
    def has_role(self, account: str, role: Role) -> bool:
        ...

    @abstractmethod
    def grant_role(self, caller: str, account: str, role: Role) -> bool:
        ...

    @abstractmethod
    def grants(self) -> List[Tuple[str, Role]]:
        ...

    def require_role(self, account: str, role: Role) -> None:
        """Raises Unauthorized, если account не держит role."""
        if not self.has_role(account, role):
            raise Unauthorized(account, role.value)


class InMemoryAccessControl(AccessControl):
    """Role store в памяти процесса: множество пар (account, role)."""

    def __init__(self, admin: str):
        """
        Args:
            admin: инициализирующий аккаунт, получает Role.ADMIN
        """
        validate_account(admin, "admin")

        self._grants: Set[Tuple[str, Role]] = set()
        self._grants.add((admin, Role.ADMIN))

    @classmethod
    def from_grants(cls, grants: List[Tuple[str, Role]]) -> "InMemoryAccessControl":
        """Восстановление из сохранённых grants (минимум один ADMIN)."""
        admins = [account for account, role in grants if role == Role.ADMIN]
        if not admins:
            raise ValueError("restored role set must contain at least one ADMIN grant")

        store = cls(admins[0])
        for account, role in grants:
            store._grants.add((account, Role(role)))
        return store

    def has_role(self, account: str, role: Role) -> bool:
        return (account, role) in self._grants

    def grant_role(self, caller: str, account: str, role: Role) -> bool:
        """Выдача роли. Только для держателей ADMIN.

        Args:
            caller: аккаунт, выполняющий выдачу
            account: получатель роли
            role: выдаваемая роль

        Returns:
            True если роль выдана впервые, False если уже была

        Raises:
            Unauthorized: если caller не держит ADMIN
        """
        self.require_role(caller, Role.ADMIN)

        validate_account(account)

        grant = (account, role)
        if grant in self._grants:
            return False

        self._grants.add(grant)
        return True

    def grants(self) -> List[Tuple[str, Role]]:
        """Все grants, отсортированные по (account, role)."""
        return sorted(self._grants, key=lambda g: (g[0], g[1].value))
