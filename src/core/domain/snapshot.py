"""
EngineSnapshot: модель персистентного состояния settlement core

Immutable Pydantic модель, представляющая снапшот всего состояния, которое
внешний ledger/role-store обязан хранить:
- Supply и балансы аккаунтов
- Баланс treasury
- Timestamps последних rate-limited действий
- Выданные роли
- Неизменяемая конфигурация curve/cooldown

Полная совместимость с JSON Schema (contracts/schema/engine_snapshot.json).
"""

from pydantic import BaseModel, Field, model_validator

from .roles import Role


# =============================================================================
# NESTED MODELS
# =============================================================================


class RoleGrant(BaseModel):
    """Пара (account, role)."""

    account: str = Field(..., min_length=1, description="Идентификатор аккаунта")
    role: Role = Field(..., description="Выданная роль")

    model_config = {"frozen": True}


# =============================================================================
# ENGINE SNAPSHOT MODEL
# =============================================================================


class EngineSnapshot(BaseModel):
    """
    Снапшот состояния settlement core.

    Immutable модель (frozen=True). Все суммы в base units (int).
    Балансы с нулевым значением не хранятся.
    """

    # Метаданные
    schema_version: str = Field(
        "1", pattern="^1$", description="Версия схемы для tracking совместимости"
    )
    ts: int = Field(..., ge=0, description="Момент снапшота (unix seconds)")

    # Конфигурация
    price_increment: int = Field(..., gt=0, description="Шаг цены (base units за единицу)")
    cooldown_seconds: int = Field(..., ge=0, description="Cooldown между продажами (сек)")
    rate_limit_buys: bool = Field(False, description="Cooldown применяется и к buy")

    # Ledger
    total_supply: int = Field(..., ge=0, description="Текущий supply")
    balances: dict[str, int] = Field(
        default_factory=dict, description="Балансы аккаунтов (только ненулевые)"
    )

    # Treasury
    treasury_balance: int = Field(..., ge=0, description="Баланс treasury (base units)")

    # RateLimiter
    last_action_ts: dict[str, int] = Field(
        default_factory=dict, description="Последнее rate-limited действие аккаунта"
    )

    # AccessControl
    roles: list[RoleGrant] = Field(default_factory=list, description="Выданные роли")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_conservation(self) -> "EngineSnapshot":
        """
        Проверка сохранения: Σ balances == total_supply.

        Балансы и timestamps не могут быть отрицательными.
        """
        for account, balance in self.balances.items():
            if balance <= 0:
                raise ValueError(f"balance of {account!r} must be positive, got {balance}")

        for account, ts in self.last_action_ts.items():
            if ts < 0:
                raise ValueError(f"last_action_ts of {account!r} must be >= 0, got {ts}")

        balances_sum = sum(self.balances.values())
        if balances_sum != self.total_supply:
            raise ValueError(
                f"sum of balances {balances_sum} != total_supply {self.total_supply}"
            )
        return self
