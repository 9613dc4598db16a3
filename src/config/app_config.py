"""AppConfig — конфигурация приложения из YAML.

Пример config.yml:

    engine:
      price_increment: 10000000000000000   # 0.01 unit
      cooldown_seconds: 60
      rate_limit_buys: false
      admin: "treasury-admin"
    log:
      level: INFO
      dir: logs
"""

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from src.config.log_config import LogConfig
from src.core.math.price_curve import DEFAULT_PRICE_INCREMENT
from src.settlement.config import DEFAULT_COOLDOWN_SECONDS, SettlementConfig


class EngineSection(BaseModel):
    """Параметры settlement core."""

    price_increment: int = Field(DEFAULT_PRICE_INCREMENT, gt=0, description="Шаг цены (base units)")
    cooldown_seconds: int = Field(DEFAULT_COOLDOWN_SECONDS, ge=0, description="Cooldown sell (сек)")
    rate_limit_buys: bool = Field(False, description="Применять cooldown и к buy")
    admin: str = Field(..., min_length=1, description="Аккаунт, получающий ADMIN при инициализации")

    model_config = {"frozen": True}

    def to_settlement_config(self) -> SettlementConfig:
        return SettlementConfig(
            price_increment=self.price_increment,
            cooldown_seconds=self.cooldown_seconds,
            rate_limit_buys=self.rate_limit_buys,
        )


class AppConfig(BaseModel):
    engine: EngineSection
    log: LogConfig = Field(default_factory=LogConfig)

    model_config = {"frozen": True}

    @classmethod
    def load(cls, path: str | os.PathLike) -> "AppConfig":
        """Загрузка YAML конфигурации.

        Raises:
            FileNotFoundError: если файла нет
            pydantic.ValidationError: если значения невалидны
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

        return cls(**raw)
