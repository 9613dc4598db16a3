"""LogConfig — параметры логирования."""

from typing import Literal, Optional

from pydantic import BaseModel, Field


class LogConfig(BaseModel):
    """Параметры loguru sinks.

    dir=None отключает file sink (только stderr).
    """

    dir: Optional[str] = Field(None, description="Каталог для файловых логов")
    rotation: str = Field("1 day", description="Ротация файлового лога")
    retention: str = Field("30 days", description="Срок хранения файловых логов")
    level: Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    model_config = {"frozen": True}
