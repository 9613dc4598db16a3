"""Logger — настройка глобального loguru logger.

- stderr sink всегда
- опциональный file sink с ротацией и retention
- настройка выполняется один раз (повторный вызов без force игнорируется)
"""

import os
import sys

from loguru import logger

from src.config.log_config import LogConfig

_LOGGER_CONFIGURED = False

_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}"


def setup_logging(config: LogConfig | None = None, force: bool = False) -> None:
    """Конфигурация глобального logger.

    Args:
        config: параметры логирования (default LogConfig())
        force: переконфигурировать, даже если уже настроен
    """
    global _LOGGER_CONFIGURED
    if _LOGGER_CONFIGURED and not force:
        return

    config = config or LogConfig()

    logger.remove()
    logger.add(sys.stderr, level=config.level, format=_FORMAT)

    if config.dir:
        os.makedirs(config.dir, exist_ok=True)
        logger.add(
            sink=os.path.join(config.dir, "settlement_{time:YYYY-MM-DD}.log"),
            rotation=config.rotation,
            retention=config.retention,
            level=config.level,
            format=_FORMAT,
            enqueue=True,  # потокобезопасная запись
            backtrace=True,
            diagnose=False,
        )

    _LOGGER_CONFIGURED = True
    logger.info(f"Logger initialized: level={config.level}, dir={config.dir or '-'}")
