"""
Contract Validation Module

Модуль для валидации JSON контрактов персистентного состояния.
"""

from .validators import (
    SCHEMA_DIR,
    ContractValidator,
    EngineSnapshotValidator,
    load_schema,
    validate_engine_snapshot,
)

__all__ = [
    "SCHEMA_DIR",
    "ContractValidator",
    "EngineSnapshotValidator",
    "load_schema",
    "validate_engine_snapshot",
]
