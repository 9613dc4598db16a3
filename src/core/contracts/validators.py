"""
JSON Schema Contract Validators

Валидация JSON-формы персистентного состояния против контрактов в
contracts/schema/. Используется на пути восстановления движка
(Settlement.from_json) до построения pydantic моделей.

Схемы:
- engine_snapshot.json (персистентное состояние settlement core)
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterator

import jsonschema
from jsonschema import Draft202012Validator, ValidationError

# Корень проекта: src/core/contracts/validators.py → 4 уровня вверх
SCHEMA_DIR = Path(__file__).resolve().parents[3] / "contracts" / "schema"


@lru_cache(maxsize=None)
def load_schema(schema_name: str) -> Dict[str, Any]:
    """
    Загрузка и meta-validation JSON Schema (кэшируется).

    Raises:
        FileNotFoundError: Если файл схемы не найден
        ValueError: Если сама схема не проходит meta-validation
    """
    schema_path = SCHEMA_DIR / f"{schema_name}.json"
    if not schema_path.exists():
        raise FileNotFoundError(f"Schema not found: {schema_path}")

    with open(schema_path, "r", encoding="utf-8") as f:
        schema = json.load(f)

    try:
        Draft202012Validator.check_schema(schema)
    except jsonschema.SchemaError as e:
        raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}")

    return schema


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """Валидатор данных против одной JSON Schema."""

    def __init__(self, schema_name: str):
        self.schema_name = schema_name
        self.validator = Draft202012Validator(load_schema(schema_name))

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Raises:
            ValidationError: Если данные не соответствуют схеме
        """
        self.validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        return self.validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]) -> Iterator[ValidationError]:
        return self.validator.iter_errors(data)


class EngineSnapshotValidator(ContractValidator):
    def __init__(self):
        super().__init__("engine_snapshot")


def validate_engine_snapshot(data: Dict[str, Any]) -> None:
    """
    Валидация JSON-формы EngineSnapshot.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    EngineSnapshotValidator().validate(data)
