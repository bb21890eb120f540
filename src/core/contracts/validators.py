"""
Issuance Event Contract Validators

Экспорт лога выпуска (IssuanceController.export_events) проходит через
JSON Schema контракт contracts/schema/issuance_event.json: каждая запись
Mint / Burn проверяется до выдачи наружу off-chain индексатору.

Схемы:
- issuance_event.json (Mint / Burn записи)
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

import jsonschema
from jsonschema import Draft202012Validator

# contracts/schema/ в корне репозитория (src/core/contracts/ → корень)
DEFAULT_SCHEMA_DIR: Path = Path(__file__).resolve().parents[3] / "contracts" / "schema"


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик контрактов лога выпуска.

    Контракт читается один раз и кэшируется; перед кэшированием схема
    проходит meta-validation по Draft 2020-12, чтобы битый контракт
    обнаруживался при старте, а не на первой экспортируемой записи.
    """

    def __init__(self, schema_dir: Optional[Path] = None):
        self._schema_dir = Path(schema_dir) if schema_dir is not None else DEFAULT_SCHEMA_DIR
        if not self._schema_dir.is_dir():
            raise RuntimeError(f"issuance contract directory missing: {self._schema_dir}")
        self._schemas: Dict[str, Dict[str, Any]] = {}

    @property
    def schema_dir(self) -> Path:
        return self._schema_dir

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Raises:
            FileNotFoundError: Нет файла <schema_name>.json
            ValueError: Контракт не является корректной Draft 2020-12 схемой
        """
        cached = self._schemas.get(schema_name)
        if cached is not None:
            return cached

        path = self._schema_dir / f"{schema_name}.json"
        if not path.is_file():
            raise FileNotFoundError(f"issuance contract '{schema_name}' not found at {path}")

        schema = json.loads(path.read_text(encoding="utf-8"))

        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"issuance contract '{schema_name}' is not a valid schema: {e.message}") from e

        self._schemas[schema_name] = schema
        return schema


_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """Draft 2020-12 валидатор одного контракта из SchemaLoader."""

    def __init__(self, schema_name: str, loader: Optional[SchemaLoader] = None):
        self.schema_name = schema_name
        self.schema = (loader or _SCHEMA_LOADER).load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Raises:
            jsonschema.ValidationError: Первое найденное нарушение контракта
        """
        self.validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        return self.validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]) -> Iterator[jsonschema.ValidationError]:
        """Все нарушения, упорядоченные по пути поля."""
        return iter(sorted(self.validator.iter_errors(data), key=lambda e: list(e.path)))


class IssuanceEventValidator(ContractValidator):
    """Контракт записи Mint / Burn лога выпуска."""

    def __init__(self, loader: Optional[SchemaLoader] = None):
        super().__init__("issuance_event", loader)


def validate_issuance_event(data: Dict[str, Any]) -> None:
    """
    Проверка одной экспортируемой записи Mint / Burn.

    Raises:
        jsonschema.ValidationError: Запись не соответствует issuance_event
    """
    IssuanceEventValidator().validate(data)
