"""
Contract Validation Module

Модуль для валидации JSON контрактов лога выпуска.
"""

from .validators import (
    ContractValidator,
    IssuanceEventValidator,
    SchemaLoader,
    validate_issuance_event,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "IssuanceEventValidator",
    # Functions
    "validate_issuance_event",
]
