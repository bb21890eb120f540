"""Issuance — mint/burn по log-кривой.

- IssuanceController: цена, комиссия, оплата/возврат, допуск, события
- Таксономия ошибок выпуска
"""

from .controller import IssuanceController, LedgerJournal
from .errors import (
    CapExceeded,
    InsufficientPayment,
    InsufficientReserve,
    InvalidAmount,
    IssuanceError,
    NotEligible,
    PriceZero,
    ReentrantCall,
)

__all__ = [
    "IssuanceController",
    "LedgerJournal",
    "IssuanceError",
    "InvalidAmount",
    "CapExceeded",
    "PriceZero",
    "InsufficientPayment",
    "InsufficientReserve",
    "NotEligible",
    "ReentrantCall",
]
