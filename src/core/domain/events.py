"""
Issuance Events — записи Mint/Burn, котировки и квитанции

Immutable Pydantic модели. Записи событий образуют append-only лог для
off-chain индексации и сериализуются в контракт issuance_event
(contracts/schema/issuance_event.json).
"""

from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, Field

from .address import ADDRESS_PATTERN


# =============================================================================
# ENUMS
# =============================================================================


class IssuanceEventKind(str, Enum):
    """Тип события выпуска"""

    MINT = "Mint"
    BURN = "Burn"


# =============================================================================
# EVENT RECORDS
# =============================================================================


class MintRecord(BaseModel):
    """
    Событие Mint(recipient, amount, price).

    amount — полный объём выпуска, включая комиссию.
    """

    sequence: int = Field(..., ge=0, description="Позиция в логе событий")
    recipient: str = Field(..., pattern=ADDRESS_PATTERN, description="Получатель выпуска")
    amount: int = Field(..., gt=0, description="Выпущенное количество (18-decimal)")
    price: int = Field(..., gt=0, description="Уплаченная цена")

    model_config = {"frozen": True}

    @property
    def kind(self) -> IssuanceEventKind:
        return IssuanceEventKind.MINT

    def to_contract(self) -> Dict[str, Any]:
        """Сериализация в контракт issuance_event."""
        return {
            "event": self.kind.value,
            "sequence": self.sequence,
            "account": self.recipient,
            "amount": self.amount,
            "price": self.price,
        }


class BurnRecord(BaseModel):
    """
    Событие Burn(caller, amount, price).

    amount — полный объём запроса, включая комиссию.
    """

    sequence: int = Field(..., ge=0, description="Позиция в логе событий")
    caller: str = Field(..., pattern=ADDRESS_PATTERN, description="Инициатор погашения")
    amount: int = Field(..., gt=0, description="Запрошенное количество (18-decimal)")
    price: int = Field(..., gt=0, description="Выплаченная цена")

    model_config = {"frozen": True}

    @property
    def kind(self) -> IssuanceEventKind:
        return IssuanceEventKind.BURN

    def to_contract(self) -> Dict[str, Any]:
        """Сериализация в контракт issuance_event."""
        return {
            "event": self.kind.value,
            "sequence": self.sequence,
            "account": self.caller,
            "amount": self.amount,
            "price": self.price,
        }


# =============================================================================
# QUOTES
# =============================================================================


class MintQuote(BaseModel):
    """
    Котировка mint.

    fee всегда 0: комиссия взимается в единицах актива, а не в валюте
    оплаты, и в котировке носит справочный характер.
    """

    price: int = Field(..., ge=0)
    fee: int = Field(default=0, ge=0)

    model_config = {"frozen": True}


class BurnQuote(BaseModel):
    """Котировка burn. fee всегда 0 (см. MintQuote)."""

    price: int = Field(..., ge=0)
    fee: int = Field(default=0, ge=0)

    model_config = {"frozen": True}


# =============================================================================
# RECEIPTS
# =============================================================================


class MintReceipt(BaseModel):
    """Итог успешного mint."""

    record: MintRecord
    fee: int = Field(..., ge=0, description="Выпущено получателю комиссии")
    net_amount: int = Field(..., gt=0, description="Выпущено вызывающему")
    refund: int = Field(..., ge=0, description="Возврат переплаты")

    model_config = {"frozen": True}


class BurnReceipt(BaseModel):
    """Итог успешного burn."""

    record: BurnRecord
    fee: int = Field(..., ge=0, description="Переведено получателю комиссии")
    burned_amount: int = Field(..., gt=0, description="Уничтожено у вызывающего")

    model_config = {"frozen": True}
