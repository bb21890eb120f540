"""
Native Transport — отправка нативной валюты (refund / payout)

Внешний коллаборатор. Ошибка отправки прерывает всю операцию выпуска
целиком (контроллер откатывает изменения ledger и резерва).
"""

from typing import List, Protocol, Tuple

from src.core.math.fixed_point import validate_uint

from .address import normalize_address


class TransferFailed(Exception):
    """Отправка нативной валюты не выполнена."""
    pass


class NativeTransport(Protocol):
    """Синхронная отправка нативной валюты."""

    def send(self, recipient: str, amount: int) -> None: ...


class InMemoryTransport:
    """
    Transport в памяти: записывает отправки, может имитировать отказ.

    Args:
        fail: Если True, каждая отправка с amount > 0 завершается TransferFailed
    """

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent: List[Tuple[str, int]] = []

    def send(self, recipient: str, amount: int) -> None:
        validate_uint(amount, "amount")
        recipient = normalize_address(recipient)
        if self.fail and amount > 0:
            raise TransferFailed(f"native transfer of {amount} to {recipient} rejected")
        self.sent.append((recipient, amount))

    def total_sent_to(self, recipient: str) -> int:
        recipient = normalize_address(recipient)
        return sum(amount for addr, amount in self.sent if addr == recipient)
