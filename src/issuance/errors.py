"""Issuance errors — таксономия ошибок mint/burn.

Все ошибки прерывают операцию атомарно: к моменту, когда исключение
достигает вызывающего, изменения ledger и резерва откачены.

- InvalidAmount: количество вне допустимого диапазона
- CapExceeded: mint превысил бы CAP (терминально для запроса)
- PriceZero: количество слишком мало для ненулевой цены (повторить с большим)
- InsufficientPayment / InsufficientReserve: нехватка средств
- NotEligible: получатель отклонён Eligibility Gate
- ReentrantCall: повторный вход в mint/burn/transfer во время операции
"""

from src.gatekeeper.gates.eligibility_gate import EligibilityGateResult


class IssuanceError(Exception):
    """Базовая ошибка контроллера выпуска."""
    pass


class InvalidAmount(IssuanceError, ValueError):
    pass


class CapExceeded(IssuanceError):
    pass


class PriceZero(IssuanceError):
    pass


class InsufficientPayment(IssuanceError):
    pass


class InsufficientReserve(IssuanceError):
    pass


class ReentrantCall(IssuanceError):
    pass


class NotEligible(IssuanceError):
    """Получатель отклонён Eligibility Gate; результат гейта в `result`."""

    def __init__(self, result: EligibilityGateResult):
        self.result = result
        super().__init__(f"{result.recipient}: {result.block_reason} ({result.details})")
