"""
Ledger — интерфейс fungible-asset ledger и in-memory реализация

Ledger — внешний коллаборатор: хранит балансы и supply. Контроллер выпуска
вызывает только пять операций Ledger и ничего не знает о хранении.

Инварианты стандартного fungible ledger:
1. transfer сохраняет total_supply
2. mint/burn изменяют total_supply ровно на amount
3. Баланс никогда не отрицателен
"""

from typing import Dict, Protocol

from src.core.math.fixed_point import validate_uint

from .address import normalize_address


class InsufficientBalance(Exception):
    """Баланс отправителя меньше запрошенного количества."""
    pass


class Ledger(Protocol):
    """Минимальный интерфейс ledger, используемый контроллером выпуска."""

    def total_supply(self) -> int: ...

    def balance_of(self, address: str) -> int: ...

    def mint(self, address: str, amount: int) -> None: ...

    def burn(self, address: str, amount: int) -> None: ...

    def transfer(self, sender: str, recipient: str, amount: int) -> None: ...


class InMemoryLedger:
    """
    Ledger в памяти процесса.

    Каждая операция атомарна: проверки выполняются до изменения состояния.
    """

    def __init__(self):
        self._balances: Dict[str, int] = {}
        self._total_supply = 0

    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, address: str) -> int:
        return self._balances.get(normalize_address(address), 0)

    def mint(self, address: str, amount: int) -> None:
        validate_uint(amount, "amount")
        address = normalize_address(address)
        self._balances[address] = self._balances.get(address, 0) + amount
        self._total_supply += amount

    def burn(self, address: str, amount: int) -> None:
        validate_uint(amount, "amount")
        address = normalize_address(address)
        balance = self._balances.get(address, 0)
        if balance < amount:
            raise InsufficientBalance(f"{address}: balance {balance} < {amount}")
        self._balances[address] = balance - amount
        self._total_supply -= amount

    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        validate_uint(amount, "amount")
        sender = normalize_address(sender)
        recipient = normalize_address(recipient)
        balance = self._balances.get(sender, 0)
        if balance < amount:
            raise InsufficientBalance(f"{sender}: balance {balance} < {amount}")
        self._balances[sender] = balance - amount
        self._balances[recipient] = self._balances.get(recipient, 0) + amount

    def holders(self) -> Dict[str, int]:
        """Снапшот ненулевых балансов."""
        return {addr: bal for addr, bal in self._balances.items() if bal > 0}
