"""Issuance Controller — mint/burn по log-кривой с комиссией и допуском

Mint(amount, payment):
1. amount >= MIN_MINT_AMOUNT, supply + amount <= CAP
2. price = integral_price(supply, supply + amount); price == 0 → PriceZero
3. payment >= price, иначе InsufficientPayment
4. fee = floor(amount * 3 / 100) выпускается получателю комиссии,
   amount - fee — вызывающему; оба через Eligibility Gate
5. reserve += price; refund (payment - price) вызывающему — последний шаг
6. событие Mint(recipient, amount, price)

Burn(amount):
1. amount > 0
2. fee переводится (не уничтожается) получателю комиссии
3. burn_amount = amount - fee уничтожается у вызывающего
4. price = integral_price(supply - burn_amount, supply); 0 → PriceZero
5. reserve >= price, иначе InsufficientReserve
6. payout price вызывающему — последний шаг
7. событие Burn(caller, amount, price)

Атомарность: каждое изменение ledger записывается в журнал; при любой
ошибке (включая отказ transport на refund/payout) журнал откатывается
компенсирующими операциями в обратном порядке, резерв восстанавливается,
событие не публикуется.

Reentrancy: явный guard на mint/burn/transfer.
"""

import logging
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, Union

from src.core.contracts import IssuanceEventValidator
from src.core.domain.address import normalize_address
from src.core.domain.events import (
    BurnQuote,
    BurnReceipt,
    BurnRecord,
    MintQuote,
    MintReceipt,
    MintRecord,
)
from src.core.domain.ledger import InsufficientBalance, Ledger
from src.core.domain.settings import IssuanceSettings
from src.core.domain.transport import NativeTransport
from src.core.domain.units import MIN_MINT_AMOUNT, split_fee
from src.core.math.curve_integral import CAP, integral_price
from src.core.math.fixed_point import validate_uint
from src.gatekeeper.gates.eligibility_gate import (
    EligibilityGate,
    EligibilityGateConfig,
    EligibilityGateResult,
    EligibilityOracle,
    SupplyPhase,
)
from src.issuance.errors import (
    CapExceeded,
    InsufficientPayment,
    InsufficientReserve,
    InvalidAmount,
    NotEligible,
    PriceZero,
    ReentrantCall,
)

logger = logging.getLogger(__name__)


# =============================================================================
# LEDGER JOURNAL
# =============================================================================


class LedgerJournal:
    """Журнал изменений ledger с компенсирующими операциями для отката."""

    def __init__(self, ledger: Ledger):
        self.ledger = ledger
        self._undo: List[Callable[[], None]] = []

    def mint(self, address: str, amount: int) -> None:
        if amount == 0:
            return
        self.ledger.mint(address, amount)
        self._undo.append(lambda: self.ledger.burn(address, amount))

    def burn(self, address: str, amount: int) -> None:
        if amount == 0:
            return
        self.ledger.burn(address, amount)
        self._undo.append(lambda: self.ledger.mint(address, amount))

    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        if amount == 0:
            return
        self.ledger.transfer(sender, recipient, amount)
        self._undo.append(lambda: self.ledger.transfer(recipient, sender, amount))

    def rollback(self) -> None:
        while self._undo:
            self._undo.pop()()


# =============================================================================
# CONTROLLER
# =============================================================================


class IssuanceController:
    """Контроллер выпуска по log-кривой.

    Единственный владелец изменений supply. Параметры кривой и комиссии —
    константы; settings неизменяемы после конструирования.
    """

    def __init__(
        self,
        settings: IssuanceSettings,
        ledger: Ledger,
        oracle: EligibilityOracle,
        transport: NativeTransport,
        gate_config: Optional[EligibilityGateConfig] = None,
        initial_reserve: int = 0
    ):
        """
        Args:
            settings: адреса контроллера допуска, комиссии и treasury
            ledger: внешний fungible ledger
            oracle: внешний eligibility oracle
            transport: отправка нативной валюты (refund / payout)
            gate_config: пороги фаз допуска (default: EligibilityGateConfig())
            initial_reserve: начальный резерв в валюте оплаты
        """
        validate_uint(initial_reserve, "initial_reserve")

        self.settings = settings
        self.ledger = ledger
        self.transport = transport
        self.gate = EligibilityGate(oracle, settings.exempt_addresses, gate_config)

        self._reserve = initial_reserve
        self._events: List[Union[MintRecord, BurnRecord]] = []
        self._entered = False

    # -------------------------------------------------------------------------
    # READS
    # -------------------------------------------------------------------------

    @property
    def reserve_balance(self) -> int:
        return self._reserve

    @property
    def events(self) -> Tuple[Union[MintRecord, BurnRecord], ...]:
        """Append-only лог событий Mint/Burn."""
        return tuple(self._events)

    @property
    def phase(self) -> SupplyPhase:
        return self.gate.phase_for(self.ledger.total_supply())

    def total_supply(self) -> int:
        return self.ledger.total_supply()

    def quote_mint(self, amount: int) -> int:
        """Цена mint amount при текущем supply (без побочных эффектов).

        Raises:
            InvalidAmount: amount не беззнаковое целое
            CapExceeded: supply + amount > CAP (в том числе amount > CAP)
        """
        self._validate_amount(amount)
        supply = self.ledger.total_supply()
        if supply + amount > CAP:
            raise CapExceeded(f"supply {supply} + amount {amount} > cap {CAP}")
        return integral_price(supply, supply + amount)

    def quote_burn(self, amount: int) -> int:
        """Цена burn amount при текущем supply (без побочных эффектов).

        Оценивается интервал ровно уничтожаемых единиц (amount - fee).

        Raises:
            InvalidAmount: amount не беззнаковое целое или превышает supply
        """
        self._validate_amount(amount)
        supply = self.ledger.total_supply()
        _, burn_amount = split_fee(amount)
        if burn_amount > supply:
            raise InvalidAmount(f"burn amount {burn_amount} exceeds supply {supply}")
        return integral_price(supply - burn_amount, supply)

    def get_mint_price(self, amount: int) -> MintQuote:
        """Котировка mint; fee в котировке всегда 0."""
        return MintQuote(price=self.quote_mint(amount), fee=0)

    def get_burn_price(self, amount: int) -> BurnQuote:
        """Котировка burn; fee в котировке всегда 0."""
        return BurnQuote(price=self.quote_burn(amount), fee=0)

    def export_events(self) -> List[Dict[str, Any]]:
        """Лог событий в формате контракта issuance_event (с валидацией)."""
        validator = IssuanceEventValidator()
        exported = []
        for record in self._events:
            data = record.to_contract()
            validator.validate(data)
            exported.append(data)
        return exported

    # -------------------------------------------------------------------------
    # MUTATIONS
    # -------------------------------------------------------------------------

    def mint(self, caller: str, amount: int, payment: int) -> MintReceipt:
        """Выпуск amount единиц за payment.

        Raises:
            InvalidAmount, CapExceeded, PriceZero, InsufficientPayment,
            NotEligible, ReentrantCall, TransferFailed (refund)
        """
        with self._non_reentrant():
            caller = normalize_address(caller)
            self._validate_amount(amount)
            validate_uint(payment, "payment")

            if amount < MIN_MINT_AMOUNT:
                raise InvalidAmount(f"mint amount {amount} < minimum {MIN_MINT_AMOUNT}")

            supply = self.ledger.total_supply()
            if supply + amount > CAP:
                raise CapExceeded(f"supply {supply} + amount {amount} > cap {CAP}")

            price = integral_price(supply, supply + amount)
            if price <= 0:
                raise PriceZero(f"zero price for mint amount {amount} at supply {supply}")

            if payment < price:
                raise InsufficientPayment(f"payment {payment} < price {price}")

            fee, net_amount = split_fee(amount)
            fee_recipient = self.settings.fee_recipient

            # Обе выдачи проверяются до первого изменения ledger
            self._require_eligible(fee_recipient, fee, supply)
            self._require_eligible(caller, net_amount, supply)

            refund = payment - price

            with self._atomic() as journal:
                journal.mint(fee_recipient, fee)
                journal.mint(caller, net_amount)
                self._reserve += price
                if refund > 0:
                    self.transport.send(caller, refund)

            record = MintRecord(
                sequence=len(self._events),
                recipient=caller,
                amount=amount,
                price=price,
            )
            self._events.append(record)

            logger.info(
                "mint committed: recipient=%s amount=%d fee=%d price=%d refund=%d",
                caller, amount, fee, price, refund,
            )

            return MintReceipt(record=record, fee=fee, net_amount=net_amount, refund=refund)

    def burn(self, caller: str, amount: int) -> BurnReceipt:
        """Погашение amount единиц с выплатой из резерва.

        Raises:
            InvalidAmount, InsufficientBalance, PriceZero, InsufficientReserve,
            NotEligible, ReentrantCall, TransferFailed (payout)
        """
        with self._non_reentrant():
            caller = normalize_address(caller)
            self._validate_amount(amount)

            if amount == 0:
                raise InvalidAmount("burn amount must be positive")

            balance = self.ledger.balance_of(caller)
            if balance < amount:
                raise InsufficientBalance(f"{caller}: balance {balance} < {amount}")

            supply = self.ledger.total_supply()
            fee, burn_amount = split_fee(amount)
            fee_recipient = self.settings.fee_recipient

            # Оценивается интервал ровно уничтожаемых единиц
            price = integral_price(supply - burn_amount, supply)
            if price <= 0:
                raise PriceZero(f"zero price for burn amount {amount} at supply {supply}")

            if self._reserve < price:
                raise InsufficientReserve(f"reserve {self._reserve} < price {price}")

            self._require_eligible(fee_recipient, fee, supply)

            with self._atomic() as journal:
                journal.transfer(caller, fee_recipient, fee)
                journal.burn(caller, burn_amount)
                self._reserve -= price
                self.transport.send(caller, price)

            record = BurnRecord(
                sequence=len(self._events),
                caller=caller,
                amount=amount,
                price=price,
            )
            self._events.append(record)

            logger.info(
                "burn committed: caller=%s amount=%d fee=%d burned=%d price=%d",
                caller, amount, fee, burn_amount, price,
            )

            return BurnReceipt(record=record, fee=fee, burned_amount=burn_amount)

    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        """Перевод между держателями через Eligibility Gate.

        Raises:
            InvalidAmount, InsufficientBalance, NotEligible, ReentrantCall
        """
        with self._non_reentrant():
            sender = normalize_address(sender)
            recipient = normalize_address(recipient)
            self._validate_amount(amount)

            increase = 0 if sender == recipient else amount
            self._require_eligible(recipient, increase, self.ledger.total_supply())

            self.ledger.transfer(sender, recipient, amount)

    # -------------------------------------------------------------------------
    # INTERNALS
    # -------------------------------------------------------------------------

    def _validate_amount(self, amount: int) -> None:
        try:
            validate_uint(amount, "amount")
        except (TypeError, ValueError) as e:
            raise InvalidAmount(str(e)) from e

    def _require_eligible(
        self,
        recipient: str,
        increase: int,
        total_supply: int
    ) -> EligibilityGateResult:
        result = self.gate.evaluate(
            recipient=recipient,
            current_balance=self.ledger.balance_of(recipient),
            increase=increase,
            total_supply=total_supply,
        )
        if not result.entry_allowed:
            logger.warning("recipient blocked: %s (%s)", result.recipient, result.details)
            raise NotEligible(result)
        return result

    @contextmanager
    def _non_reentrant(self) -> Iterator[None]:
        if self._entered:
            raise ReentrantCall("reentrant call into issuance controller")
        self._entered = True
        try:
            yield
        finally:
            self._entered = False

    @contextmanager
    def _atomic(self) -> Iterator[LedgerJournal]:
        journal = LedgerJournal(self.ledger)
        reserve_before = self._reserve
        try:
            yield journal
        except Exception as e:
            logger.warning("issuance rolled back: %r", e)
            journal.rollback()
            self._reserve = reserve_before
            raise
