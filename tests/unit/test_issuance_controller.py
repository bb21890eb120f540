"""
Tests for Issuance Controller

Покрывает:
- Котировки mint / burn (чистые, fee == 0)
- Mint: оплата, возврат переплаты, комиссия, MIN / CAP, PriceZero
- Burn: комиссия переводом, выплата из резерва, InsufficientReserve
- Eligibility Gate на всех увеличениях баланса, фазы BOOTSTRAP / OPEN
- Атомарность при отказе transport и reentrancy guard
- Экспорт лога событий в контракт issuance_event
"""

import pytest

from src.core.domain import (
    BOOTSTRAP_HOLDER_CAP,
    BOOTSTRAP_SUPPLY_THRESHOLD,
    MIN_MINT_AMOUNT,
    InMemoryLedger,
    InMemoryTransport,
    InsufficientBalance,
    IssuanceSettings,
    TransferFailed,
    split_fee,
)
from src.core.math.curve_integral import CAP, integral_price, reserve_at
from src.core.math.fixed_point import WAD
from src.gatekeeper.gates.eligibility_gate import SupplyPhase
from src.issuance import (
    CapExceeded,
    InsufficientPayment,
    InsufficientReserve,
    InvalidAmount,
    IssuanceController,
    NotEligible,
    PriceZero,
    ReentrantCall,
)

ALICE = "0x" + "a1" * 20
BOB = "0x" + "b2" * 20
CAROL = "0x" + "c3" * 20
FEE_RECIPIENT = "0x" + "fe" * 20
TREASURY = "0x" + "7e" * 20
ORACLE = "0x" + "0c" * 20

# Net после комиссии ровно BOOTSTRAP_HOLDER_CAP
CAP_EXACT_MINT = 103092783505154639175257


class AllowlistOracle:
    def __init__(self, allowed):
        self.allowed = {a.lower() for a in allowed}

    def is_eligible(self, address: str) -> bool:
        return address.lower() in self.allowed


class FaultyOracle:
    def is_eligible(self, address: str) -> bool:
        raise ConnectionError("oracle down")


class ReentrantTransport:
    """Transport, повторно вызывающий mint во время отправки."""

    def __init__(self):
        self.controller = None

    def send(self, recipient: str, amount: int) -> None:
        self.controller.mint(recipient, WAD, 10**40)


@pytest.fixture
def settings():
    return IssuanceSettings(
        controller_address=ORACLE,
        fee_recipient=FEE_RECIPIENT,
        treasury_address=TREASURY,
    )


@pytest.fixture
def ledger():
    return InMemoryLedger()


@pytest.fixture
def transport():
    return InMemoryTransport()


@pytest.fixture
def controller(settings, ledger, transport):
    return IssuanceController(settings, ledger, AllowlistOracle([ALICE, BOB]), transport)


def snapshot(controller):
    ledger = controller.ledger
    return (
        ledger.total_supply(),
        ledger.holders(),
        controller.reserve_balance,
        controller.events,
    )


# =============================================================================
# QUOTES
# =============================================================================


class TestQuotes:
    """Котировки без побочных эффектов"""

    def test_quote_mint_increases_with_amount(self, controller):
        one = controller.quote_mint(WAD)
        two = controller.quote_mint(2 * WAD)
        assert 0 < one < two

    def test_quote_mint_matches_integral(self, controller):
        assert controller.quote_mint(1_000 * WAD) == integral_price(0, 1_000 * WAD)

    def test_quotes_report_zero_fee(self, controller):
        controller.mint(ALICE, 1_000 * WAD, controller.quote_mint(1_000 * WAD))

        mint_quote = controller.get_mint_price(WAD)
        burn_quote = controller.get_burn_price(100 * WAD)

        assert mint_quote.fee == 0
        assert burn_quote.fee == 0
        assert mint_quote.price == controller.quote_mint(WAD)
        assert burn_quote.price == controller.quote_burn(100 * WAD)

    def test_quote_burn_prices_net_amount(self, controller):
        controller.mint(ALICE, 1_000 * WAD, controller.quote_mint(1_000 * WAD))
        _, burned = split_fee(100 * WAD)
        supply = controller.total_supply()
        assert controller.quote_burn(100 * WAD) == integral_price(supply - burned, supply)

    def test_quotes_are_pure(self, controller):
        controller.mint(ALICE, 10 * WAD, controller.quote_mint(10 * WAD))
        before = snapshot(controller)

        for _ in range(3):
            controller.quote_mint(5 * WAD)
            controller.quote_burn(5 * WAD)
            controller.get_mint_price(5 * WAD)

        assert snapshot(controller) == before

    def test_quote_mint_beyond_cap_raises(self, controller):
        with pytest.raises(CapExceeded):
            controller.quote_mint(CAP + 1)

    def test_quote_burn_beyond_supply_raises(self, controller):
        with pytest.raises(InvalidAmount, match="exceeds supply"):
            controller.quote_burn(WAD)


# =============================================================================
# MINT
# =============================================================================


class TestMint:
    """Mint: цена, комиссия, возврат"""

    def test_mint_with_exact_payment(self, controller, ledger, transport):
        amount = 1_000 * WAD
        price = controller.quote_mint(amount)

        receipt = controller.mint(ALICE, amount, price)

        fee, net = split_fee(amount)
        assert receipt.fee == fee == 30 * WAD
        assert receipt.net_amount == net
        assert receipt.refund == 0
        assert receipt.record.price == price
        assert ledger.balance_of(ALICE) == net
        assert ledger.balance_of(FEE_RECIPIENT) == fee
        assert ledger.total_supply() == amount
        assert controller.reserve_balance == price
        assert transport.sent == []

    def test_overpayment_refunded(self, controller, transport):
        amount = 10 * WAD
        price = controller.quote_mint(amount)

        receipt = controller.mint(ALICE, amount, price + 12_345)

        assert receipt.refund == 12_345
        assert transport.total_sent_to(ALICE) == 12_345
        assert controller.reserve_balance == price

    def test_underpayment_rejected(self, controller):
        price = controller.quote_mint(10 * WAD)
        before = snapshot(controller)

        with pytest.raises(InsufficientPayment):
            controller.mint(ALICE, 10 * WAD, price - 1)

        assert snapshot(controller) == before

    @pytest.mark.parametrize("amount", [0, MIN_MINT_AMOUNT - 1, -WAD, 1.5])
    def test_invalid_amount(self, controller, amount):
        with pytest.raises(InvalidAmount):
            controller.mint(ALICE, amount, 10**40)

    def test_minimum_amount_at_zero_supply_has_zero_price(self, controller):
        with pytest.raises(PriceZero):
            controller.mint(ALICE, MIN_MINT_AMOUNT, 10**40)
        assert controller.total_supply() == 0

    def test_amount_above_cap_at_zero_supply(self, controller):
        """supply + amount == CAP + 1 при supply == 0"""
        before = snapshot(controller)

        with pytest.raises(CapExceeded):
            controller.mint(ALICE, CAP + 1, 10**60)

        assert snapshot(controller) == before

    def test_cap_boundary(self, controller, ledger):
        with pytest.raises(CapExceeded):
            controller.mint(ALICE, CAP + 1, 10**60)

        ledger.mint(TREASURY, CAP - 5 * WAD)

        with pytest.raises(CapExceeded):
            controller.quote_mint(5 * WAD + 1)
        with pytest.raises(CapExceeded):
            controller.mint(ALICE, 5 * WAD + 1, 10**40)

        controller.mint(ALICE, 5 * WAD, controller.quote_mint(5 * WAD))
        assert ledger.total_supply() == CAP

        with pytest.raises(CapExceeded):
            controller.mint(ALICE, MIN_MINT_AMOUNT, 10**40)

    def test_events_sequenced(self, controller):
        controller.mint(ALICE, WAD, controller.quote_mint(WAD))
        controller.mint(BOB, 2 * WAD, controller.quote_mint(2 * WAD))

        assert [e.sequence for e in controller.events] == [0, 1]
        assert controller.events[1].recipient == BOB
        assert controller.events[1].amount == 2 * WAD


# =============================================================================
# ELIGIBILITY
# =============================================================================


class TestMintEligibility:
    """Допуск получателей mint"""

    def test_cap_exact_amount_nets_holder_cap(self):
        assert split_fee(CAP_EXACT_MINT)[1] == BOOTSTRAP_HOLDER_CAP
        assert split_fee(CAP_EXACT_MINT + 1)[1] == BOOTSTRAP_HOLDER_CAP + 1

    def test_bootstrap_holder_cap(self, controller, ledger):
        over = CAP_EXACT_MINT + 1
        with pytest.raises(NotEligible) as exc_info:
            controller.mint(ALICE, over, controller.quote_mint(over))
        assert exc_info.value.result.block_reason == "bootstrap_holder_cap"
        assert ledger.total_supply() == 0

        controller.mint(ALICE, CAP_EXACT_MINT, controller.quote_mint(CAP_EXACT_MINT))
        assert ledger.balance_of(ALICE) == BOOTSTRAP_HOLDER_CAP

    def test_open_phase_lifts_holder_cap(self, controller, ledger):
        ledger.mint(TREASURY, BOOTSTRAP_SUPPLY_THRESHOLD + 1)
        assert controller.phase == SupplyPhase.OPEN

        over = CAP_EXACT_MINT + 1
        controller.mint(ALICE, over, controller.quote_mint(over))

        assert ledger.balance_of(ALICE) == BOOTSTRAP_HOLDER_CAP + 1

    def test_ineligible_caller_rejected(self, controller):
        before = snapshot(controller)

        with pytest.raises(NotEligible) as exc_info:
            controller.mint(CAROL, WAD, controller.quote_mint(WAD))

        assert exc_info.value.result.block_reason == "not_eligible"
        assert snapshot(controller) == before

    def test_oracle_fault_rejects_caller(self, settings, ledger, transport):
        controller = IssuanceController(settings, ledger, FaultyOracle(), transport)

        with pytest.raises(NotEligible) as exc_info:
            controller.mint(ALICE, WAD, controller.quote_mint(WAD))

        assert exc_info.value.result.block_reason == "oracle_fault"
        assert ledger.total_supply() == 0

    def test_fee_recipient_exempt_from_holder_cap(self, controller, ledger):
        ledger.mint(FEE_RECIPIENT, BOOTSTRAP_HOLDER_CAP)

        controller.mint(ALICE, 1_000 * WAD, controller.quote_mint(1_000 * WAD))

        assert ledger.balance_of(FEE_RECIPIENT) == BOOTSTRAP_HOLDER_CAP + 30 * WAD

    def test_phase_transitions_follow_supply(self, settings, ledger, transport):
        ledger.mint(TREASURY, BOOTSTRAP_SUPPLY_THRESHOLD - WAD)
        controller = IssuanceController(
            settings,
            ledger,
            AllowlistOracle([ALICE]),
            transport,
            initial_reserve=reserve_at(BOOTSTRAP_SUPPLY_THRESHOLD - WAD),
        )
        assert controller.phase == SupplyPhase.BOOTSTRAP

        controller.mint(ALICE, 2 * WAD, controller.quote_mint(2 * WAD))
        assert controller.phase == SupplyPhase.OPEN

        controller.burn(ALICE, ledger.balance_of(ALICE))
        assert controller.phase == SupplyPhase.BOOTSTRAP


# =============================================================================
# BURN
# =============================================================================


class TestBurn:
    """Burn: комиссия переводом, выплата из резерва"""

    def test_mint_then_burn(self, controller, ledger, transport):
        p1 = controller.quote_mint(1_000 * WAD)
        controller.mint(ALICE, 1_000 * WAD, p1)
        p2 = controller.quote_mint(1_000 * WAD)
        controller.mint(BOB, 1_000 * WAD, p2)
        assert p2 > p1

        amount = ledger.balance_of(ALICE)
        fee, burned = split_fee(amount)
        supply = ledger.total_supply()

        receipt = controller.burn(ALICE, amount)

        price = receipt.record.price
        assert price == integral_price(supply - burned, supply)
        assert 0 < price < p2
        assert receipt.fee == fee
        assert receipt.burned_amount == burned
        assert ledger.total_supply() == supply - burned
        assert ledger.balance_of(ALICE) == 0
        assert ledger.balance_of(FEE_RECIPIENT) == 60 * WAD + fee
        assert controller.reserve_balance == p1 + p2 - price
        assert transport.total_sent_to(ALICE) == price

    def test_burn_fee_transferred_not_destroyed(self, controller, ledger):
        controller.mint(ALICE, 1_000 * WAD, controller.quote_mint(1_000 * WAD))
        supply = ledger.total_supply()
        fee_balance = ledger.balance_of(FEE_RECIPIENT)

        controller.burn(ALICE, 100 * WAD)

        assert ledger.total_supply() == supply - 97 * WAD
        assert ledger.balance_of(FEE_RECIPIENT) == fee_balance + 3 * WAD

    def test_zero_amount_rejected(self, controller):
        with pytest.raises(InvalidAmount):
            controller.burn(ALICE, 0)

    def test_insufficient_balance(self, controller):
        with pytest.raises(InsufficientBalance):
            controller.burn(BOB, WAD)

    def test_insufficient_reserve(self, controller, ledger):
        ledger.mint(ALICE, 1_000 * WAD)
        before = snapshot(controller)

        with pytest.raises(InsufficientReserve):
            controller.burn(ALICE, 1_000 * WAD)

        assert snapshot(controller) == before

    def test_dust_burn_has_zero_price(self, settings, ledger, transport):
        ledger.mint(ALICE, 1_000 * WAD)
        controller = IssuanceController(
            settings, ledger, AllowlistOracle([ALICE]), transport,
            initial_reserve=reserve_at(1_000 * WAD),
        )
        with pytest.raises(PriceZero):
            controller.burn(ALICE, 1)


# =============================================================================
# ATOMICITY
# =============================================================================


class TestAtomicity:
    """Откат при отказе transport и повторном входе"""

    def test_refund_failure_rolls_back_mint(self, controller, transport):
        controller.mint(ALICE, WAD, controller.quote_mint(WAD))
        before = snapshot(controller)
        transport.fail = True

        with pytest.raises(TransferFailed):
            controller.mint(ALICE, 10 * WAD, controller.quote_mint(10 * WAD) + 1)

        assert snapshot(controller) == before

    def test_exact_payment_needs_no_transport(self, controller, transport):
        transport.fail = True
        controller.mint(ALICE, 10 * WAD, controller.quote_mint(10 * WAD))
        assert len(controller.events) == 1

    def test_payout_failure_rolls_back_burn(self, controller, ledger, transport):
        controller.mint(ALICE, 1_000 * WAD, controller.quote_mint(1_000 * WAD))
        before = snapshot(controller)
        transport.fail = True

        with pytest.raises(TransferFailed):
            controller.burn(ALICE, 500 * WAD)

        assert snapshot(controller) == before
        assert ledger.balance_of(FEE_RECIPIENT) == 30 * WAD

    def test_reentrant_call_rejected(self, settings, ledger):
        transport = ReentrantTransport()
        controller = IssuanceController(settings, ledger, AllowlistOracle([ALICE]), transport)
        transport.controller = controller

        with pytest.raises(ReentrantCall):
            controller.mint(ALICE, 10 * WAD, controller.quote_mint(10 * WAD) + 1)

        assert ledger.total_supply() == 0
        assert controller.reserve_balance == 0
        assert controller.events == ()

        # Guard освобождён после ошибки
        controller.mint(ALICE, 10 * WAD, controller.quote_mint(10 * WAD))
        assert ledger.total_supply() == 10 * WAD


# =============================================================================
# TRANSFER
# =============================================================================


class TestTransfer:
    """Перевод через Eligibility Gate"""

    @pytest.fixture
    def funded(self, controller):
        controller.mint(ALICE, 1_000 * WAD, controller.quote_mint(1_000 * WAD))
        return controller

    def test_transfer_to_eligible(self, funded, ledger):
        funded.transfer(ALICE, BOB, 100 * WAD)
        assert ledger.balance_of(BOB) == 100 * WAD
        assert ledger.balance_of(ALICE) == 870 * WAD

    def test_transfer_to_ineligible_rejected(self, funded, ledger):
        with pytest.raises(NotEligible):
            funded.transfer(ALICE, CAROL, WAD)
        assert ledger.balance_of(ALICE) == 970 * WAD

    def test_transfer_to_exempt(self, funded, ledger):
        funded.transfer(ALICE, TREASURY, WAD)
        assert ledger.balance_of(TREASURY) == WAD

    def test_transfer_respects_holder_cap(self, funded, ledger):
        ledger.mint(BOB, BOOTSTRAP_HOLDER_CAP)
        with pytest.raises(NotEligible) as exc_info:
            funded.transfer(ALICE, BOB, 1)
        assert exc_info.value.result.block_reason == "bootstrap_holder_cap"

    def test_self_transfer_not_gated(self, settings, ledger, transport):
        ledger.mint(CAROL, WAD)
        controller = IssuanceController(settings, ledger, AllowlistOracle([]), transport)
        controller.transfer(CAROL, CAROL, WAD)
        assert ledger.balance_of(CAROL) == WAD


# =============================================================================
# EVENT EXPORT
# =============================================================================


class TestExportEvents:
    def test_export_matches_contract(self, controller):
        controller.mint(ALICE, 1_000 * WAD, controller.quote_mint(1_000 * WAD))
        controller.burn(ALICE, 100 * WAD)

        exported = controller.export_events()

        assert [e["event"] for e in exported] == ["Mint", "Burn"]
        assert [e["sequence"] for e in exported] == [0, 1]
        assert exported[1]["account"] == ALICE
        assert exported[1]["amount"] == 100 * WAD

    def test_export_empty(self, controller):
        assert controller.export_events() == []
