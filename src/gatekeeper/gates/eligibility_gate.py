"""Eligibility Gate — допуск получателей положительного изменения баланса

Фазы определяются только текущим supply:
- BOOTSTRAP (supply <= 10_000_000 * WAD):
  * получатель должен быть признан eligible оракулом
  * баланс после изменения <= 100_000 * WAD
- OPEN (supply > 10_000_000 * WAD):
  * cap баланса не действует
  * eligibility проверяется как прежде

Освобождены по идентичности: treasury и получатель комиссии.

Ошибка оракула (любое исключение) → ORACLE_FAULT, трактуется как отказ
(fail-safe closed) и не пропагирует наружу. Различие INELIGIBLE /
ORACLE_FAULT сохраняется в результате для диагностики.

Фаза пересчитывается на каждом вызове из supply до изменения; burn ниже
порога влияет только на последующие вызовы.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Protocol

from src.core.domain.address import normalize_address
from src.core.domain.units import BOOTSTRAP_HOLDER_CAP, BOOTSTRAP_SUPPLY_THRESHOLD

logger = logging.getLogger(__name__)


# =============================================================================
# ENUMS
# =============================================================================


class SupplyPhase(str, Enum):
    """Фаза допуска по supply."""

    BOOTSTRAP = "BOOTSTRAP"
    OPEN = "OPEN"


class EligibilityStatus(str, Enum):
    """Классификация адреса оракулом."""

    ELIGIBLE = "ELIGIBLE"
    INELIGIBLE = "INELIGIBLE"
    ORACLE_FAULT = "ORACLE_FAULT"


# =============================================================================
# ORACLE
# =============================================================================


class EligibilityOracle(Protocol):
    """Внешний оракул допуска. Может выбрасывать исключения."""

    def is_eligible(self, address: str) -> bool: ...


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class EligibilityGateConfig:
    """Конфигурация Eligibility Gate."""

    # supply <= threshold → BOOTSTRAP
    bootstrap_supply_threshold: int = BOOTSTRAP_SUPPLY_THRESHOLD

    # Максимальный баланс держателя в BOOTSTRAP
    bootstrap_holder_cap: int = BOOTSTRAP_HOLDER_CAP


# =============================================================================
# RESULT
# =============================================================================


@dataclass(frozen=True)
class EligibilityGateResult:
    """Результат Eligibility Gate."""

    entry_allowed: bool
    block_reason: str

    recipient: str
    phase: SupplyPhase
    is_exempt: bool

    # None если оракул не опрашивался (exempt или нет увеличения)
    status: Optional[EligibilityStatus]

    balance_after: int

    # Детали
    details: str


# =============================================================================
# GATE
# =============================================================================


class EligibilityGate:
    """Eligibility Gate: supply-tier политика допуска.

    Порядок проверок:
    1. Нет увеличения баланса → пропуск
    2. Exempt адрес (treasury / fee recipient) → пропуск
    3. Классификация оракулом → блокировка если INELIGIBLE / ORACLE_FAULT
    4. BOOTSTRAP: balance_after > holder cap → блокировка
    """

    def __init__(
        self,
        oracle: EligibilityOracle,
        exempt_addresses: Iterable[str],
        config: Optional[EligibilityGateConfig] = None
    ):
        """
        Args:
            oracle: внешний eligibility oracle
            exempt_addresses: адреса, освобождённые от проверок
            config: пороги фаз (default: EligibilityGateConfig())
        """
        self.oracle = oracle
        self.exempt_addresses = frozenset(normalize_address(a) for a in exempt_addresses)
        self.config = config or EligibilityGateConfig()

    def phase_for(self, total_supply: int) -> SupplyPhase:
        """Фаза допуска для данного supply."""
        if total_supply <= self.config.bootstrap_supply_threshold:
            return SupplyPhase.BOOTSTRAP
        return SupplyPhase.OPEN

    def classify(self, address: str) -> EligibilityStatus:
        """Опрос оракула с fail-safe closed обработкой ошибок."""
        try:
            eligible = self.oracle.is_eligible(address)
        except Exception as e:
            logger.warning("eligibility oracle fault for %s: %r", address, e)
            return EligibilityStatus.ORACLE_FAULT

        # Только явный True считается допуском
        if eligible is True:
            return EligibilityStatus.ELIGIBLE
        return EligibilityStatus.INELIGIBLE

    def evaluate(
        self,
        recipient: str,
        current_balance: int,
        increase: int,
        total_supply: int
    ) -> EligibilityGateResult:
        """Оценка допуска положительного изменения баланса.

        Args:
            recipient: получатель изменения
            current_balance: баланс получателя до изменения
            increase: величина увеличения баланса
            total_supply: supply до изменения (определяет фазу)

        Returns:
            EligibilityGateResult с решением о допуске
        """
        recipient = normalize_address(recipient)
        phase = self.phase_for(total_supply)
        balance_after = current_balance + increase
        is_exempt = recipient in self.exempt_addresses

        # 1. Нет увеличения баланса
        if increase <= 0:
            return EligibilityGateResult(
                entry_allowed=True,
                block_reason="",
                recipient=recipient,
                phase=phase,
                is_exempt=is_exempt,
                status=None,
                balance_after=balance_after,
                details="PASS: no balance increase"
            )

        # 2. Exempt по идентичности
        if is_exempt:
            return EligibilityGateResult(
                entry_allowed=True,
                block_reason="",
                recipient=recipient,
                phase=phase,
                is_exempt=True,
                status=None,
                balance_after=balance_after,
                details=f"PASS: exempt address, phase={phase.value}"
            )

        # 3. Оракул
        status = self.classify(recipient)

        if status == EligibilityStatus.ORACLE_FAULT:
            return EligibilityGateResult(
                entry_allowed=False,
                block_reason="oracle_fault",
                recipient=recipient,
                phase=phase,
                is_exempt=False,
                status=status,
                balance_after=balance_after,
                details="Oracle fault: treated as not eligible"
            )

        if status == EligibilityStatus.INELIGIBLE:
            return EligibilityGateResult(
                entry_allowed=False,
                block_reason="not_eligible",
                recipient=recipient,
                phase=phase,
                is_exempt=False,
                status=status,
                balance_after=balance_after,
                details="Oracle classified recipient as not eligible"
            )

        # 4. Bootstrap holder cap
        if (
            phase == SupplyPhase.BOOTSTRAP
            and balance_after > self.config.bootstrap_holder_cap
        ):
            return EligibilityGateResult(
                entry_allowed=False,
                block_reason="bootstrap_holder_cap",
                recipient=recipient,
                phase=phase,
                is_exempt=False,
                status=status,
                balance_after=balance_after,
                details=(
                    f"BOOTSTRAP holder cap exceeded: balance_after={balance_after} "
                    f"> cap={self.config.bootstrap_holder_cap}"
                )
            )

        return EligibilityGateResult(
            entry_allowed=True,
            block_reason="",
            recipient=recipient,
            phase=phase,
            is_exempt=False,
            status=status,
            balance_after=balance_after,
            details=f"PASS: phase={phase.value}, balance_after={balance_after}"
        )
