"""
IssuanceUnits — единицы количества, пороги и расчёт комиссии

Все количества — int в 18-decimal (WAD). Единственный допустимый способ
расчёта комиссии mint/burn — fee_of / split_fee из этого модуля.

ЗАПРЕЩЕНО считать комиссию в обход этого модуля.
"""

from typing import Final

from src.core.math.fixed_point import WAD, validate_uint

# =============================================================================
# КОМИССИЯ
# =============================================================================
# fee = floor(amount * FEE_NUMERATOR / FEE_DENOMINATOR)
FEE_NUMERATOR: Final[int] = 3
FEE_DENOMINATOR: Final[int] = 100


# =============================================================================
# ПОРОГИ
# =============================================================================
# Минимальное количество для mint (0.01 единицы)
MIN_MINT_AMOUNT: Final[int] = WAD // 100

# Supply, до которого (включительно) действует bootstrap-фаза
BOOTSTRAP_SUPPLY_THRESHOLD: Final[int] = 10_000_000 * WAD

# Максимальный баланс держателя в bootstrap-фазе
BOOTSTRAP_HOLDER_CAP: Final[int] = 100_000 * WAD


# =============================================================================
# КОМИССИЯ: РАСЧЁТ
# =============================================================================


def fee_of(amount: int) -> int:
    """
    Комиссия с количества: floor(amount * 3 / 100).

    Raises:
        TypeError, ValueError: Если amount не беззнаковое целое
    """
    validate_uint(amount, "amount")
    return amount * FEE_NUMERATOR // FEE_DENOMINATOR


def split_fee(amount: int) -> tuple[int, int]:
    """
    Разделение количества на (fee, net), fee + net == amount.

    Examples:
        >>> split_fee(100)
        (3, 97)
        >>> split_fee(33)
        (0, 33)
    """
    fee = fee_of(amount)
    return fee, amount - fee
