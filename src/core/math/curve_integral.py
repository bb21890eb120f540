"""
Curve Integral — цена выпуска/погашения как интеграл log-кривой

Форма маржинальной цены:
    price(x) ∝ ln(k·x + 1),   k = 1 / CURVE_SCALE (на целую единицу)

Первообразная (с точностью до константы):
    F(x) ∝ (x + 1/k)·ln(k·x + 1) - x  =  (1/k)·(U·ln U - k·x),   U = k·x + 1

Цена интервала [a, b]:
    integral_price(a, b) = (T(b) - T(a)) * PRICE_MULTIPLIER
    T(s) = U_wad·ln(U) - (U_wad - WAD)          (18-decimal)

Два независимых пути масштабирования:
- 18-decimal путь для линейных членов: U_wad = s // CURVE_SCALE + WAD
- 64.64 путь для логарифма: U_x64 = s·2**64 // (CURVE_SCALE·WAD) + 2**64

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. a > b → RangeError
2. integral_price(a, a) == 0
3. integral_price(a, b) + integral_price(b, c) == integral_price(a, c)
   (каждая цена — разность одной детерминированной функции T)
4. Цена никогда не отрицательна
"""

from typing import Final

from src.core.math.fixed_point import (
    ONE_X64,
    WAD,
    mul_div,
    mul_x64,
    validate_uint,
)
from src.core.math.fixed_point_log import ln

# =============================================================================
# ПАРАМЕТРЫ КРИВОЙ
# =============================================================================

# 1/k: масштаб supply перед логарифмом (k = 2e-8 на целую единицу)
CURVE_SCALE: Final[int] = 50_000_000

# Финальный множитель, переводящий 18-decimal разность T в единицы
# валюты оплаты
PRICE_MULTIPLIER: Final[int] = 1_250_000_000

# Максимальный supply (1e9 единиц, 18 decimals)
CAP: Final[int] = 1_000_000_000 * WAD


# =============================================================================
# EXCEPTIONS
# =============================================================================


class RangeError(ValueError):
    """Некорректный интервал supply (a > b или вне [0, CAP])."""
    pass


# =============================================================================
# ENDPOINT TERMS
# =============================================================================


def scaled_supply_wad(supply: int) -> int:
    """U = k·supply + 1 в 18-decimal."""
    return supply // CURVE_SCALE + WAD


def scaled_supply_x64(supply: int) -> int:
    """U = k·supply + 1 в 64.64."""
    return mul_div(supply, ONE_X64, CURVE_SCALE * WAD) + ONE_X64


def _validate_supply(supply: int, name: str) -> None:
    try:
        validate_uint(supply, name, max_value=CAP)
    except (TypeError, ValueError) as e:
        raise RangeError(str(e)) from e


def reserve_at(supply: int) -> int:
    """
    Резерв, необходимый для обеспечения supply единиц от нуля.

    reserve_at(s) = (T(s) - T(0)) * PRICE_MULTIPLIER, T(0) == 0,
    с обрезкой шума округления снизу до 0.

    Args:
        supply: Supply в 18-decimal, 0 <= supply <= CAP

    Returns:
        Резерв в наименьших единицах валюты оплаты

    Raises:
        RangeError: Если supply вне [0, CAP]
    """
    _validate_supply(supply, "supply")
    return max(_endpoint_term(supply), 0) * PRICE_MULTIPLIER


def _endpoint_term(supply: int) -> int:
    u_wad = scaled_supply_wad(supply)
    ln_u = ln(scaled_supply_x64(supply))
    # U·ln U в 18-decimal минус k·x в 18-decimal
    return mul_x64(u_wad, ln_u) - (u_wad - WAD)


# =============================================================================
# INTEGRAL PRICE
# =============================================================================


def integral_price(a: int, b: int) -> int:
    """
    Цена интервала supply [a, b] по log-кривой.

    Args:
        a: Нижняя граница supply (18-decimal)
        b: Верхняя граница supply (18-decimal)

    Returns:
        Цена в наименьших единицах валюты оплаты, >= 0.
        Отрицательный шум округления на вырожденно малых интервалах
        обрезается до 0 (вызывающая сторона трактует 0 как PriceZero).

    Raises:
        RangeError: Если a > b или границы вне [0, CAP]

    Examples:
        >>> integral_price(0, 0)
        0
    """
    _validate_supply(a, "a")
    _validate_supply(b, "b")

    if a > b:
        raise RangeError(f"invalid supply interval: a={a} > b={b}")

    if a == b:
        return 0

    delta = _endpoint_term(b) - _endpoint_term(a)
    return max(delta, 0) * PRICE_MULTIPLIER


def spot_price(supply: int) -> int:
    """
    Цена одной целой единицы (WAD) начиная с supply.

    У CAP интервал сдвигается вниз: [CAP - WAD, CAP]. Справочное значение,
    в расчётах mint/burn не используется.

    Raises:
        RangeError: Если supply вне [0, CAP]
    """
    _validate_supply(supply, "supply")
    upper = min(supply + WAD, CAP)
    return integral_price(upper - WAD, upper)
