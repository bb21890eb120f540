"""
Fixed Point Log — двоичный и натуральный логарифм в 64.64

Алгоритм log_2 (square-and-check):
1. msb = индекс старшего установленного бита x
2. Целая часть результата: (msb - 64) << 64
3. Мантисса нормализуется в [1, 2) с MANTISSA_BITS дробными битами
4. Ровно 64 итерации: mantissa = mantissa**2; если mantissa >= 2, то
   очередной двоичный разряд дробной части = 1 и mantissa /= 2

ln(x) = log_2(x) * ln(2), одно умножение на 128-битную константу
LN2_X128 и сдвиг на 128.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Домен: 0 < x <= 2**128 (64.64), иначе DomainError
2. |log_2(x) - log2_ref(x)| <= 1 ulp (2**-64)
3. Вычисления только в int, результат детерминирован
"""

from typing import Final

from src.core.math.fixed_point import (
    X64_FRACTION_BITS,
    is_in_log_domain,
)

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# ln(2) * 2**128
LN2_X128: Final[int] = 0xB17217F7D1CF79ABC9E3B39803F2F6AF

# Число дробных бит рабочей мантиссы. Должно быть заметно больше 64,
# чтобы ошибка усечения при 64 возведениях в квадрат не доходила до
# последнего бита результата.
MANTISSA_BITS: Final[int] = 192

# Число итераций уточнения = число дробных бит результата
LOG_ITERATIONS: Final[int] = 64


# =============================================================================
# EXCEPTIONS
# =============================================================================


class DomainError(ValueError):
    """
    Аргумент логарифма вне домена (0, 2**128].

    Для значений supply в пределах CAP недостижимо; возникновение означает
    ошибку программы и трактуется как фатальное.
    """
    pass


# =============================================================================
# LOG_2 / LN
# =============================================================================


def _check_domain(x: int) -> None:
    if isinstance(x, bool) or not isinstance(x, int):
        raise DomainError(f"log input must be int (64.64), got {type(x).__name__}")
    if not is_in_log_domain(x):
        raise DomainError(f"log input out of domain (0, 2**128]: {x}")


def log_2(x: int) -> int:
    """
    Двоичный логарифм 64.64 значения.

    Args:
        x: Аргумент в 64.64 (x / 2**64), 0 < x <= 2**128

    Returns:
        log2(x / 2**64) в 64.64 (может быть отрицательным при x < 2**64)

    Raises:
        DomainError: Если x вне (0, 2**128]

    Examples:
        >>> log_2(1 << 64)
        0
        >>> log_2(2 << 64) == 1 << 64
        True
        >>> log_2(1 << 63) == -(1 << 64)
        True
    """
    _check_domain(x)

    msb = x.bit_length() - 1
    result = (msb - X64_FRACTION_BITS) << X64_FRACTION_BITS

    # msb <= 128 < MANTISSA_BITS: сдвиг влево без потерь
    mantissa = x << (MANTISSA_BITS - msb)
    two = 2 << MANTISSA_BITS

    bit = 1 << (LOG_ITERATIONS - 1)
    for _ in range(LOG_ITERATIONS):
        mantissa = (mantissa * mantissa) >> MANTISSA_BITS
        if mantissa >= two:
            mantissa >>= 1
            result += bit
        bit >>= 1

    return result


def ln(x: int) -> int:
    """
    Натуральный логарифм 64.64 значения: log_2(x) * ln(2).

    Raises:
        DomainError: Если x вне (0, 2**128]

    Examples:
        >>> ln(1 << 64)
        0
    """
    return (log_2(x) * LN2_X128) >> 128
