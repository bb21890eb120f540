"""
Fixed Point — целочисленные примитивы для 64.64 и 18-decimal представлений

Модуль обеспечивает детерминированную арифметику без float:
- 64.64 fixed-point: int, представляющий value / 2**64
- 18-decimal (WAD): int, представляющий value / 10**18
- Валидация беззнаковых значений и домена логарифма

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. float никогда не участвует в вычислениях
2. Все округления — floor (Python `//` и `>>` для неотрицательных значений)
3. Переполнение невозможно (int произвольной точности), диапазоны
   проверяются явно там, где этого требует домен
"""

from typing import Final

# =============================================================================
# КОНСТАНТЫ ПРЕДСТАВЛЕНИЙ
# =============================================================================

# Количество дробных бит 64.64
X64_FRACTION_BITS: Final[int] = 64

# 1.0 в 64.64
ONE_X64: Final[int] = 1 << X64_FRACTION_BITS

# Верхняя граница домена логарифма (2**64 в вещественных единицах)
MAX_LOG_INPUT_X64: Final[int] = 1 << 128

# 1.0 в 18-decimal
WAD: Final[int] = 10**18

# Ширина беззнакового машинного слова, которому соответствуют все значения
UINT256_MAX: Final[int] = (1 << 256) - 1


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def validate_uint(value: int, name: str, max_value: int = UINT256_MAX) -> None:
    """
    Валидация, что значение — беззнаковое целое в [0, max_value].

    bool отклоняется явно: True/False не являются количествами.

    Raises:
        TypeError: Если value не int
        ValueError: Если value < 0 или value > max_value
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be int, got {type(value).__name__}")

    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")

    if value > max_value:
        raise ValueError(f"{name} must be <= {max_value}, got {value}")


def is_in_log_domain(x: int) -> bool:
    """True если x (64.64) лежит в (0, 2**128]."""
    return 0 < x <= MAX_LOG_INPUT_X64


# =============================================================================
# АРИФМЕТИКА
# =============================================================================


def mul_x64(a: int, b: int) -> int:
    """Произведение двух 64.64 значений (floor)."""
    return (a * b) >> X64_FRACTION_BITS


def mul_div(a: int, b: int, denominator: int) -> int:
    """
    floor(a * b / denominator) без промежуточной потери точности.

    Raises:
        ZeroDivisionError: Если denominator == 0
    """
    if denominator == 0:
        raise ZeroDivisionError("mul_div denominator is zero")
    return (a * b) // denominator
