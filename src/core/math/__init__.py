"""
Core math modules

Целочисленные fixed-point примитивы, логарифм 64.64 и интеграл log-кривой.
Float не используется.
"""

# Fixed Point primitives
from src.core.math.fixed_point import (
    MAX_LOG_INPUT_X64,
    ONE_X64,
    UINT256_MAX,
    WAD,
    X64_FRACTION_BITS,
    is_in_log_domain,
    mul_div,
    mul_x64,
    validate_uint,
)

# Fixed Point Log
from src.core.math.fixed_point_log import (
    LN2_X128,
    LOG_ITERATIONS,
    MANTISSA_BITS,
    DomainError,
    ln,
    log_2,
)

# Curve Integral
from src.core.math.curve_integral import (
    CAP,
    CURVE_SCALE,
    PRICE_MULTIPLIER,
    RangeError,
    integral_price,
    reserve_at,
    scaled_supply_wad,
    scaled_supply_x64,
    spot_price,
)

__all__ = [
    # Fixed Point — Constants
    "MAX_LOG_INPUT_X64",
    "ONE_X64",
    "UINT256_MAX",
    "WAD",
    "X64_FRACTION_BITS",
    # Fixed Point — Functions
    "is_in_log_domain",
    "mul_div",
    "mul_x64",
    "validate_uint",
    # Fixed Point Log — Constants
    "LN2_X128",
    "LOG_ITERATIONS",
    "MANTISSA_BITS",
    # Fixed Point Log — Exceptions
    "DomainError",
    # Fixed Point Log — Functions
    "ln",
    "log_2",
    # Curve Integral — Constants
    "CAP",
    "CURVE_SCALE",
    "PRICE_MULTIPLIER",
    # Curve Integral — Exceptions
    "RangeError",
    # Curve Integral — Functions
    "integral_price",
    "reserve_at",
    "scaled_supply_wad",
    "scaled_supply_x64",
    "spot_price",
]
