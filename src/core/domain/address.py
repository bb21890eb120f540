"""
Address — адреса участников (0x + 40 hex)

Адреса хранятся в нормализованном виде (нижний регистр), чтобы сравнение
идентичностей (treasury, fee recipient) не зависело от регистра.
"""

import re
from typing import Final

ZERO_ADDRESS: Final[str] = "0x" + "0" * 40

ADDRESS_PATTERN: Final[str] = "^0x[0-9a-fA-F]{40}$"

_ADDRESS_RE = re.compile(ADDRESS_PATTERN)


def is_valid_address(value: str) -> bool:
    """True если value — строка вида 0x + 40 hex."""
    return isinstance(value, str) and _ADDRESS_RE.match(value) is not None


def normalize_address(value: str) -> str:
    """
    Проверка формата и приведение к нижнему регистру.

    Raises:
        ValueError: Если формат адреса неверный
    """
    if not is_valid_address(value):
        raise ValueError(f"invalid address: {value!r}")
    return value.lower()


def is_zero_address(value: str) -> bool:
    return normalize_address(value) == ZERO_ADDRESS
