"""
Domain models and value objects.

Contains issuance units, addresses, settings, event records and the
external ledger / native transport interfaces.
"""

from src.core.domain.address import (
    ZERO_ADDRESS,
    is_valid_address,
    is_zero_address,
    normalize_address,
)
from src.core.domain.events import (
    BurnQuote,
    BurnReceipt,
    BurnRecord,
    IssuanceEventKind,
    MintQuote,
    MintReceipt,
    MintRecord,
)
from src.core.domain.ledger import InMemoryLedger, InsufficientBalance, Ledger
from src.core.domain.settings import IssuanceSettings
from src.core.domain.transport import InMemoryTransport, NativeTransport, TransferFailed
from src.core.domain.units import (
    BOOTSTRAP_HOLDER_CAP,
    BOOTSTRAP_SUPPLY_THRESHOLD,
    FEE_DENOMINATOR,
    FEE_NUMERATOR,
    MIN_MINT_AMOUNT,
    fee_of,
    split_fee,
)

__all__ = [
    # Units module
    "BOOTSTRAP_HOLDER_CAP",
    "BOOTSTRAP_SUPPLY_THRESHOLD",
    "FEE_DENOMINATOR",
    "FEE_NUMERATOR",
    "MIN_MINT_AMOUNT",
    "fee_of",
    "split_fee",
    # Addresses
    "ZERO_ADDRESS",
    "is_valid_address",
    "is_zero_address",
    "normalize_address",
    # Events
    "IssuanceEventKind",
    "MintRecord",
    "BurnRecord",
    "MintQuote",
    "BurnQuote",
    "MintReceipt",
    "BurnReceipt",
    # Settings
    "IssuanceSettings",
    # External collaborators
    "Ledger",
    "InMemoryLedger",
    "InsufficientBalance",
    "NativeTransport",
    "InMemoryTransport",
    "TransferFailed",
]
