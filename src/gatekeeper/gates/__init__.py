"""Gates — индивидуальные гейты Gatekeeper системы.

- Eligibility Gate: eligibility oracle + bootstrap holder cap
"""

from .eligibility_gate import (
    EligibilityGate,
    EligibilityGateConfig,
    EligibilityGateResult,
    EligibilityOracle,
    EligibilityStatus,
    SupplyPhase,
)

__all__ = [
    "EligibilityGate",
    "EligibilityGateConfig",
    "EligibilityGateResult",
    "EligibilityOracle",
    "EligibilityStatus",
    "SupplyPhase",
]
