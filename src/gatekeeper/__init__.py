"""Gatekeeper — гейты допуска изменений баланса.

- Eligibility Gate: supply-tier политика (BOOTSTRAP / OPEN)
"""

from .gates.eligibility_gate import EligibilityGate, EligibilityGateResult

__all__ = [
    "EligibilityGate",
    "EligibilityGateResult",
]
