"""
Core fixed-point math, domain models and contracts.

Pure building blocks of the issuance system, independent of the external
ledger, eligibility oracle and native-value transport implementations.
"""
