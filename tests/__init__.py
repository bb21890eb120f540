"""
Test suite for log-curve issuance

Contains:
- tests/unit/          : Unit tests for math, gate, contracts and controller
"""
