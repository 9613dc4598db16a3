"""
Test suite for bonding-settlement

Contains:
- tests/unit/          : Unit tests for curve math, stores, settlement and config
"""
