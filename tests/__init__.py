"""
Test suite for ammpool

Contains:
- tests/unit/          : Unit tests for math, domain models, store, access control,
                         liquidity, swaps and the logic module upgrade flow
"""
