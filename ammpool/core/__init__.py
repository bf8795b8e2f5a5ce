"""
Core domain models, mathematical primitives, and invariants.

This module contains the foundational building blocks that are independent
of the logic module bound to the store (liquidity manager, swap engine).
"""
