"""Core mathematics, types and configuration for the settlement engine.

This package contains pure building blocks:

- ``odds_math``         — American ↔ decimal conversion, parlay odds combination
- ``types``             — status enumerations and immutable bet DTOs
- ``exceptions``        — typed failures raised by the odds entry points
- ``ordering``          — leg sort order and parlay stake/payout selection
- ``settlement_config`` — env-driven labels, timezone and invariant mode

Nothing in this package imports from ``betledger.services``.
All modules are side-effect-free and unit-testable in isolation.
"""
