"""Typed failures for the settlement engine."""


class InvalidOddsError(ValueError):
    """Odds value that cannot be converted.

    Raised by the conversion entry points in
    :mod:`betledger.core.odds_math` for a zero American price, a non-finite
    value or a decimal multiplier that would divide by zero.
    """


class EmptyGroupError(AssertionError):
    """A parlay group with no legs reached the resolver.

    Grouping never produces an empty group, so this is a caller bug.  Only
    raised when ``SettlementConfig.strict_invariants`` is set.
    """
