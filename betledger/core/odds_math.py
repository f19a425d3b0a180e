"""Odds mathematics — the single source of truth for price conversion.

Every function here is **pure**: no I/O, no logging, no side effects.
Import from this module; never reimplement conversions in services.

The pillars exposed are:

1. **Ingestion** — :func:`parse_odds` resolves the numeric-or-text odds that
   upstream feeds deliver into ``float | None`` exactly once.
2. **Conversion** — American ↔ decimal multiplier.
3. **Combination** — :func:`combine_odds` multiplies leg multipliers into a
   single parlay price.

Design decisions
----------------
* Conversion entry points raise :class:`InvalidOddsError` on a zero price or
  a multiplier of 1.0.  :func:`combine_odds` never raises: a leg whose odds
  are missing or invalid simply does not participate, because feed data is
  routinely dirty and one bad leg must not hide the price of the rest.
* Rounding back to American odds is half-up (``-112.5 → -112``,
  ``112.5 → 113``) so combined prices agree with the ones sportsbooks and
  the mobile client display.
* A combined price of ``0`` means "no displayable odds", never a real price.
"""

from __future__ import annotations

import math
from typing import Final, Iterable, Optional, Union

from betledger.core.exceptions import InvalidOddsError

#: Raw odds as received from upstream: a number, a text token or nothing.
RawOdds = Union[int, float, str, None]

#: Multiplier of an empty (or fully unparseable) combination.
_NEUTRAL_MULTIPLIER: Final[float] = 1.0

#: Combined American odds reported when nothing could be combined.
NO_ODDS: Final[int] = 0


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


# ---------------------------------------------------------------------------
# Ingestion
# ---------------------------------------------------------------------------


def parse_odds(raw: RawOdds) -> Optional[float]:
    """Resolve a numeric or textual odds value into a float.

    Text is parsed as a base-10 floating point value after trimming
    whitespace, so ``"+150"``, ``"-110"`` and ``" 200 "`` are all accepted.
    Unparseable text, ``None``, non-finite numbers and integers too large
    for a float yield ``None``.

    Zero is returned as ``0.0``: it parses fine, it just is not a valid
    price, which :func:`american_to_decimal_multiplier` reports.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            return None
        try:
            value = float(text)
        except ValueError:
            return None
    else:
        try:
            value = float(raw)
        except OverflowError:
            return None
    if not math.isfinite(value):
        return None
    return value


# ---------------------------------------------------------------------------
# Conversion
# ---------------------------------------------------------------------------


def american_to_decimal_multiplier(odds: float) -> float:
    """Convert American odds to the decimal stake multiplier.

    The multiplier is the total return per unit staked, stake included::

        american_to_decimal_multiplier(+150) → 2.5
        american_to_decimal_multiplier(-200) → 1.5

    Raises:
        InvalidOddsError: If ``odds`` is zero or not finite.
    """
    if odds == 0 or not math.isfinite(odds):
        raise InvalidOddsError(f"Invalid American odds {odds!r}")
    if odds > 0:
        return odds / 100.0 + 1.0
    return 100.0 / abs(odds) + 1.0


def decimal_multiplier_to_american(multiplier: float) -> int:
    """Convert a decimal multiplier back to the nearest American integer.

    Multipliers ≥ 2.0 map to positive (underdog) odds, smaller ones to
    negative (favourite) odds.  Even money comes back as ``+100``.

    Raises:
        InvalidOddsError: If ``multiplier`` is 1.0 or less (division by zero,
            or a return below the stake) or not finite.
    """
    if not math.isfinite(multiplier) or multiplier <= 1.0:
        raise InvalidOddsError(
            f"Decimal multiplier {multiplier!r} must be greater than 1.0"
        )
    if multiplier >= 2.0:
        return _round_half_up((multiplier - 1.0) * 100.0)
    return _round_half_up(-100.0 / (multiplier - 1.0))


# ---------------------------------------------------------------------------
# Combination
# ---------------------------------------------------------------------------


def combined_multiplier(odds: Iterable[Optional[float]]) -> tuple[float, int]:
    """Product of the decimal multipliers of every usable leg price.

    Returns:
        ``(multiplier, skipped)`` where ``skipped`` counts the legs whose
        odds were missing or invalid and therefore left out.
    """
    product = _NEUTRAL_MULTIPLIER
    skipped = 0
    for value in odds:
        if value is None:
            skipped += 1
            continue
        try:
            product *= american_to_decimal_multiplier(value)
        except InvalidOddsError:
            skipped += 1
    return product, skipped


def combine_odds(odds: Iterable[Optional[float]]) -> int:
    """Combine several leg prices into one American price.

    Legs with missing or invalid odds are skipped.  If no leg contributes,
    the result is :data:`NO_ODDS` (``0``).

    Examples::

        combine_odds([-110, -110])        → 264
        combine_odds([150])               → 150
        combine_odds([None, 0, -200])     → -200
        combine_odds([])                  → 0
    """
    product, _ = combined_multiplier(odds)
    if product == _NEUTRAL_MULTIPLIER:
        return NO_ODDS
    return decimal_multiplier_to_american(product)


# ---------------------------------------------------------------------------
# Display helpers
# ---------------------------------------------------------------------------


def format_american(odds: int) -> str:
    """Signed display string: ``+150``, ``-200``; ``""`` for :data:`NO_ODDS`."""
    if odds == NO_ODDS:
        return ""
    return f"+{odds}" if odds > 0 else str(odds)


def potential_profit(stake: float, potential_payout: float) -> float:
    """"To win" amount shown for an open bet.

    This is an exposure figure for display only; realized profit of a
    pending bet is always zero.
    """
    return potential_payout - stake
