"""Leg ordering and parlay amount selection.

Pure helpers shared by grouping, settlement and aggregation.  Naive
timestamps are read in the configured reporting zone; a missing timestamp
always sorts first.
"""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Iterable, List, Optional, Sequence, Tuple

from betledger.core.types import Leg


def timestamp_key(ts: Optional[datetime], tz: tzinfo) -> Tuple[int, float]:
    """Sortable key for a timestamp; a missing one sorts first."""
    if ts is None:
        return (0, 0.0)
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=tz)
    return (1, ts.timestamp())


def sort_legs(legs: Iterable[Leg], tz: tzinfo) -> List[Leg]:
    """Legs ascending by placement time, ties broken by leg id."""
    return sorted(legs, key=lambda leg: (timestamp_key(leg.placed_at, tz), leg.leg_id))


def representative_amounts(legs: Sequence[Leg]) -> Tuple[float, float]:
    """
    Stake and potential payout for a whole parlay.

    Upstream storage often zeroes every leg but one, so each amount is
    taken from the first leg (in upstream order) where it is positive,
    falling back to the first leg.
    """
    if not legs:
        return 0.0, 0.0
    stake_leg = next((leg for leg in legs if leg.stake > 0), legs[0])
    payout_leg = next((leg for leg in legs if leg.potential_payout > 0), legs[0])
    return stake_leg.stake, payout_leg.potential_payout
