"""Bet settlement and aggregation engine.

Turns a flat list of recorded bet legs into resolved singles and parlays,
then into profit/loss, win-rate and ROI statistics.  Everything is pure and
synchronous; callers bring the legs and get plain values back.
"""

from betledger.services.grouping import group_legs as group
from betledger.services.performance import (
    aggregate,
    bet_type_breakdown,
    category_breakdown,
    daily_series,
    summarize_legs,
)
from betledger.services.settlement import resolve_parlay, resolve_single, unify

__version__ = "0.1.0"

__all__ = [
    "aggregate",
    "bet_type_breakdown",
    "category_breakdown",
    "daily_series",
    "group",
    "resolve_parlay",
    "resolve_single",
    "summarize_legs",
    "unify",
]
