"""
Settlement of singles and parlays.

Status and profit are resolved in two separate steps.  Status is derived
from leg statuses only; the persisted profit column is consulted afterwards
and only to supply the figure for a won parlay.  A stray persisted value on
a pending or lost parlay therefore never leaks into realized P/L.

Parlay status priority:
  any leg lost                      → lost
  every leg won                     → won
  won + void/push legs == all legs  → void
  anything else (open legs)         → pending
"""

import logging
from typing import Iterable, List, NamedTuple, Optional, Sequence, Union

from betledger.core.exceptions import EmptyGroupError
from betledger.core.odds_math import NO_ODDS, combined_multiplier, combine_odds
from betledger.core.ordering import representative_amounts, sort_legs
from betledger.core.settlement_config import SettlementConfig, get_config
from betledger.core.types import BetStatus, Leg, ParlayGroup, ResolvedBet

logger = logging.getLogger(__name__)


class ParlayResolution(NamedTuple):
    status: BetStatus
    profit: float
    combined_odds: int
    category: str


# ---------------------------------------------------------------------------
# Status and profit (pure)
# ---------------------------------------------------------------------------

def resolve_parlay_status(statuses: Sequence[BetStatus]) -> BetStatus:
    """Overall parlay status from its leg statuses alone."""
    total = len(statuses)
    won = sum(1 for s in statuses if s is BetStatus.WON)
    voided = sum(1 for s in statuses if s.is_void)

    if any(s is BetStatus.LOST for s in statuses):
        return BetStatus.LOST
    if total and won == total:
        return BetStatus.WON
    if voided and won + voided == total:
        return BetStatus.VOID
    return BetStatus.PENDING


def resolve_parlay_profit(
    status: BetStatus,
    stake: float,
    potential_payout: float,
    persisted_profits: Iterable[Optional[float]] = (),
) -> float:
    """
    Realized profit of a parlay whose status is already known.

    For a win the first non-zero persisted leg profit is trusted, otherwise
    payout minus stake.  Open parlays always realize zero.
    """
    if status is BetStatus.WON:
        for value in persisted_profits:
            if value:
                return value
        return potential_payout - stake
    if status is BetStatus.LOST:
        return -stake
    if status in (BetStatus.VOID, BetStatus.PUSH, BetStatus.PENDING):
        return 0.0
    raise AssertionError(f"Unhandled status {status!r}")


def resolve_single_profit(
    status: BetStatus,
    stake: float,
    potential_payout: float,
    persisted_profit: Optional[float] = None,
) -> float:
    """Profit of a standalone leg; a persisted value always wins."""
    if persisted_profit is not None:
        return persisted_profit
    if status is BetStatus.WON:
        return potential_payout - stake
    if status is BetStatus.LOST:
        return -stake
    if status in (BetStatus.VOID, BetStatus.PUSH, BetStatus.PENDING):
        return 0.0
    raise AssertionError(f"Unhandled status {status!r}")


def resolve_single(leg: Leg) -> float:
    return resolve_single_profit(leg.status, leg.stake, leg.potential_payout, leg.profit)


def resolve_category(categories: Iterable[Optional[str]], config: SettlementConfig) -> str:
    """Single shared category, the multi-category sentinel, or unknown."""
    distinct = {c for c in categories if c}
    if not distinct:
        return config.unknown_category_label
    if len(distinct) == 1:
        return next(iter(distinct))
    return config.multi_category_label


# ---------------------------------------------------------------------------
# Parlays
# ---------------------------------------------------------------------------

def _empty_group(config: SettlementConfig, parlay_id: Optional[str] = None) -> ParlayResolution:
    if config.strict_invariants:
        raise EmptyGroupError(f"Parlay group {parlay_id!r} has no legs")
    logger.error("Parlay group %r has no legs; resolving as empty pending bet", parlay_id)
    return ParlayResolution(BetStatus.PENDING, 0.0, NO_ODDS, config.unknown_category_label)


def resolve_parlay(
    legs: Sequence[Leg],
    config: Optional[SettlementConfig] = None,
) -> ParlayResolution:
    """
    Resolve one parlay from its legs, in upstream order.

    Returns:
        ``(status, profit, combined_odds, category)``
    """
    cfg = config or get_config()
    if not legs:
        return _empty_group(cfg)

    status = resolve_parlay_status([leg.status for leg in legs])
    stake, payout = representative_amounts(list(legs))
    profit = resolve_parlay_profit(status, stake, payout, (leg.profit for leg in legs))

    odds = [leg.odds for leg in legs]
    _, skipped = combined_multiplier(odds)
    if skipped:
        logger.debug("%d of %d leg price(s) skipped when combining odds", skipped, len(legs))

    return ParlayResolution(
        status=status,
        profit=profit,
        combined_odds=combine_odds(odds),
        category=resolve_category((leg.category for leg in legs), cfg),
    )


def build_parlay_group(
    parlay_id: str,
    legs: Sequence[Leg],
    config: Optional[SettlementConfig] = None,
) -> ParlayGroup:
    """Assemble a fully resolved :class:`ParlayGroup` from its raw legs."""
    cfg = config or get_config()
    if not legs:
        resolution = _empty_group(cfg, parlay_id)
        return ParlayGroup(
            parlay_id=parlay_id, legs=(), category=resolution.category,
            stake=0.0, potential_payout=0.0, combined_odds=resolution.combined_odds,
            status=resolution.status, profit=resolution.profit,
        )

    resolution = resolve_parlay(legs, cfg)
    stake, payout = representative_amounts(list(legs))
    return ParlayGroup(
        parlay_id=parlay_id,
        legs=tuple(sort_legs(legs, cfg.tz)),
        category=resolution.category,
        stake=stake,
        potential_payout=payout,
        combined_odds=resolution.combined_odds,
        status=resolution.status,
        profit=resolution.profit,
    )


# ---------------------------------------------------------------------------
# Unification
# ---------------------------------------------------------------------------

def to_resolved_bet(
    bet: Union[Leg, ParlayGroup],
    config: Optional[SettlementConfig] = None,
) -> ResolvedBet:
    cfg = config or get_config()
    if isinstance(bet, ParlayGroup):
        return ResolvedBet(
            bet_id=bet.parlay_id,
            status=bet.status,
            stake=bet.stake,
            profit=bet.profit,
            category=bet.category,
            timestamp=bet.event_at or bet.placed_at,
            placed_at=bet.placed_at or bet.event_at,
            bet_type=cfg.parlay_bet_type,
            is_parlay=True,
            leg_count=len(bet.legs),
        )
    return ResolvedBet(
        bet_id=bet.leg_id,
        status=bet.status,
        stake=bet.stake,
        profit=resolve_single(bet),
        category=bet.category or cfg.unknown_category_label,
        timestamp=bet.event_at or bet.placed_at,
        placed_at=bet.placed_at or bet.event_at,
        bet_type=bet.bet_type or cfg.unknown_category_label,
    )


def unify(
    singles: Iterable[Leg],
    parlays: Iterable[ParlayGroup],
    config: Optional[SettlementConfig] = None,
) -> List[ResolvedBet]:
    """Parlays first, then singles, each reduced to a :class:`ResolvedBet`."""
    cfg = config or get_config()
    resolved = [to_resolved_bet(p, cfg) for p in parlays]
    resolved.extend(to_resolved_bet(s, cfg) for s in singles)
    return resolved
