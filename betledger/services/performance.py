"""
Performance analytics over resolved bets.

Every function here is a pure reduction over a list of
:class:`~betledger.core.types.ResolvedBet`.  A parlay counts as one bet,
never as one bet per leg.

Two denominators are in play and must not be conflated:
  - win rate and ROI use won/lost bets only
  - headline total profit sums realized profit over every bet
    (open and void bets contribute zero)

The per-category win rate is wins over *all* bets in the category, which
deliberately differs from the global settled-only win rate.
"""

import logging
from datetime import date, datetime, tzinfo
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from betledger.core.odds_math import format_american, potential_profit
from betledger.core.ordering import timestamp_key
from betledger.core.settlement_config import SettlementConfig, get_config
from betledger.core.types import (
    AggregateMetrics,
    BetStatus,
    CategoryStats,
    DailyPnL,
    Leg,
    ParlayGroup,
    ResolvedBet,
    StreakType,
)
from betledger.services.grouping import group_legs
from betledger.services.settlement import unify

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _safe_roi(profit: float, risked: float) -> float:
    return round(profit / risked, 4) if risked > 0 else 0.0


def _win_rate(wins: int, total: int) -> float:
    return round(wins / total, 4) if total > 0 else 0.0


def _day_key(ts: Optional[datetime], tz: tzinfo) -> Optional[date]:
    """Calendar day of a timestamp in the reporting zone."""
    if ts is None:
        return None
    if ts.tzinfo is not None:
        ts = ts.astimezone(tz)
    return ts.date()


def _settled(bets: Iterable[ResolvedBet]) -> List[ResolvedBet]:
    return [b for b in bets if b.status.is_settled]


def _current_streak(settled: Sequence[ResolvedBet], tz: tzinfo) -> Tuple[int, StreakType]:
    """Run length and direction of the most recent same-outcome bets."""
    ordered = sorted(
        settled,
        key=lambda b: (timestamp_key(b.timestamp, tz), b.bet_id),
        reverse=True,
    )
    if not ordered:
        return 0, StreakType.NONE

    head = ordered[0].status
    length = 0
    for bet in ordered:
        if bet.status is not head:
            break
        length += 1
    return length, StreakType.WIN if head is BetStatus.WON else StreakType.LOSS


# ---------------------------------------------------------------------------
# aggregate
# ---------------------------------------------------------------------------

def aggregate(
    bets: Sequence[ResolvedBet],
    config: Optional[SettlementConfig] = None,
) -> AggregateMetrics:
    """Headline metrics for a scope of resolved bets."""
    cfg = config or get_config()
    settled = _settled(bets)

    total = len(bets)
    parlays = sum(1 for b in bets if b.is_parlay)
    wins = sum(1 for b in settled if b.status is BetStatus.WON)
    losses = len(settled) - wins

    settled_pl = sum(b.profit for b in settled)
    settled_risked = sum(b.stake for b in settled)
    total_staked = sum(b.stake for b in bets)
    realized = [b.realized_profit for b in bets]

    nonzero = [p for p in realized if p != 0]
    streak, streak_type = _current_streak(settled, cfg.tz)

    return AggregateMetrics(
        total_bets=total,
        straight_bets=total - parlays,
        parlay_bets=parlays,
        wins=wins,
        losses=losses,
        pending_bets=sum(1 for b in bets if b.status is BetStatus.PENDING),
        void_bets=sum(1 for b in bets if b.status.is_void),
        win_rate=_win_rate(wins, len(settled)),
        roi=_safe_roi(settled_pl, settled_risked),
        total_profit=sum(realized),
        total_staked=total_staked,
        settled_staked=settled_risked,
        avg_stake=total_staked / total if total else 0.0,
        biggest_win=max(nonzero) if nonzero else 0.0,
        biggest_loss=abs(min(nonzero)) if nonzero else 0.0,
        current_streak=streak,
        streak_type=streak_type,
    )


# ---------------------------------------------------------------------------
# daily_series
# ---------------------------------------------------------------------------

def daily_series(
    bets: Iterable[ResolvedBet],
    config: Optional[SettlementConfig] = None,
) -> List[DailyPnL]:
    """
    Per-day realized profit and money at risk, oldest first.

    Profit is booked on the day a won/lost bet settles.  Stake is booked on
    the day every bet (open ones included) was placed.  Bets without a
    usable timestamp share a leading ``day=None`` bucket.
    """
    cfg = config or get_config()
    tz = cfg.tz

    profit: Dict[Optional[date], float] = {}
    staked: Dict[Optional[date], float] = {}
    counts: Dict[Optional[date], int] = {}

    for b in bets:
        placed = _day_key(b.placed_at, tz)
        staked[placed] = staked.get(placed, 0.0) + b.stake
        if b.status.is_settled:
            day = _day_key(b.timestamp, tz)
            profit[day] = profit.get(day, 0.0) + b.profit
            counts[day] = counts.get(day, 0) + 1

    days = sorted(set(profit) | set(staked), key=lambda d: (d is not None, d or date.min))

    series: List[DailyPnL] = []
    cum_pl = 0.0
    for day in days:
        day_pl = profit.get(day, 0.0)
        cum_pl += day_pl
        series.append(DailyPnL(
            day=day,
            profit=day_pl,
            staked=staked.get(day, 0.0),
            bets=counts.get(day, 0),
            cumulative_profit=cum_pl,
        ))
    return series


# ---------------------------------------------------------------------------
# category_breakdown / bet_type_breakdown
# ---------------------------------------------------------------------------

def _breakdown(
    bets: Iterable[ResolvedBet],
    key: Callable[[ResolvedBet], str],
) -> List[CategoryStats]:
    buckets: Dict[str, List[ResolvedBet]] = {}
    for b in bets:
        buckets.setdefault(key(b), []).append(b)

    rows = []
    for name, lst in buckets.items():
        settled = _settled(lst)
        wins = sum(1 for b in settled if b.status is BetStatus.WON)
        pl = sum(b.realized_profit for b in lst)
        risked = sum(b.stake for b in settled)
        rows.append(CategoryStats(
            name=name,
            bets=len(lst),
            wins=wins,
            losses=len(settled) - wins,
            profit=pl,
            staked=risked,
            win_rate=_win_rate(wins, len(lst)),
            roi=_safe_roi(pl, risked),
        ))
    return rows


def category_breakdown(bets: Iterable[ResolvedBet]) -> List[CategoryStats]:
    """Per-category roll-up in order of first appearance."""
    return _breakdown(bets, lambda b: b.category)


def bet_type_breakdown(bets: Iterable[ResolvedBet]) -> List[CategoryStats]:
    """Per-market roll-up; every parlay lands in the parlay bucket."""
    return _breakdown(bets, lambda b: b.bet_type)


# ---------------------------------------------------------------------------
# summarize_legs
# ---------------------------------------------------------------------------

def _stats_row(row: CategoryStats) -> Dict:
    return {
        "bets": row.bets,
        "wins": row.wins,
        "losses": row.losses,
        "win_rate": row.win_rate,
        "roi": row.roi,
        "profit": round(row.profit, 2),
        "staked": round(row.staked, 2),
    }


def _parlay_row(parlay: ParlayGroup) -> Dict:
    return {
        "parlay_id": parlay.parlay_id,
        "legs": len(parlay.legs),
        "category": parlay.category,
        "status": parlay.status.value,
        "odds": format_american(parlay.combined_odds),
        "stake": round(parlay.stake, 2),
        # exposure for open tickets; realized profit is reported separately
        "to_win": round(potential_profit(parlay.stake, parlay.potential_payout), 2),
        "profit": round(parlay.profit, 2),
    }


def summarize_legs(
    legs: Iterable[Leg],
    config: Optional[SettlementConfig] = None,
) -> Dict:
    """
    Full pipeline: group → resolve → unify → aggregate.

    Returns a plain dict with ``overall``, ``timeline``, ``by_category``,
    ``by_bet_type`` and ``parlays`` sections, ready for JSON serialisation.
    """
    cfg = config or get_config()
    singles, parlays = group_legs(legs, cfg)
    bets = unify(singles, parlays, cfg)

    m = aggregate(bets, cfg)
    overall = {
        "total_bets": m.total_bets,
        "straight_bets": m.straight_bets,
        "parlay_bets": m.parlay_bets,
        "wins": m.wins,
        "losses": m.losses,
        "pending_bets": m.pending_bets,
        "void_bets": m.void_bets,
        "win_rate": m.win_rate,
        "roi": m.roi,
        "total_profit_dollars": round(m.total_profit, 2),
        "total_risked_dollars": round(m.total_staked, 2),
        "settled_risked_dollars": round(m.settled_staked, 2),
        "avg_stake": round(m.avg_stake, 2),
        "biggest_win": round(m.biggest_win, 2),
        "biggest_loss": round(m.biggest_loss, 2),
        "current_streak": m.current_streak,
        "streak_type": m.streak_type.value,
    }

    timeline = [
        {
            "date": d.day.isoformat() if d.day else None,
            "bets": d.bets,
            "profit": round(d.profit, 2),
            "staked": round(d.staked, 2),
            "cumulative_profit": round(d.cumulative_profit, 2),
        }
        for d in daily_series(bets, cfg)
    ]

    logger.info(
        "Summary: %d bets (%d parlays) W%d-L%d ROI %.1f%%",
        m.total_bets, m.parlay_bets, m.wins, m.losses, m.roi * 100,
    )
    return {
        "overall": overall,
        "timeline": timeline,
        "by_category": {row.name: _stats_row(row) for row in category_breakdown(bets)},
        "by_bet_type": {row.name: _stats_row(row) for row in bet_type_breakdown(bets)},
        "parlays": [_parlay_row(p) for p in parlays],
    }
