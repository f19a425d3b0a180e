"""Status enumerations and data-transfer objects for bet settlement.

Design choices
--------------
* :class:`BetStatus` is a closed five-value enumeration.  Raw status
  strings are converted once at ingestion, so downstream code compares
  members and never string literals.
* Group membership depends on two upstream fields (group id and the
  ``is_parlay`` flag) that can disagree in partially-migrated records.
  :class:`GroupMembership` collapses them into one tagged decision, and
  only ``GROUPED`` ever makes a leg part of a parlay.
* Every DTO is frozen and slotted so results can be cached and passed
  between threads; a fresh set is built on every aggregation pass.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class BetStatus(str, Enum):
    PENDING = "pending"
    WON = "won"
    LOST = "lost"
    VOID = "void"
    PUSH = "push"

    @property
    def is_settled(self) -> bool:
        """Won or lost: the only statuses that count toward win rate/ROI."""
        return self in (BetStatus.WON, BetStatus.LOST)

    @property
    def is_void(self) -> bool:
        return self in (BetStatus.VOID, BetStatus.PUSH)


class GroupMembership(str, Enum):
    """How a leg's group id and parlay flag combine."""

    NO_GROUP = "no_group"
    FLAGGED_WITHOUT_ID = "flagged_without_id"
    GROUPED = "grouped"


class StreakType(str, Enum):
    WIN = "win"
    LOSS = "loss"
    NONE = "none"


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------


@dataclass(slots=True, frozen=True)
class Leg:
    """One recorded wager line.

    Attributes:
        leg_id: Upstream identifier, also the final sort tie-breaker.
        status: Settlement status.
        stake: Amount risked.  May be 0 on non-carrier legs of a parlay.
        potential_payout: Total return if the leg (or its parlay) wins,
            stake included.
        odds: American odds resolved by
            :func:`~betledger.core.odds_math.parse_odds`; ``None`` when the
            upstream value was missing or unparseable.
        category: Category tag such as the sport; ``None`` when untagged.
        placed_at: Placement timestamp.
        event_at: Event/game timestamp.
        group_id: Shared parlay identifier.
        is_parlay: Upstream parlay-membership flag.
        profit: Persisted realized profit, authoritative for singles and
            for the won case of a parlay.
        bet_type: Market type (``"spread"``, ``"moneyline"``...).
        description: Free-text description carried through for display.
    """

    leg_id: str
    status: BetStatus
    stake: float = 0.0
    potential_payout: float = 0.0
    odds: Optional[float] = None
    category: Optional[str] = None
    placed_at: Optional[datetime] = None
    event_at: Optional[datetime] = None
    group_id: Optional[str] = None
    is_parlay: bool = False
    profit: Optional[float] = None
    bet_type: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        if not math.isfinite(self.stake) or self.stake < 0:
            raise ValueError(f"Leg {self.leg_id!r}: stake must be finite and >= 0, got {self.stake!r}")
        if not math.isfinite(self.potential_payout) or self.potential_payout < 0:
            raise ValueError(
                f"Leg {self.leg_id!r}: potential_payout must be finite and >= 0, "
                f"got {self.potential_payout!r}"
            )
        if self.profit is not None and not math.isfinite(self.profit):
            raise ValueError(f"Leg {self.leg_id!r}: profit must be finite, got {self.profit!r}")

    @property
    def membership(self) -> GroupMembership:
        if self.is_parlay and self.group_id:
            return GroupMembership.GROUPED
        if self.is_parlay:
            return GroupMembership.FLAGGED_WITHOUT_ID
        return GroupMembership.NO_GROUP


# ---------------------------------------------------------------------------
# Derived
# ---------------------------------------------------------------------------


@dataclass(slots=True, frozen=True)
class ParlayGroup:
    """A parlay rebuilt from its legs on every pass; never persisted.

    ``legs`` is sorted ascending by placement time (missing first), then by
    leg id.  ``stake`` and ``potential_payout`` come from the first leg, in
    upstream order, carrying a positive value.  ``combined_odds`` is ``0``
    when no leg has a usable price.
    """

    parlay_id: str
    legs: tuple[Leg, ...]
    category: str
    stake: float
    potential_payout: float
    combined_odds: int
    status: BetStatus
    profit: float

    @property
    def placed_at(self) -> Optional[datetime]:
        """Placement time of the first leg in sorted order."""
        return self.legs[0].placed_at if self.legs else None

    @property
    def event_at(self) -> Optional[datetime]:
        """Event time of the first leg in sorted order."""
        return self.legs[0].event_at if self.legs else None


@dataclass(slots=True, frozen=True)
class ResolvedBet:
    """A parlay or a single reduced to the fields aggregation needs.

    Attributes:
        timestamp: When the bet settles for reporting: event time if known,
            else placement time.
        placed_at: When money went at risk: placement time if known, else
            event time.
    """

    bet_id: str
    status: BetStatus
    stake: float
    profit: float
    category: str
    timestamp: Optional[datetime]
    placed_at: Optional[datetime]
    bet_type: str
    is_parlay: bool = False
    leg_count: int = 1

    @property
    def realized_profit(self) -> float:
        """Profit that counts toward totals: zero unless won or lost."""
        return self.profit if self.status.is_settled else 0.0


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


@dataclass(slots=True, frozen=True)
class DailyPnL:
    """Profit and money at risk for one calendar day.

    ``day`` is ``None`` for bets with no usable timestamp; that bucket sorts
    first so every settled bet lands somewhere in the series.
    """

    day: Optional[date]
    profit: float
    staked: float
    bets: int
    cumulative_profit: float


@dataclass(slots=True, frozen=True)
class CategoryStats:
    """Per-category (or per-bet-type) roll-up.

    ``win_rate`` is wins over *all* bets in the bucket, pending included.
    ``roi`` is profit over the stake of the bucket's won/lost bets.
    """

    name: str
    bets: int
    wins: int
    losses: int
    profit: float
    staked: float
    win_rate: float
    roi: float


@dataclass(slots=True, frozen=True)
class AggregateMetrics:
    """Headline figures for a scope of resolved bets.

    ``win_rate`` and ``roi`` use won/lost bets only.  ``total_profit`` sums
    realized profit over every bet, which equals the settled sum.
    """

    total_bets: int
    straight_bets: int
    parlay_bets: int
    wins: int
    losses: int
    pending_bets: int
    void_bets: int
    win_rate: float
    roi: float
    total_profit: float
    total_staked: float
    settled_staked: float
    avg_stake: float
    biggest_win: float
    biggest_loss: float
    current_streak: int
    streak_type: StreakType
