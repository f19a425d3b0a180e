"""Tests for performance.py stat calculations."""

import itertools
from dataclasses import replace
from datetime import date, datetime, timedelta, timezone

import pytest

from betledger.core.settlement_config import SettlementConfig
from betledger.core.types import BetStatus, Leg, ResolvedBet, StreakType
from betledger.services.performance import (
    _safe_roi,
    _win_rate,
    aggregate,
    bet_type_breakdown,
    category_breakdown,
    daily_series,
    summarize_legs,
)

CFG = SettlementConfig()
DAY1 = datetime(2025, 1, 10, 19, 0)

_ids = itertools.count()


def _bet(status, stake=10.0, profit=None, category="NBA", ts=DAY1, placed_at=None,
         is_parlay=False, bet_type="spread"):
    status = BetStatus(status)
    if profit is None:
        profit = {"won": 9.09, "lost": -stake}.get(status.value, 0.0)
    return ResolvedBet(
        bet_id=f"b{next(_ids)}",
        status=status,
        stake=stake,
        profit=profit,
        category=category,
        timestamp=ts,
        placed_at=placed_at if placed_at is not None else ts,
        bet_type=bet_type,
        is_parlay=is_parlay,
    )


# ---------------------------------------------------------------------------
# Pure math helpers
# ---------------------------------------------------------------------------

def test_safe_roi_zero_risked():
    assert _safe_roi(100.0, 0.0) == 0.0

def test_safe_roi_positive():
    assert _safe_roi(10.0, 100.0) == pytest.approx(0.1)

def test_win_rate_zero_total():
    assert _win_rate(5, 0) == 0.0

def test_win_rate():
    assert _win_rate(6, 10) == pytest.approx(0.6)


# ---------------------------------------------------------------------------
# aggregate
# ---------------------------------------------------------------------------

def test_aggregate_empty():
    m = aggregate([], CFG)
    assert m.total_bets == 0
    assert m.win_rate == 0.0
    assert m.roi == 0.0
    assert m.avg_stake == 0.0
    assert m.current_streak == 0
    assert m.streak_type is StreakType.NONE


def test_win_rate_uses_settled_only():
    bets = [_bet("won")] * 3 + [_bet("lost")] * 2 + [_bet("pending")] * 4
    m = aggregate(bets, CFG)
    assert m.total_bets == 9
    assert m.win_rate == pytest.approx(0.6)
    assert m.pending_bets == 4


def test_roi_uses_settled_stake_only():
    bets = [
        _bet("won", stake=10.0, profit=20.0),
        _bet("lost", stake=10.0),
        _bet("pending", stake=100.0),
    ]
    m = aggregate(bets, CFG)
    assert m.roi == pytest.approx(0.5)
    assert m.settled_staked == pytest.approx(20.0)
    assert m.total_staked == pytest.approx(120.0)
    assert m.avg_stake == pytest.approx(40.0)


def test_total_profit_ignores_open_bets():
    bets = [
        _bet("won", profit=30.0),
        _bet("pending", profit=50.0),   # stray persisted figure on an open single
        _bet("void", profit=0.0),
    ]
    assert aggregate(bets, CFG).total_profit == pytest.approx(30.0)


def test_counts_and_voids():
    bets = [
        _bet("won", is_parlay=True),
        _bet("lost"),
        _bet("void"),
        _bet("push"),
    ]
    m = aggregate(bets, CFG)
    assert m.total_bets == 4
    assert m.parlay_bets == 1
    assert m.straight_bets == 3
    assert m.void_bets == 2
    assert (m.wins, m.losses) == (1, 1)


def test_biggest_win_and_loss():
    bets = [
        _bet("won", profit=30.0),
        _bet("lost", stake=20.0),
        _bet("lost", stake=50.0),
        _bet("void"),
    ]
    m = aggregate(bets, CFG)
    assert m.biggest_win == pytest.approx(30.0)
    assert m.biggest_loss == pytest.approx(50.0)


def test_biggest_taken_over_nonzero_profits_only_losses():
    m = aggregate([_bet("lost", stake=20.0), _bet("lost", stake=5.0), _bet("void")], CFG)
    assert m.biggest_win == pytest.approx(-5.0)
    assert m.biggest_loss == pytest.approx(20.0)


def test_biggest_taken_over_nonzero_profits_only_wins():
    m = aggregate([_bet("won", profit=12.0), _bet("won", profit=30.0), _bet("pending")], CFG)
    assert m.biggest_win == pytest.approx(30.0)
    assert m.biggest_loss == pytest.approx(12.0)


def test_biggest_zero_without_nonzero_profits():
    m = aggregate([_bet("void"), _bet("pending")], CFG)
    assert m.biggest_win == 0.0
    assert m.biggest_loss == 0.0


class TestStreak:

    def test_win_streak_most_recent_first(self):
        bets = [
            _bet("lost", ts=DAY1),
            _bet("won", ts=DAY1 + timedelta(days=1)),
            _bet("won", ts=DAY1 + timedelta(days=2)),
            _bet("won", ts=DAY1 + timedelta(days=3)),
            _bet("pending", ts=DAY1 + timedelta(days=4)),
        ]
        m = aggregate(bets, CFG)
        assert m.current_streak == 3
        assert m.streak_type is StreakType.WIN

    def test_loss_streak(self):
        bets = [
            _bet("won", ts=DAY1 + timedelta(days=3)),
            _bet("lost", ts=DAY1 + timedelta(days=5)),
            _bet("lost", ts=DAY1 + timedelta(days=4)),
        ]
        m = aggregate(bets, CFG)
        assert m.current_streak == 2
        assert m.streak_type is StreakType.LOSS

    def test_missing_timestamp_is_oldest(self):
        bets = [_bet("lost", ts=None), _bet("won", ts=DAY1)]
        m = aggregate(bets, CFG)
        assert m.current_streak == 1
        assert m.streak_type is StreakType.WIN

    def test_no_settled_bets(self):
        m = aggregate([_bet("pending"), _bet("void")], CFG)
        assert m.current_streak == 0
        assert m.streak_type is StreakType.NONE


# ---------------------------------------------------------------------------
# daily_series
# ---------------------------------------------------------------------------

def test_daily_series_sums_and_cumulative():
    day2 = DAY1 + timedelta(days=1)
    bets = [
        _bet("won", profit=20.0, ts=DAY1),
        _bet("lost", stake=10.0, ts=DAY1),
        _bet("won", profit=5.0, ts=day2),
        _bet("pending", stake=40.0, ts=day2),
    ]
    series = daily_series(bets, CFG)
    assert [d.day for d in series] == [date(2025, 1, 10), date(2025, 1, 11)]
    assert [d.profit for d in series] == pytest.approx([10.0, 5.0])
    assert [d.cumulative_profit for d in series] == pytest.approx([10.0, 15.0])
    assert [d.bets for d in series] == [2, 1]
    assert series[1].staked == pytest.approx(50.0)


def test_daily_stake_booked_on_placement_day():
    placed = DAY1 - timedelta(days=2)
    series = daily_series([_bet("won", stake=10.0, profit=8.0, ts=DAY1, placed_at=placed)], CFG)
    by_day = {d.day: d for d in series}
    assert by_day[placed.date()].staked == pytest.approx(10.0)
    assert by_day[placed.date()].profit == 0.0
    assert by_day[DAY1.date()].profit == pytest.approx(8.0)
    assert by_day[DAY1.date()].staked == 0.0


def test_daily_sum_matches_total_profit():
    bets = [
        _bet("won", profit=12.0, ts=DAY1),
        _bet("lost", stake=7.0, ts=DAY1 + timedelta(days=3)),
        _bet("won", profit=4.5, ts=None),
        _bet("pending", profit=99.0, ts=DAY1),
        _bet("push", ts=DAY1 + timedelta(days=1)),
    ]
    series = daily_series(bets, CFG)
    assert sum(d.profit for d in series) == pytest.approx(aggregate(bets, CFG).total_profit)


def test_missing_timestamp_bucket_sorts_first():
    bets = [_bet("won", profit=3.0, ts=DAY1), _bet("won", profit=4.0, ts=None)]
    series = daily_series(bets, CFG)
    assert series[0].day is None
    assert series[0].profit == pytest.approx(4.0)
    assert series[1].cumulative_profit == pytest.approx(7.0)


def test_daily_series_respects_timezone():
    late_utc = datetime(2025, 1, 2, 3, 0, tzinfo=timezone.utc)
    bet = _bet("won", profit=5.0, ts=late_utc)
    assert daily_series([bet], CFG)[0].day == date(2025, 1, 2)
    eastern = replace(CFG, timezone="America/New_York")
    assert daily_series([bet], eastern)[0].day == date(2025, 1, 1)


def test_daily_series_naive_timestamp_kept_local():
    eastern = replace(CFG, timezone="America/New_York")
    bet = _bet("won", profit=5.0, ts=datetime(2025, 1, 2, 1, 0))
    assert daily_series([bet], eastern)[0].day == date(2025, 1, 2)


# ---------------------------------------------------------------------------
# Breakdowns
# ---------------------------------------------------------------------------

def test_category_win_rate_uses_all_bets():
    bets = [_bet("won"), _bet("won"), _bet("lost"), _bet("pending")]
    (nba,) = category_breakdown(bets)
    assert nba.name == "NBA"
    assert nba.bets == 4
    assert nba.win_rate == pytest.approx(0.5)
    assert aggregate(bets, CFG).win_rate == pytest.approx(0.6667)


def test_category_roi_uses_settled_stake():
    bets = [
        _bet("won", stake=10.0, profit=10.0, category="NFL"),
        _bet("lost", stake=10.0, category="NFL"),
        _bet("won", stake=10.0, profit=15.0, category="NFL"),
        _bet("pending", stake=50.0, category="NFL"),
    ]
    (nfl,) = category_breakdown(bets)
    assert nfl.profit == pytest.approx(15.0)
    assert nfl.staked == pytest.approx(30.0)
    assert nfl.roi == pytest.approx(0.5)


def test_category_order_of_first_appearance():
    bets = [_bet("won", category="NHL"), _bet("won", category="NBA"), _bet("lost", category="NHL")]
    assert [row.name for row in category_breakdown(bets)] == ["NHL", "NBA"]


def test_bet_type_breakdown_parlay_bucket():
    bets = [
        _bet("won", bet_type="parlay", is_parlay=True),
        _bet("lost", bet_type="parlay", is_parlay=True),
        _bet("won", bet_type="moneyline"),
    ]
    rows = {row.name: row for row in bet_type_breakdown(bets)}
    assert rows["parlay"].bets == 2
    assert rows["parlay"].win_rate == pytest.approx(0.5)
    assert rows["moneyline"].wins == 1


# ---------------------------------------------------------------------------
# summarize_legs (full pipeline)
# ---------------------------------------------------------------------------

def _legs():
    return [
        Leg(leg_id="p1-a", status=BetStatus.WON, stake=100.0, potential_payout=250.0,
            odds=-110.0, category="NBA", group_id="p1", is_parlay=True, placed_at=DAY1),
        Leg(leg_id="p1-b", status=BetStatus.WON, odds=-110.0, category="NFL",
            group_id="p1", is_parlay=True, placed_at=DAY1),
        Leg(leg_id="p1-c", status=BetStatus.WON, odds=150.0, category="NBA",
            group_id="p1", is_parlay=True, placed_at=DAY1),
        Leg(leg_id="s1", status=BetStatus.LOST, stake=50.0, potential_payout=95.0,
            category="NBA", bet_type="spread", placed_at=DAY1 + timedelta(days=1)),
        Leg(leg_id="s2", status=BetStatus.PENDING, stake=20.0, potential_payout=40.0,
            category="NBA", bet_type="spread", placed_at=DAY1 + timedelta(days=1)),
    ]


def test_summarize_legs():
    result = summarize_legs(_legs(), CFG)
    overall = result["overall"]
    assert overall["total_bets"] == 3
    assert overall["parlay_bets"] == 1
    assert overall["straight_bets"] == 2
    assert overall["win_rate"] == pytest.approx(0.5)
    assert overall["total_profit_dollars"] == pytest.approx(100.0)
    assert overall["roi"] == pytest.approx(round(100.0 / 150.0, 4))
    assert overall["streak_type"] == "loss"

    assert [row["date"] for row in result["timeline"]] == ["2025-01-10", "2025-01-11"]
    assert result["timeline"][-1]["cumulative_profit"] == pytest.approx(100.0)

    assert set(result["by_category"]) == {"multi-sport", "NBA"}
    assert result["by_category"]["NBA"]["bets"] == 2
    assert set(result["by_bet_type"]) == {"parlay", "spread"}


def test_summarize_legs_logs_summary(caplog):
    with caplog.at_level("INFO", logger="betledger.services.performance"):
        summarize_legs(_legs(), CFG)
    assert "Summary: 3 bets (1 parlays) W1-L1" in caplog.text


def test_summarize_legs_parlay_rows():
    (row,) = summarize_legs(_legs(), CFG)["parlays"]
    assert row["parlay_id"] == "p1"
    assert row["legs"] == 3
    assert row["category"] == "multi-sport"
    assert row["status"] == "won"
    assert row["odds"] == "+811"
    assert row["to_win"] == pytest.approx(150.0)
    assert row["profit"] == pytest.approx(150.0)
