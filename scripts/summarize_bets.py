"""
summarize_bets.py — Settle and summarize an export of bet legs.

Input
-----
  A JSON file holding a list of leg rows as exported from the bets table
  (id, status, stake, potential_payout, odds, sport, placed_at, game_date,
  parlay_id, is_parlay, profit, ...).  A top-level {"bets": [...]} wrapper
  is also accepted.

Output
------
  The summary (overall, timeline, by_category, by_bet_type, parlays) as JSON on
  stdout.

Usage
-----
  python scripts/summarize_bets.py bets.json
  python scripts/summarize_bets.py bets.json --timezone America/New_York
  python scripts/summarize_bets.py bets.json --strict -v
"""

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

# Ensure the project root (one level up from scripts/) is on sys.path so that
# `from betledger.xxx import ...` resolves when the script is run directly.
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Settle bet legs and print performance summary."
    )
    parser.add_argument("path", type=Path, help="JSON file of leg rows.")
    parser.add_argument(
        "--timezone",
        default=None,
        help="IANA zone for daily buckets (default: BETLEDGER_TIMEZONE or UTC).",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Raise on invariant violations instead of logging them.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
    )
    logger = logging.getLogger("summarize_bets")

    from pydantic import ValidationError

    from betledger.core.settlement_config import SettlementConfig
    from betledger.schemas import legs_from_records
    from betledger.services.performance import summarize_legs

    cfg = SettlementConfig.from_env()
    if args.timezone:
        cfg = replace(cfg, timezone=args.timezone)
    if args.strict:
        cfg = replace(cfg, strict_invariants=True)

    try:
        payload = json.loads(args.path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Cannot read %s: %s", args.path, exc)
        sys.exit(1)

    rows = payload.get("bets", []) if isinstance(payload, dict) else payload
    try:
        legs = legs_from_records(rows)
    except ValidationError as exc:
        logger.error("Invalid leg row in %s:\n%s", args.path, exc)
        sys.exit(1)

    logger.info("Loaded %d leg(s) from %s", len(legs), args.path)
    print(json.dumps(summarize_legs(legs, cfg), indent=2))


if __name__ == "__main__":
    main()
