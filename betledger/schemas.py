"""
Pydantic schemas at the ingestion boundary.

Upstream rows arrive as loosely-typed dicts: odds may be an integer or a
text token, status is a free string and timestamps are ISO strings.
:class:`LegRecord` validates and normalises one row, then
:meth:`LegRecord.to_leg` hands the core an immutable
:class:`~betledger.core.types.Leg`.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Optional, Union

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from betledger.core.odds_math import parse_odds
from betledger.core.types import BetStatus, Leg

# Sportsbook sync writes "cancelled" for bets that are refunded like voids
_STATUS_ALIASES = {"cancelled": "void", "canceled": "void"}


class LegRecord(BaseModel):
    """
    One bet leg as stored upstream.

    Unparseable odds are not a validation error; the leg still settles and
    simply does not contribute to a combined parlay price.
    """

    id: str = Field(..., min_length=1, description="Upstream leg identifier")
    status: BetStatus = Field(..., description="pending / won / lost / void / push")
    stake: float = Field(0.0, ge=0, description="Amount risked")
    potential_payout: float = Field(0.0, ge=0, description="Total return if won, stake included")
    odds: Optional[Union[int, float, str]] = Field(None, description="American odds, numeric or text")
    profit: Optional[float] = Field(None, description="Persisted realized profit")

    sport: Optional[str] = Field(None, description="Category tag")
    bet_type: Optional[str] = None
    bet_description: Optional[str] = None

    placed_at: Optional[datetime] = None
    game_date: Optional[datetime] = None

    parlay_id: Optional[str] = None
    is_parlay: bool = False

    model_config = {
        "extra": "ignore",
        "json_schema_extra": {
            "example": {
                "id": "leg-1",
                "status": "won",
                "stake": 100.0,
                "potential_payout": 250.0,
                "odds": "+150",
                "sport": "NBA",
                "bet_type": "moneyline",
                "placed_at": "2025-01-12T18:30:00Z",
                "parlay_id": "p-42",
                "is_parlay": True,
            }
        },
    }

    @field_validator("id", "parlay_id", mode="before")
    @classmethod
    def coerce_identifier(cls, v: Any) -> Any:
        if v is None or isinstance(v, str):
            return v
        return str(v)

    @field_validator("status", mode="before")
    @classmethod
    def normalise_status(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip().lower()
            return _STATUS_ALIASES.get(v, v)
        return v

    @field_validator("stake", "potential_payout", "profit", mode="before")
    @classmethod
    def null_amount(cls, v: Any, info: ValidationInfo) -> Any:
        # Upstream writes NULL for zeroed parlay legs
        if v is None and info.field_name != "profit":
            return 0.0
        return v

    @field_validator("profit")
    @classmethod
    def finite_profit(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and not math.isfinite(v):
            raise ValueError(f"profit={v} must be a finite number")
        return v

    @field_validator("placed_at", "game_date", mode="before")
    @classmethod
    def blank_timestamp(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def to_leg(self) -> Leg:
        return Leg(
            leg_id=self.id,
            status=self.status,
            stake=self.stake,
            potential_payout=self.potential_payout,
            odds=parse_odds(self.odds),
            category=self.sport or None,
            placed_at=self.placed_at,
            event_at=self.game_date,
            group_id=self.parlay_id or None,
            is_parlay=self.is_parlay,
            profit=self.profit,
            bet_type=self.bet_type or None,
            description=self.bet_description,
        )


def legs_from_records(rows: list[dict]) -> list[Leg]:
    """Validate raw upstream rows and convert them to core legs."""
    return [LegRecord.model_validate(row).to_leg() for row in rows]
