"""Settlement configuration — every tunable label and policy in one place.

:class:`SettlementConfig` is a frozen dataclass carrying the display labels
used for unresolvable categories, the timezone used to bucket bets into
calendar days, and the invariant-checking mode.  Nowhere else in the package
should these strings be hard-coded.

Values come from the environment (a ``.env`` file is honoured) via
:meth:`SettlementConfig.from_env`.  Override a single field for a test or a
one-off report with :func:`dataclasses.replace`::

    from dataclasses import replace
    from betledger.core.settlement_config import SettlementConfig

    cfg = replace(SettlementConfig.from_env(), timezone="America/New_York")
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import tzinfo
from typing import Final
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

#: Default sentinel for a parlay whose legs span more than one category.
DEFAULT_MULTI_CATEGORY_LABEL: Final[str] = "multi-sport"

#: Default label for bets that carry no category tag at all.
DEFAULT_UNKNOWN_CATEGORY_LABEL: Final[str] = "Unknown"

#: Bet-type bucket every parlay is reported under.
DEFAULT_PARLAY_BET_TYPE: Final[str] = "parlay"

DEFAULT_TIMEZONE: Final[str] = "UTC"

_TRUTHY: Final[frozenset] = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True)
class SettlementConfig:
    """Immutable configuration bundle for one aggregation pass.

    Attributes:
        timezone: IANA zone name.  Aware timestamps are converted into this
            zone before their calendar date is taken; naive timestamps are
            assumed to already be local to it.
        multi_category_label: Category reported for a parlay whose legs
            carry more than one distinct category.
        unknown_category_label: Category reported when no leg carries one.
        parlay_bet_type: Bucket used for parlays in the bet-type breakdown.
        strict_invariants: When true, an empty parlay group raises
            :class:`~betledger.core.exceptions.EmptyGroupError`.  When false
            it is logged and resolved to an empty pending result.
    """

    timezone: str = DEFAULT_TIMEZONE
    multi_category_label: str = DEFAULT_MULTI_CATEGORY_LABEL
    unknown_category_label: str = DEFAULT_UNKNOWN_CATEGORY_LABEL
    parlay_bet_type: str = DEFAULT_PARLAY_BET_TYPE
    strict_invariants: bool = False

    @property
    def tz(self) -> tzinfo:
        return ZoneInfo(self.timezone)

    @classmethod
    def from_env(cls) -> "SettlementConfig":
        """Build a config from ``BETLEDGER_*`` environment variables."""
        load_dotenv()
        return cls(
            timezone=os.getenv("BETLEDGER_TIMEZONE", DEFAULT_TIMEZONE),
            multi_category_label=os.getenv(
                "BETLEDGER_MULTI_CATEGORY_LABEL", DEFAULT_MULTI_CATEGORY_LABEL
            ),
            unknown_category_label=os.getenv(
                "BETLEDGER_UNKNOWN_CATEGORY_LABEL", DEFAULT_UNKNOWN_CATEGORY_LABEL
            ),
            parlay_bet_type=os.getenv(
                "BETLEDGER_PARLAY_BET_TYPE", DEFAULT_PARLAY_BET_TYPE
            ),
            strict_invariants=(
                os.getenv("BETLEDGER_STRICT_INVARIANTS", "false").strip().lower()
                in _TRUTHY
            ),
        )


_default_config: SettlementConfig | None = None


def get_config() -> SettlementConfig:
    """Return the process-wide config, loading it from the environment once."""
    global _default_config
    if _default_config is None:
        _default_config = SettlementConfig.from_env()
    return _default_config


def reset_config() -> None:
    """Drop the cached config so the next :func:`get_config` re-reads env."""
    global _default_config
    _default_config = None
