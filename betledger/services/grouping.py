"""
Parlay grouping: split a flat list of legs into singles and parlay groups.

A leg joins a parlay only when it carries a non-empty group id *and* the
parlay flag.  Records where the two disagree (partially-migrated rows) are
treated as singles and logged.
"""

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from betledger.core.settlement_config import SettlementConfig, get_config
from betledger.core.types import GroupMembership, Leg, ParlayGroup
from betledger.services.settlement import build_parlay_group

logger = logging.getLogger(__name__)


def partition_legs(legs: Iterable[Leg]) -> Tuple[List[Leg], Dict[str, List[Leg]]]:
    """
    Split legs into singles and raw parlay groups.

    Singles keep their input order.  Groups keep first-seen order and,
    within a group, upstream leg order.
    """
    singles: List[Leg] = []
    groups: Dict[str, List[Leg]] = {}
    partial = 0

    for leg in legs:
        membership = leg.membership
        if membership is GroupMembership.GROUPED:
            groups.setdefault(leg.group_id, []).append(leg)
            continue
        if membership is GroupMembership.FLAGGED_WITHOUT_ID:
            partial += 1
        elif leg.group_id:
            logger.debug("Leg %s has group id %s but no parlay flag", leg.leg_id, leg.group_id)
        singles.append(leg)

    if partial:
        logger.warning("%d leg(s) flagged as parlay without a group id; treated as singles", partial)
    return singles, groups


def group_legs(
    legs: Iterable[Leg],
    config: Optional[SettlementConfig] = None,
) -> Tuple[List[Leg], List[ParlayGroup]]:
    """
    Group legs into singles and resolved parlays.

    Returns:
        ``(singles, parlays)``: singles unmodified in input order, parlays
        in order of first appearance, each fully resolved.
    """
    cfg = config or get_config()
    singles, groups = partition_legs(legs)
    parlays = [build_parlay_group(group_id, group, cfg) for group_id, group in groups.items()]

    logger.debug(
        "Grouped into %d single(s) and %d parlay(s) covering %d leg(s)",
        len(singles), len(parlays), sum(len(p.legs) for p in parlays),
    )
    return singles, parlays
