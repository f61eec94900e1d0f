"""Rank and experience-point engine for Aegis.

Rank is a pure step function of accumulated XP. It is never stored: every
reader derives it from the user's ``xp`` so a rank can not go stale.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..database.enums import UserRank

logger = logging.getLogger(__name__)

# Ordered from lowest to highest tier; each entry is (rank, minimum xp, display name)
RANK_TIERS: list[tuple[UserRank, int, str]] = [
    (UserRank.NOVICE, 0, "Novice"),
    (UserRank.DEFENDER, 500, "Defender"),
    (UserRank.GUARDIAN, 1500, "Guardian"),
    (UserRank.SENTINEL, 3500, "Sentinel"),
    (UserRank.ARCHITECT, 7000, "Architect"),
]


@dataclass
class RankProgress:
    """Snapshot of a user's position on the rank ladder.

    Attributes:
        rank: The tier for the current xp.
        rank_name: Display name of the tier.
        xp: The cumulative experience points.
        next_rank: The following tier, or None at the top of the ladder.
        xp_to_next_rank: Points still needed for the next tier (0 at the top).
    """
    rank: UserRank
    rank_name: str
    xp: int
    next_rank: Optional[UserRank]
    xp_to_next_rank: int


def _tier_index(xp: int) -> int:
    index: int = 0
    for i, (_, min_xp, _) in enumerate(RANK_TIERS):
        if xp >= min_xp:
            index = i
    return index


def calculate_rank(xp: int) -> UserRank:
    """Return the rank tier for a cumulative xp total.

    Args:
        xp: Accumulated experience points. Negative values rank as novice.

    Returns:
        The highest tier whose threshold the xp reaches.
    """
    return RANK_TIERS[_tier_index(xp)][0]


def xp_to_next_rank(xp: int) -> int:
    """Return how many points separate ``xp`` from the next tier.

    Architects have no next tier and always get 0.
    """
    index: int = _tier_index(xp)
    if index == len(RANK_TIERS) - 1:
        return 0
    return max(0, RANK_TIERS[index + 1][1] - xp)


def get_rank_progress(xp: int) -> RankProgress:
    """Build the full rank progress view for a cumulative xp total."""
    index: int = _tier_index(xp)
    rank, _, rank_name = RANK_TIERS[index]
    next_rank: Optional[UserRank] = None
    if index < len(RANK_TIERS) - 1:
        next_rank = RANK_TIERS[index + 1][0]

    return RankProgress(
        rank=rank,
        rank_name=rank_name,
        xp=xp,
        next_rank=next_rank,
        xp_to_next_rank=xp_to_next_rank(xp),
    )
