"""
Tier calculator: maps lifetime points to a reward tier.
"""
from dataclasses import dataclass
from typing import Optional

from ..exceptions import InvalidAmount
from ..models import Tier


class TierCalculator:
    """Stateless tier lookups over fixed lower bounds"""

    # Inclusive lower bound of lifetime points for each tier
    TIER_THRESHOLDS = {
        Tier.BRONZE: 0,
        Tier.SILVER: 500,
        Tier.GOLD: 2000,
        Tier.PLATINUM: 5000,
        Tier.DIAMOND: 10000,
    }

    TIER_COLORS = {
        Tier.BRONZE: '#CD7F32',
        Tier.SILVER: '#C0C0C0',
        Tier.GOLD: '#FFD700',
        Tier.PLATINUM: '#E5E4E2',
        Tier.DIAMOND: '#B9F2FF',
    }

    @classmethod
    def tier_for(cls, total_points):
        """Highest tier whose lower bound does not exceed ``total_points``"""
        if total_points < 0:
            raise InvalidAmount("Total points cannot be negative")

        for tier in sorted(cls.TIER_THRESHOLDS, reverse=True):
            if total_points >= cls.TIER_THRESHOLDS[tier]:
                return tier
        return Tier.BRONZE

    @classmethod
    def next_tier(cls, tier) -> Optional[Tier]:
        if tier == max(Tier):
            return None
        return Tier(tier + 1)

    @classmethod
    def get_color(cls, tier):
        return cls.TIER_COLORS.get(Tier(tier), cls.TIER_COLORS[Tier.BRONZE])

    @classmethod
    def level_info(cls, total_points):
        tier = cls.tier_for(total_points)
        next_tier = cls.next_tier(tier)
        floor = cls.TIER_THRESHOLDS[tier]

        if next_tier is None:
            return LevelInfo(
                level=int(tier),
                level_name=tier.label,
                level_color=cls.get_color(tier),
                total_points=total_points,
                next_level_points=None,
                points_to_next_level=0,
                progress_percent=100.0,
            )

        ceiling = cls.TIER_THRESHOLDS[next_tier]
        progress = (total_points - floor) / (ceiling - floor) * 100
        return LevelInfo(
            level=int(tier),
            level_name=tier.label,
            level_color=cls.get_color(tier),
            total_points=total_points,
            next_level_points=ceiling,
            points_to_next_level=ceiling - total_points,
            progress_percent=round(min(100.0, max(0.0, progress)), 2),
        )


@dataclass(frozen=True)
class LevelInfo:
    level: int
    level_name: str
    level_color: str
    total_points: int
    next_level_points: Optional[int]
    points_to_next_level: int
    progress_percent: float


def tier_for(total_points):
    return TierCalculator.tier_for(total_points)
