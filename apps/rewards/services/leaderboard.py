"""
Leaderboard index served from a cached snapshot of point summaries.
"""
import logging
from dataclasses import asdict, dataclass

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.cache import cache

from ..models import UserPointSummary
from .tier_calculator import TierCalculator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LeaderboardEntry:
    rank: int
    user_id: int
    username: str
    total_points: int
    level: int
    level_name: str
    level_color: str


class LeaderboardIndex:
    """
    Ranking by lifetime points, ties broken by earliest account creation.

    Reads come from a snapshot kept in the Django cache. A snapshot lives at
    most REWARDS_LEADERBOARD_CACHE_SECONDS and is dropped after every committed
    ledger write, so readers never see a ranking older than that window.
    """
    CACHE_KEY = 'rewards:leaderboard:snapshot'

    @classmethod
    def top(cls, n=10):
        n = max(int(n), 0)
        if n == 0:
            return []
        if n > settings.REWARDS_LEADERBOARD_SNAPSHOT_SIZE:
            return cls._compute(n)

        snapshot = cache.get(cls.CACHE_KEY)
        if snapshot is None:
            snapshot = cls.refresh()
        return [LeaderboardEntry(**row) for row in snapshot[:n]]

    @classmethod
    def refresh(cls):
        rows = [asdict(entry) for entry in cls._compute(settings.REWARDS_LEADERBOARD_SNAPSHOT_SIZE)]
        cache.set(cls.CACHE_KEY, rows, timeout=settings.REWARDS_LEADERBOARD_CACHE_SECONDS)
        logger.debug(f"Leaderboard snapshot refreshed with {len(rows)} entries")
        return rows

    @classmethod
    def invalidate(cls):
        cache.delete(cls.CACHE_KEY)

    @staticmethod
    def ordering():
        """Account creation comes from the user model; summaries may be created lazily"""
        user_fields = {field.name for field in get_user_model()._meta.get_fields()}
        if 'date_joined' in user_fields:
            return ['-total_points', 'user__date_joined', 'user_id']
        return ['-total_points', 'created_at', 'user_id']

    @classmethod
    def _compute(cls, limit):
        summaries = UserPointSummary.objects.select_related('user').filter(
            total_points__gt=0
        ).order_by(*cls.ordering())[:limit]

        return [
            LeaderboardEntry(
                rank=position,
                user_id=summary.user_id,
                username=summary.user.get_username(),
                total_points=summary.total_points,
                level=summary.level,
                level_name=summary.level_name,
                level_color=TierCalculator.get_color(summary.level),
            )
            for position, summary in enumerate(summaries, start=1)
        ]
