"""
Reward points serializers module.
"""
from .summary_serializers import UserPointSummarySerializer, LevelInfoSerializer, PointsOverviewSerializer
from .transaction_serializers import PointTransactionListSerializer, PointTransactionSerializer
from .redemption_serializers import (
    RedeemPointsSerializer, RedeemPromotionSerializer, CheckBalanceQuerySerializer,
    RedemptionResultSerializer, BalanceCheckSerializer
)
from .promotion_serializers import PromotionSerializer
from .grant_serializers import AdminGrantSerializer, AwardActionSerializer
from .leaderboard_serializers import LeaderboardEntrySerializer

__all__ = [
    'UserPointSummarySerializer',
    'LevelInfoSerializer',
    'PointsOverviewSerializer',
    'PointTransactionListSerializer',
    'PointTransactionSerializer',
    'RedeemPointsSerializer',
    'RedeemPromotionSerializer',
    'CheckBalanceQuerySerializer',
    'RedemptionResultSerializer',
    'BalanceCheckSerializer',
    'PromotionSerializer',
    'AdminGrantSerializer',
    'AwardActionSerializer',
    'LeaderboardEntrySerializer',
]
