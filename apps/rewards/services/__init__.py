"""
Reward points services module.

All services are exported from this module so callers can import from one place.
"""
from .ledger_store import LedgerStore, TransactionPage
from .balance_projector import BalanceProjector, SummaryDelta
from .tier_calculator import TierCalculator, LevelInfo, tier_for
from .leaderboard import LeaderboardIndex, LeaderboardEntry
from .redemption_coordinator import (
    RedemptionCoordinator, RedemptionRequest, RedemptionResult, BalanceCheck
)
from .expiration_sweeper import ExpirationSweeper, SweepReport
from .reward_points_service import RewardPointsService
from .reward_integration_service import RewardIntegrationService, RewardAction

__all__ = [
    'LedgerStore',
    'TransactionPage',
    'BalanceProjector',
    'SummaryDelta',
    'TierCalculator',
    'LevelInfo',
    'tier_for',
    'LeaderboardIndex',
    'LeaderboardEntry',
    'RedemptionCoordinator',
    'RedemptionRequest',
    'RedemptionResult',
    'BalanceCheck',
    'ExpirationSweeper',
    'SweepReport',
    'RewardPointsService',
    'RewardIntegrationService',
    'RewardAction',
]
