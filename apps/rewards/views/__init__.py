"""
Reward points views module.

All views are exported from this module so urls.py has a single import.
"""
from .account_views import get_points_summary, get_points_transactions, get_points_level
from .redemption_views import check_balance, use_points, use_promotion, get_promotions
from .leaderboard_views import get_leaderboard
from .admin_views import admin_add_points
from .integration_views import internal_award_points

__all__ = [
    'get_points_summary',
    'get_points_transactions',
    'get_points_level',
    'check_balance',
    'use_points',
    'use_promotion',
    'get_promotions',
    'get_leaderboard',
    'admin_add_points',
    'internal_award_points',
]
