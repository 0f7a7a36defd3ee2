"""
Reward points models module.

All models are exported from this module so callers can import from one place.
"""
from .tier import Tier
from .transaction import PointTransaction, TransactionKind
from .lot import PointLot
from .summary import UserPointSummary
from .promotion import Promotion, PromotionType

__all__ = [
    'Tier',
    'PointTransaction',
    'TransactionKind',
    'PointLot',
    'UserPointSummary',
    'Promotion',
    'PromotionType',
]
