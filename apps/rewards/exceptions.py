"""
Reward points ledger error taxonomy.
"""
from rest_framework import status

from apps.common.exceptions import ServiceError


class RewardsError(ServiceError):
    """Base class for every error raised by the rewards ledger"""
    error_code = 'REWARDS_ERROR'


class InvalidAmount(RewardsError, ValueError):
    """Non-positive points requested; rejected before touching storage"""
    error_code = 'INVALID_AMOUNT'
    default_message = 'Points amount must be a positive integer'


class InsufficientBalance(RewardsError):
    """Redemption requested more points than are available"""
    error_code = 'INSUFFICIENT_BALANCE'

    def __init__(self, available, requested):
        self.available = available
        self.requested = requested
        self.shortfall = requested - available
        super().__init__(
            f"Insufficient points. Available: {available}, requested: {requested}, "
            f"short by {self.shortfall}"
        )


class PromotionUnavailable(RewardsError):
    """Promotion is inactive, outside its validity window or used up"""
    error_code = 'PROMOTION_UNAVAILABLE'
    default_message = 'Promotion is not available for redemption'


class StorageUnavailable(RewardsError):
    """Transient infrastructure failure; callers may retry"""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    error_code = 'STORAGE_UNAVAILABLE'
    default_message = 'Points storage is temporarily unavailable'


class CriticalSectionTimeout(StorageUnavailable):
    """
    Timed out waiting for the user's critical section.

    Nothing was written; the outcome of any earlier attempt should be
    re-checked through the summary.
    """
    error_code = 'LEDGER_BUSY'
    default_message = 'Points ledger is busy for this user, re-check the balance and retry'


class ConcurrentModification(RewardsError):
    """Optimistic version check on the summary row failed"""
    status_code = status.HTTP_409_CONFLICT
    error_code = 'CONCURRENT_MODIFICATION'
    default_message = 'Points summary was modified concurrently'


class ImmutableTransactionError(RewardsError):
    """Attempted to update or delete an appended ledger entry"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = 'IMMUTABLE_TRANSACTION'
    default_message = 'Point transactions are append-only'
