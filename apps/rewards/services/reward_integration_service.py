"""
Reward actions: fixed point awards for events raised by other parts of the platform.
"""
from django.utils import timezone

from ..models import TransactionKind
from .reward_points_service import RewardPointsService


class RewardAction:
    BOOKING_COMPLETED = 'BOOKING_COMPLETED'
    REVIEW_SUBMITTED = 'REVIEW_SUBMITTED'
    FIRST_BOOKING = 'FIRST_BOOKING'
    REFERRAL = 'REFERRAL'
    WEEKLY_LOGIN = 'WEEKLY_LOGIN'
    PROFILE_COMPLETED = 'PROFILE_COMPLETED'
    VEHICLE_ADDED = 'VEHICLE_ADDED'
    EMERGENCY_REQUEST = 'EMERGENCY_REQUEST'


class RewardIntegrationService:
    """Maps platform events to ledger credits, deduplicated by event reference"""

    # action -> (points, kind, reason)
    ACTION_REWARDS = {
        RewardAction.BOOKING_COMPLETED: (50, TransactionKind.EARNED, 'Booking completed'),
        RewardAction.REVIEW_SUBMITTED: (20, TransactionKind.EARNED, 'Garage review submitted'),
        RewardAction.FIRST_BOOKING: (100, TransactionKind.BONUS, 'First booking welcome bonus'),
        RewardAction.REFERRAL: (200, TransactionKind.REFERRAL, 'Friend referral'),
        RewardAction.WEEKLY_LOGIN: (10, TransactionKind.BONUS, 'Weekly login'),
        RewardAction.PROFILE_COMPLETED: (30, TransactionKind.BONUS, 'Profile completed'),
        RewardAction.VEHICLE_ADDED: (15, TransactionKind.EARNED, 'Vehicle added'),
        RewardAction.EMERGENCY_REQUEST: (25, TransactionKind.EARNED, 'Emergency rescue request'),
    }

    # Actions that can only ever be rewarded once per user
    ONCE_PER_USER = {RewardAction.FIRST_BOOKING, RewardAction.PROFILE_COMPLETED}

    @classmethod
    def get_points_info(cls):
        return {action: points for action, (points, _, _) in cls.ACTION_REWARDS.items()}

    @classmethod
    def default_reference(cls, user, action, at=None):
        """Reference id for actions whose identity is implied by the user or the calendar"""
        if action in cls.ONCE_PER_USER:
            return f"user_{user.pk}"
        if action == RewardAction.WEEKLY_LOGIN:
            year, week, _ = (at or timezone.now()).isocalendar()
            return f"{year}-W{week:02d}"
        return None

    @classmethod
    def award(cls, user, action, reference_id=None, description=''):
        """Credit the points for ``action``; repeats of the same event are no-ops"""
        if action not in cls.ACTION_REWARDS:
            raise ValueError(f"Unknown reward action: {action}")

        reference_id = reference_id or cls.default_reference(user, action)
        if reference_id is None:
            raise ValueError(f"reference_id is required for {action}")

        points, kind, reason = cls.ACTION_REWARDS[action]
        return RewardPointsService.earn(
            user=user,
            points=points,
            reason=reason,
            description=description,
            reference_type=action.lower(),
            reference_id=str(reference_id),
            kind=kind,
        )
