"""
Reward points service: the API other apps use to earn, spend and read points.
"""
import logging
from datetime import timedelta

from django.conf import settings
from django.utils import timezone

from ..exceptions import InvalidAmount
from ..models import TransactionKind
from ..models.transaction import EXPIRING_KINDS
from .balance_projector import BalanceProjector
from .ledger_store import LedgerStore
from .leaderboard import LeaderboardIndex
from .redemption_coordinator import RedemptionCoordinator, RedemptionRequest
from .tier_calculator import TierCalculator
from .unit_of_work import publish_after_commit, run_locked

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger('audit')

EARN_KINDS = (TransactionKind.EARNED, TransactionKind.BONUS, TransactionKind.REFERRAL)
ADMIN_REFERENCE_TYPE = 'admin_action'


class RewardPointsService:
    """Service for handling reward points operations"""

    @staticmethod
    def earn(user, points, reason, description='', reference_type='', reference_id=None,
             kind=TransactionKind.EARNED, expires_at=None):
        """
        Credit points to a user.

        Events delivered at least once should pass a ``reference_id``: a repeat
        with the same kind, reference type and id returns the original
        transaction instead of crediting again.
        """
        if kind not in EARN_KINDS:
            raise InvalidAmount(f"{kind} cannot be earned")
        return RewardPointsService._credit(
            user, kind, points, reason, description, reference_type, reference_id, expires_at
        )

    @staticmethod
    def admin_grant(user, points, reason, description='', granted_by=None, reference_id=None):
        """Privileged manual credit; granted points do not expire"""
        transaction = RewardPointsService._credit(
            user, TransactionKind.ADMIN_GRANT, points, reason, description,
            ADMIN_REFERENCE_TYPE, reference_id, None,
        )
        audit_logger.info(
            f"Admin grant of {points} points to user {user.pk} by "
            f"{getattr(granted_by, 'pk', None)}: {reason} (transaction {transaction.id})"
        )
        return transaction

    @staticmethod
    def redeem(user, points, reason, description='', reference_type='', reference_id=None):
        return RedemptionCoordinator.redeem(RedemptionRequest(
            user=user,
            points=points,
            reason=reason,
            description=description,
            reference_type=reference_type,
            reference_id=reference_id,
        ))

    @staticmethod
    def redeem_promotion(user, promotion_id, reference_id=None):
        return RedemptionCoordinator.redeem_promotion(user, promotion_id, reference_id=reference_id)

    @staticmethod
    def available_promotions():
        return RedemptionCoordinator.available_promotions()

    @staticmethod
    def check_balance(user, points):
        return RedemptionCoordinator.check_balance(user, points)

    @staticmethod
    def get_summary(user):
        return BalanceProjector.get_summary(user)

    @staticmethod
    def get_level(user):
        return TierCalculator.level_info(BalanceProjector.get_summary(user).total_points)

    @staticmethod
    def get_points_overview(user):
        """Summary plus tier progress and points expiring soon"""
        summary = BalanceProjector.get_summary(user)
        return {
            'summary': summary,
            'level': TierCalculator.level_info(summary.total_points),
            'expiring_soon': BalanceProjector.expiring_soon(user, settings.REWARDS_EXPIRING_SOON_DAYS),
        }

    @staticmethod
    def list_transactions(user, page=1, page_size=20, kind=None):
        return LedgerStore.list_by_user(user, page=page, page_size=page_size, kind=kind)

    @staticmethod
    def get_leaderboard(limit=10):
        return LeaderboardIndex.top(limit)

    @staticmethod
    def _credit(user, kind, points, reason, description, reference_type, reference_id, expires_at):
        if isinstance(points, bool) or not isinstance(points, int) or points <= 0:
            raise InvalidAmount()

        if kind in EXPIRING_KINDS:
            expires_at = expires_at or timezone.now() + timedelta(days=settings.REWARDS_POINTS_EXPIRY_DAYS)
        else:
            expires_at = None

        def operation(summary):
            previous = LedgerStore.find_by_reference(user, [kind], reference_type, reference_id)
            if previous is not None:
                logger.info(f"Ignoring repeated {kind} {reference_type}:{reference_id} for user {user.pk}")
                return previous

            previous_level = summary.level
            transaction = LedgerStore.append(
                user=user,
                kind=kind,
                points=points,
                reason=reason,
                description=description,
                reference_type=reference_type,
                reference_id=reference_id,
                expires_at=expires_at,
                balance_after=summary.available_points + points,
            )
            BalanceProjector.open_lot(transaction)
            BalanceProjector.apply(summary, transaction)
            publish_after_commit(transaction, summary, previous_level)
            logger.info(f"User {user.pk} credited {points} points ({kind}: {reason})")
            return transaction

        return run_locked(user, operation)
