"""
Redemption coordinator: spends points at most once per redemption request.
"""
import logging
from dataclasses import dataclass, field
from typing import Optional

from django.utils import timezone

from ..exceptions import InsufficientBalance, InvalidAmount, PromotionUnavailable
from ..models import PointTransaction, Promotion, TransactionKind
from .balance_projector import BalanceProjector
from .ledger_store import LedgerStore
from .unit_of_work import publish_after_commit, run_locked

logger = logging.getLogger(__name__)

PROMOTION_REFERENCE_TYPE = 'promotion'


@dataclass
class RedemptionRequest:
    user: object
    points: int
    reason: str
    description: str = ''
    reference_type: str = ''
    reference_id: Optional[str] = None
    promotion: Optional[Promotion] = None


@dataclass
class RedemptionResult:
    success: bool
    message: str
    remaining_points: Optional[int]
    transaction_id: Optional[int] = None
    error_code: Optional[str] = None
    shortfall: int = 0
    # A replay returns the original result; only this flag tells them apart
    replayed: bool = field(default=False, compare=False)

    @classmethod
    def from_transaction(cls, txn, replayed=False):
        return cls(
            success=True,
            message=f"Redeemed {-txn.points} points",
            remaining_points=txn.balance_after,
            transaction_id=txn.id,
            replayed=replayed,
        )

    @classmethod
    def failure(cls, error, remaining_points):
        return cls(
            success=False,
            message=error.message,
            remaining_points=remaining_points,
            error_code=error.error_code,
            shortfall=getattr(error, 'shortfall', 0),
        )


@dataclass
class BalanceCheck:
    has_enough: bool
    required_points: int
    available_points: int
    remaining_points: int


def _validate_points(points):
    if isinstance(points, bool) or not isinstance(points, int) or points <= 0:
        raise InvalidAmount()


class RedemptionCoordinator:
    """Validates and applies point spending against the ledger"""

    @classmethod
    def redeem(cls, request: RedemptionRequest) -> RedemptionResult:
        """
        Redeem points for a request.

        Validation failures come back as typed results; only infrastructure
        errors propagate. A request whose ``reference_id`` was already redeemed
        returns the original result without writing anything.
        """
        try:
            _validate_points(request.points)
        except InvalidAmount as e:
            return RedemptionResult.failure(e, remaining_points=None)

        def operation(summary):
            previous = LedgerStore.find_by_reference(
                request.user, [TransactionKind.REDEEMED], request.reference_type, request.reference_id
            )
            if previous is not None:
                logger.info(
                    f"Replaying redemption {request.reference_type}:{request.reference_id} "
                    f"for user {request.user.pk}"
                )
                return RedemptionResult.from_transaction(previous, replayed=True)

            if request.promotion is not None:
                try:
                    cls._check_promotion_usage(request.user, request.promotion)
                except PromotionUnavailable as e:
                    return RedemptionResult.failure(e, remaining_points=summary.available_points)

            if summary.available_points < request.points:
                error = InsufficientBalance(available=summary.available_points, requested=request.points)
                logger.info(f"Redemption refused for user {request.user.pk}: {error.message}")
                return RedemptionResult.failure(error, remaining_points=summary.available_points)

            previous_level = summary.level
            BalanceProjector.consume_fifo(request.user, request.points)
            txn = LedgerStore.append(
                user=request.user,
                kind=TransactionKind.REDEEMED,
                points=-request.points,
                reason=request.reason,
                description=request.description,
                reference_type=request.reference_type,
                reference_id=request.reference_id,
                promotion=request.promotion,
                balance_after=summary.available_points - request.points,
            )
            BalanceProjector.apply(summary, txn)
            publish_after_commit(txn, summary, previous_level)
            logger.info(
                f"User {request.user.pk} redeemed {request.points} points "
                f"({request.reason}); {summary.available_points} remaining"
            )
            return RedemptionResult.from_transaction(txn)

        return run_locked(request.user, operation)

    @staticmethod
    def check_balance(user, points) -> BalanceCheck:
        """Advisory pre-flight check; it reserves nothing"""
        _validate_points(points)
        available = BalanceProjector.get_summary(user).available_points
        has_enough = available >= points
        return BalanceCheck(
            has_enough=has_enough,
            required_points=points,
            available_points=available,
            remaining_points=available - points if has_enough else available,
        )

    @classmethod
    def redeem_promotion(cls, user, promotion_id, reference_id=None, at=None) -> RedemptionResult:
        """Claim a catalog promotion by spending its required points"""
        at = at or timezone.now()
        try:
            promotion = Promotion.objects.get(pk=promotion_id)
        except Promotion.DoesNotExist:
            error = PromotionUnavailable(f"Promotion {promotion_id} does not exist")
            return RedemptionResult.failure(error, remaining_points=BalanceProjector.get_summary(user).available_points)

        if not promotion.is_reward_promotion or not promotion.is_valid_at(at):
            error = PromotionUnavailable(f"Promotion {promotion.code} is not available for redemption")
            return RedemptionResult.failure(error, remaining_points=BalanceProjector.get_summary(user).available_points)

        return cls.redeem(RedemptionRequest(
            user=user,
            points=promotion.required_points,
            reason=f"Promotion {promotion.code}",
            description=promotion.description,
            reference_type=PROMOTION_REFERENCE_TYPE,
            reference_id=reference_id,
            promotion=promotion,
        ))

    @staticmethod
    def available_promotions(at=None):
        return Promotion.claimable(at)

    @staticmethod
    def _check_promotion_usage(user, promotion):
        if not promotion.max_usage_per_user:
            return
        used = PointTransaction.objects.filter(
            user=user, kind=TransactionKind.REDEEMED, promotion=promotion
        ).count()
        if used >= promotion.max_usage_per_user:
            raise PromotionUnavailable(
                f"Promotion {promotion.code} can be used at most {promotion.max_usage_per_user} times"
            )
