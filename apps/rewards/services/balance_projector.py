"""
Balance projector: keeps UserPointSummary and PointLot rows in step with the ledger.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from django.db.models import Sum
from django.utils import timezone

from ..exceptions import ConcurrentModification, InsufficientBalance
from ..models import PointLot, TransactionKind, UserPointSummary
from ..models.transaction import CREDIT_KINDS
from .ledger_store import LedgerStore
from .tier_calculator import TierCalculator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SummaryDelta:
    total_points: int = 0
    used_points: int = 0
    expired_points: int = 0
    available_points: int = 0
    earned_at: Optional[datetime] = None
    used_at: Optional[datetime] = None

    @classmethod
    def for_entry(cls, kind, points, at=None):
        magnitude = abs(points)
        if kind in CREDIT_KINDS:
            return cls(total_points=magnitude, available_points=magnitude, earned_at=at)
        if kind == TransactionKind.REDEEMED:
            return cls(used_points=magnitude, available_points=-magnitude, used_at=at)
        if kind == TransactionKind.EXPIRED:
            return cls(expired_points=magnitude, available_points=-magnitude)
        raise ValueError(f"Unknown transaction kind: {kind}")


class BalanceProjector:
    """Incremental and fold-based projections of a user's ledger"""

    @staticmethod
    def get_summary(user):
        """Get or lazily create a zeroed summary for user"""
        summary, created = UserPointSummary.objects.get_or_create(user=user)
        if created:
            logger.debug(f"Created empty points summary for user {user.pk}")
        return summary

    @staticmethod
    def lock_summary(user):
        """Fetch the summary row with a row lock; call inside transaction.atomic()"""
        summary, _ = UserPointSummary.objects.select_for_update().get_or_create(user=user)
        return summary

    @staticmethod
    def apply(summary, txn):
        """
        Fold one freshly appended transaction into the cached summary.

        The write is a compare-and-swap on ``version``; losing the race raises
        ConcurrentModification and the enclosing atomic block rolls back the
        append as well.
        """
        delta = SummaryDelta.for_entry(txn.kind, txn.points, at=txn.created_at)

        total_points = summary.total_points + delta.total_points
        used_points = summary.used_points + delta.used_points
        expired_points = summary.expired_points + delta.expired_points
        available_points = summary.available_points + delta.available_points
        if available_points < 0:
            raise InsufficientBalance(available=summary.available_points, requested=abs(txn.points))

        values = {
            'total_points': total_points,
            'used_points': used_points,
            'expired_points': expired_points,
            'available_points': available_points,
            'level': int(TierCalculator.tier_for(total_points)),
            'total_transactions': summary.total_transactions + 1,
            'last_earned_at': delta.earned_at or summary.last_earned_at,
            'last_used_at': delta.used_at or summary.last_used_at,
            'version': summary.version + 1,
            'updated_at': timezone.now(),
        }
        updated = UserPointSummary.objects.filter(pk=summary.pk, version=summary.version).update(**values)
        if updated != 1:
            raise ConcurrentModification(
                f"Points summary of user {summary.user_id} changed under version {summary.version}"
            )

        for field, value in values.items():
            setattr(summary, field, value)
        return summary

    @staticmethod
    def open_lot(txn):
        """Start tracking the unconsumed remainder of a credit transaction"""
        return PointLot.objects.create(
            user_id=txn.user_id,
            transaction=txn,
            points_amount=txn.points,
            remaining_points=txn.points,
            earned_at=txn.created_at,
            expires_at=txn.expires_at,
        )

    @staticmethod
    def consume_fifo(user, points):
        """Drain ``points`` from the user's open lots, oldest earned first"""
        remaining_to_consume = points
        open_lots = PointLot.objects.select_for_update().filter(
            user=user,
            is_expired=False,
            remaining_points__gt=0,
        ).order_by('earned_at', 'id')

        for lot in open_lots:
            if remaining_to_consume <= 0:
                break
            taken = min(remaining_to_consume, lot.remaining_points)
            lot.remaining_points -= taken
            lot.is_fully_redeemed = lot.remaining_points == 0
            lot.save(update_fields=['remaining_points', 'is_fully_redeemed', 'updated_at'])
            remaining_to_consume -= taken

        if remaining_to_consume > 0:
            # Lots and summary disagree; refuse rather than overdraw
            raise ConcurrentModification(
                f"Open point lots of user {user.pk} are short by {remaining_to_consume} points"
            )

    @staticmethod
    def expiring_soon(user, days, now=None):
        now = now or timezone.now()
        total = PointLot.objects.filter(
            user=user,
            is_expired=False,
            remaining_points__gt=0,
            expires_at__isnull=False,
            expires_at__lte=now + timedelta(days=days),
        ).aggregate(total=Sum('remaining_points'))['total']
        return total or 0

    @staticmethod
    def fold(transactions):
        """Replay transactions in append order into summary field values"""
        values = {
            'total_points': 0,
            'used_points': 0,
            'expired_points': 0,
            'available_points': 0,
            'total_transactions': 0,
            'last_earned_at': None,
            'last_used_at': None,
        }
        for txn in transactions:
            delta = SummaryDelta.for_entry(txn.kind, txn.points, at=txn.created_at)
            values['total_points'] += delta.total_points
            values['used_points'] += delta.used_points
            values['expired_points'] += delta.expired_points
            values['available_points'] += delta.available_points
            values['total_transactions'] += 1
            if delta.earned_at:
                values['last_earned_at'] = delta.earned_at
            if delta.used_at:
                values['last_used_at'] = delta.used_at
        values['level'] = int(TierCalculator.tier_for(values['total_points']))
        return values

    @classmethod
    def rebuild(cls, user, commit=False):
        """
        Recompute the summary purely from the ledger.

        Returns an unsaved UserPointSummary unless ``commit`` is set, in which
        case the cached row and the user's lots are overwritten. Committing
        should happen inside the user's critical section.
        """
        values = cls.fold(LedgerStore.history(user))
        if not commit:
            return UserPointSummary(user=user, **values)

        summary = cls.lock_summary(user)
        drift = {
            field: (getattr(summary, field), value)
            for field, value in values.items()
            if getattr(summary, field) != value
        }
        if drift:
            logger.warning(f"Repairing points summary of user {user.pk}: {drift}")
        values['version'] = summary.version + 1
        UserPointSummary.objects.filter(pk=summary.pk).update(updated_at=timezone.now(), **values)
        cls.repair_lots(user)
        summary.refresh_from_db()
        return summary

    @staticmethod
    def _replay(user):
        remaining = {}
        expired = set()
        lot_owner = dict(PointLot.objects.filter(user=user).values_list('id', 'transaction_id'))

        for txn in LedgerStore.history(user):
            if txn.kind in CREDIT_KINDS:
                remaining[txn.id] = txn.points
            elif txn.kind == TransactionKind.REDEEMED:
                to_consume = -txn.points
                for credit_id in sorted(remaining):
                    if to_consume <= 0:
                        break
                    taken = min(to_consume, remaining[credit_id])
                    remaining[credit_id] -= taken
                    to_consume -= taken
            elif txn.kind == TransactionKind.EXPIRED and txn.reference_id:
                credit_id = lot_owner.get(int(txn.reference_id))
                if credit_id in remaining:
                    remaining[credit_id] = 0
                    expired.add(credit_id)
        return remaining, expired

    @classmethod
    def replay_lots(cls, user):
        """
        Remaining points per credit transaction id, derived from the ledger.

        Redemptions drain the oldest open credits; expirations reference their
        lot explicitly.
        """
        remaining, _ = cls._replay(user)
        return remaining

    @classmethod
    def expected_lots(cls, user):
        """(remaining_points, is_expired, is_fully_redeemed) per credit transaction id"""
        remaining, expired = cls._replay(user)
        return {
            credit_id: (points, credit_id in expired, points == 0 and credit_id not in expired)
            for credit_id, points in remaining.items()
        }

    @classmethod
    def lot_drift(cls, user):
        """Lots whose stored state disagrees with the ledger, as {transaction_id: (stored, expected)}"""
        stored = {
            lot.transaction_id: (lot.remaining_points, lot.is_expired, lot.is_fully_redeemed)
            for lot in PointLot.objects.filter(user=user)
        }
        return {
            credit_id: (stored.get(credit_id), state)
            for credit_id, state in cls.expected_lots(user).items()
            if stored.get(credit_id) != state
        }

    @classmethod
    def repair_lots(cls, user):
        """Reset the user's lots from a ledger replay; returns the number of lots changed"""
        drift = cls.lot_drift(user)
        if not drift:
            return 0

        logger.warning(f"Repairing point lots of user {user.pk}: {drift}")
        lots = {
            lot.transaction_id: lot
            for lot in PointLot.objects.select_for_update().filter(user=user, transaction_id__in=list(drift))
        }
        for credit_id, (_, (remaining, is_expired, is_fully_redeemed)) in drift.items():
            lot = lots.get(credit_id)
            if lot is None:
                lot = cls.open_lot(LedgerStore.get(credit_id))
            lot.remaining_points = remaining
            lot.is_expired = is_expired
            lot.is_fully_redeemed = is_fully_redeemed
            lot.save(update_fields=['remaining_points', 'is_expired', 'is_fully_redeemed', 'updated_at'])
        return len(drift)
