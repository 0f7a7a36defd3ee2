"""
Expiration sweeper: turns lapsed, unconsumed points into EXPIRED ledger entries.
"""
import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, List

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import DatabaseError
from django.utils import timezone

from ..exceptions import RewardsError
from ..models import PointLot, TransactionKind
from .balance_projector import BalanceProjector
from .ledger_store import LedgerStore
from .unit_of_work import publish_after_commit, run_locked

logger = logging.getLogger(__name__)

LOT_REFERENCE_TYPE = 'point_lot'


@dataclass
class SweepReport:
    users_processed: int = 0
    transactions_created: int = 0
    points_expired: int = 0
    failed_users: Dict[int, str] = field(default_factory=dict)
    expired_by_user: Dict[int, int] = field(default_factory=dict)

    @property
    def failed(self):
        return bool(self.failed_users)


class ExpirationSweeper:
    """
    Expires the unconsumed remainder of lots whose ``expires_at`` has passed.

    Redemptions drain lots oldest first, so whatever a lot still holds at
    expiry is exactly what was never spent. A lot is closed in the same
    transaction that writes its EXPIRED entry, which is what makes a second
    sweep over the same window a no-op.
    """

    @staticmethod
    def due_lots(now=None, user=None):
        now = now or timezone.now()
        queryset = PointLot.objects.filter(
            expires_at__isnull=False,
            expires_at__lte=now,
            is_expired=False,
            remaining_points__gt=0,
        )
        if user is not None:
            queryset = queryset.filter(user=user)
        return queryset

    @classmethod
    def expire_user(cls, user, now=None) -> List[int]:
        """Expire one user's due lots; returns the points expired per entry"""
        now = now or timezone.now()

        def operation(summary):
            previous_level = summary.level
            expired = []
            for lot in cls.due_lots(now, user).select_for_update().order_by('earned_at', 'id'):
                points = lot.remaining_points
                txn = LedgerStore.append(
                    user=user,
                    kind=TransactionKind.EXPIRED,
                    points=-points,
                    reason='Points expired',
                    description=f"Points earned on {lot.earned_at.date()} expired",
                    reference_type=LOT_REFERENCE_TYPE,
                    reference_id=str(lot.id),
                    balance_after=summary.available_points - points,
                )
                BalanceProjector.apply(summary, txn)
                lot.remaining_points = 0
                lot.is_expired = True
                lot.save(update_fields=['remaining_points', 'is_expired', 'updated_at'])
                publish_after_commit(txn, summary, previous_level)
                expired.append(points)
            return expired

        return run_locked(user, operation)

    @classmethod
    def sweep(cls, now=None) -> SweepReport:
        """One pass over every user with due lots; per-user failures are logged and skipped"""
        now = now or timezone.now()
        report = SweepReport()
        user_ids = cls.due_lots(now).order_by().values_list('user_id', flat=True).distinct()
        users = get_user_model().objects.filter(pk__in=list(user_ids)).order_by('pk')

        for user in users:
            report.users_processed += 1
            try:
                expired = cls.expire_user(user, now)
            except (RewardsError, DatabaseError) as e:
                logger.exception(f"Points expiration failed for user {user.pk}: {e}")
                report.failed_users[user.pk] = str(e)
                continue

            if expired:
                report.transactions_created += len(expired)
                report.points_expired += sum(expired)
                report.expired_by_user[user.pk] = sum(expired)

        logger.info(
            f"Points expiration sweep finished: {report.points_expired} points in "
            f"{report.transactions_created} entries across {report.users_processed} users, "
            f"{len(report.failed_users)} failures"
        )
        return report

    @classmethod
    def run_forever(cls, interval=None, stop_event=None):
        """Sweep every ``interval`` seconds until ``stop_event`` is set"""
        interval = interval or settings.REWARDS_EXPIRATION_SWEEP_INTERVAL_SECONDS
        stop_event = stop_event or threading.Event()
        while not stop_event.is_set():
            cls.sweep()
            stop_event.wait(interval)
