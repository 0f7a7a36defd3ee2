"""
Append-only store for point transactions.
"""
from dataclasses import dataclass
from typing import List, Optional

from django.conf import settings
from django.db import IntegrityError
from django.db.models import Sum

from ..exceptions import ConcurrentModification, InvalidAmount
from ..models import PointTransaction
from ..models.transaction import CREDIT_KINDS, DEBIT_KINDS


@dataclass
class TransactionPage:
    items: List[PointTransaction]
    page: int
    page_size: int
    total: int

    @property
    def has_next(self):
        return self.page * self.page_size < self.total


class LedgerStore:
    """Reads and appends ledger rows. There is no update and no delete."""

    @staticmethod
    def append(user, kind, points, reason, balance_after, description='',
               reference_type='', reference_id=None, expires_at=None, promotion=None):
        """
        Append one transaction.

        Must run inside the caller's atomic block so that the row only becomes
        visible together with the matching summary update.
        """
        if kind in CREDIT_KINDS and points <= 0:
            raise InvalidAmount(f"{kind} entries must carry positive points")
        if kind in DEBIT_KINDS and points >= 0:
            raise InvalidAmount(f"{kind} entries must carry negative points")

        try:
            return PointTransaction.objects.create(
                user=user,
                kind=kind,
                points=points,
                reason=reason,
                description=description or '',
                reference_type=reference_type or '',
                reference_id=reference_id,
                promotion=promotion,
                balance_after=balance_after,
                expires_at=expires_at,
            )
        except IntegrityError as exc:
            if reference_id is None:
                raise
            # Another writer appended the same keyed request first; the retry
            # will find it and replay it
            raise ConcurrentModification(
                f"{kind} {reference_type}:{reference_id} was appended concurrently"
            ) from exc

    @staticmethod
    def find_by_reference(user, kinds, reference_type, reference_id) -> Optional[PointTransaction]:
        if reference_id is None:
            return None
        return PointTransaction.objects.filter(
            user=user,
            kind__in=kinds,
            reference_type=reference_type or '',
            reference_id=reference_id,
        ).order_by('id').first()

    @staticmethod
    def list_by_user(user, page=1, page_size=20, kind=None) -> TransactionPage:
        """Newest first"""
        page = max(int(page), 1)
        page_size = min(max(int(page_size), 1), settings.REWARDS_MAX_PAGE_SIZE)

        queryset = PointTransaction.objects.filter(user=user)
        if kind:
            queryset = queryset.filter(kind=kind)
        queryset = queryset.order_by('-created_at', '-id')

        start = (page - 1) * page_size
        return TransactionPage(
            items=list(queryset[start:start + page_size]),
            page=page,
            page_size=page_size,
            total=queryset.count(),
        )

    @staticmethod
    def sum_by_user_and_kind(user, kinds) -> int:
        total = PointTransaction.objects.filter(user=user, kind__in=kinds).aggregate(
            total=Sum('points')
        )['total']
        return total or 0

    @staticmethod
    def history(user):
        """Full ledger for one user in append order"""
        return PointTransaction.objects.filter(user=user).order_by('created_at', 'id')

    @staticmethod
    def get(transaction_id):
        return PointTransaction.objects.get(pk=transaction_id)


