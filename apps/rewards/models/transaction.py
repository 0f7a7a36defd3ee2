from django.conf import settings
from django.db import models

from ..exceptions import ImmutableTransactionError


class TransactionKind(models.TextChoices):
    EARNED = 'EARNED', 'Points Earned'
    BONUS = 'BONUS', 'Bonus Points'
    REFERRAL = 'REFERRAL', 'Referral Points'
    REDEEMED = 'REDEEMED', 'Points Redeemed'
    EXPIRED = 'EXPIRED', 'Points Expired'
    ADMIN_GRANT = 'ADMIN_GRANT', 'Admin Grant'


# Kinds that add to a user's lifetime total
CREDIT_KINDS = (
    TransactionKind.EARNED,
    TransactionKind.BONUS,
    TransactionKind.REFERRAL,
    TransactionKind.ADMIN_GRANT,
)
# Credit kinds whose points lapse after REWARDS_POINTS_EXPIRY_DAYS
EXPIRING_KINDS = (
    TransactionKind.EARNED,
    TransactionKind.BONUS,
    TransactionKind.REFERRAL,
)
DEBIT_KINDS = (
    TransactionKind.REDEEMED,
    TransactionKind.EXPIRED,
)


class PointTransactionQuerySet(models.QuerySet):
    """Ledger rows may be read and appended, never bulk-updated or deleted"""

    def update(self, **kwargs):
        raise ImmutableTransactionError()

    def delete(self):
        raise ImmutableTransactionError()


class PointTransaction(models.Model):
    """Append-only ledger entry; every balance fact is a fold over these rows"""
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='point_transactions')
    points = models.IntegerField()  # Positive for credits, negative for redemption/expiration
    kind = models.CharField(max_length=20, choices=TransactionKind.choices)
    reason = models.CharField(max_length=100)
    description = models.CharField(max_length=255, blank=True)
    reference_type = models.CharField(max_length=50, blank=True, default='')
    reference_id = models.CharField(max_length=100, blank=True, null=True)  # Idempotency key
    promotion = models.ForeignKey(
        'Promotion', on_delete=models.PROTECT, null=True, blank=True, related_name='redemptions'
    )
    balance_after = models.IntegerField()  # Available points once this entry committed
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    expires_at = models.DateTimeField(null=True, blank=True)

    objects = PointTransactionQuerySet.as_manager()

    class Meta:
        db_table = 'reward_point_transactions'
        ordering = ['-created_at', '-id']
        verbose_name = 'Point Transaction'
        verbose_name_plural = 'Point Transactions'
        indexes = [
            models.Index(fields=['user', 'created_at', 'id'], name='reward_txn_user_created_idx'),
            models.Index(fields=['user', 'kind'], name='reward_txn_user_kind_idx'),
        ]
        constraints = [
            # NULL reference_id never collides, so only keyed requests are deduplicated
            models.UniqueConstraint(
                fields=['user', 'kind', 'reference_type', 'reference_id'],
                name='reward_txn_unique_reference',
            ),
        ]

    def __str__(self):
        return f"{self.user_id} - {self.points} points ({self.get_kind_display()})"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ImmutableTransactionError()
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ImmutableTransactionError()
