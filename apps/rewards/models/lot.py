from django.conf import settings
from django.db import models


class PointLot(models.Model):
    """
    Unconsumed remainder of one credit transaction.

    Redemptions drain lots oldest-first by earn date and the expiration sweeper
    expires whatever is left once ``expires_at`` passes. Lots are bookkeeping
    for the ledger, not a source of truth: they can be rebuilt by replaying it.
    """
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='point_lots')
    transaction = models.OneToOneField('PointTransaction', on_delete=models.PROTECT, related_name='lot')
    points_amount = models.IntegerField()  # Original credited amount
    remaining_points = models.IntegerField()  # Not yet redeemed or expired
    earned_at = models.DateTimeField()
    expires_at = models.DateTimeField(null=True, blank=True)  # NULL for non-expiring grants
    is_expired = models.BooleanField(default=False)
    is_fully_redeemed = models.BooleanField(default=False)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'reward_point_lots'
        ordering = ['earned_at', 'id']
        verbose_name = 'Point Lot'
        verbose_name_plural = 'Point Lots'
        indexes = [
            models.Index(fields=['user', 'earned_at', 'id'], name='reward_lot_fifo_idx'),
            models.Index(fields=['expires_at', 'is_expired'], name='reward_lot_expiry_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(remaining_points__gte=0) & models.Q(remaining_points__lte=models.F('points_amount')),
                name='reward_lot_remaining_in_range',
            ),
        ]

    def __str__(self):
        return f"{self.user_id} - {self.remaining_points}/{self.points_amount} points"
