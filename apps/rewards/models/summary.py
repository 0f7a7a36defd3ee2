from django.conf import settings
from django.db import models

from .tier import Tier


class UserPointSummary(models.Model):
    """
    Cached per-user projection of the ledger.

    ``version`` is bumped on every write so that concurrent writers can detect
    a lost update with a compare-and-swap.
    """
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='point_summary')
    total_points = models.IntegerField(default=0)  # Lifetime credited points
    used_points = models.IntegerField(default=0)
    expired_points = models.IntegerField(default=0)
    available_points = models.IntegerField(default=0)
    level = models.PositiveSmallIntegerField(choices=Tier.choices, default=Tier.BRONZE)
    total_transactions = models.IntegerField(default=0)
    last_earned_at = models.DateTimeField(null=True, blank=True)
    last_used_at = models.DateTimeField(null=True, blank=True)
    version = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'reward_point_summaries'
        verbose_name = 'User Point Summary'
        verbose_name_plural = 'User Point Summaries'
        indexes = [
            models.Index(fields=['-total_points', 'created_at'], name='reward_summary_rank_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(total_points__gte=0)
                    & models.Q(used_points__gte=0)
                    & models.Q(expired_points__gte=0)
                    & models.Q(available_points__gte=0)
                ),
                name='reward_summary_non_negative',
            ),
            models.CheckConstraint(
                condition=models.Q(
                    total_points=models.F('used_points') + models.F('expired_points') + models.F('available_points')
                ),
                name='reward_summary_balanced',
            ),
        ]

    def __str__(self):
        return f"{self.user_id} - {self.available_points}/{self.total_points} points"

    @property
    def tier(self):
        return Tier(self.level)

    @property
    def level_name(self):
        return self.tier.label

    def balance_fields(self):
        """Ledger-derived fields, used to compare the cache with a rebuild"""
        return {
            'total_points': self.total_points,
            'used_points': self.used_points,
            'expired_points': self.expired_points,
            'available_points': self.available_points,
            'level': self.level,
            'total_transactions': self.total_transactions,
            'last_earned_at': self.last_earned_at,
            'last_used_at': self.last_used_at,
        }
