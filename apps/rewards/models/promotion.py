from django.db import models
from django.utils import timezone


class PromotionType(models.TextChoices):
    DISCOUNT = 'DISCOUNT', 'Discount'
    FREE_SERVICE = 'FREE_SERVICE', 'Free Service'
    CASHBACK = 'CASHBACK', 'Cashback'
    OTHER = 'OTHER', 'Other'


class Promotion(models.Model):
    """Redemption catalog entry that can be claimed with points"""
    code = models.CharField(max_length=50, unique=True)
    description = models.CharField(max_length=255, blank=True)
    required_points = models.PositiveIntegerField(null=True, blank=True)
    promotion_type = models.CharField(max_length=20, choices=PromotionType.choices, default=PromotionType.DISCOUNT)
    discount_percent = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)
    max_discount_amount = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    valid_from = models.DateTimeField()
    valid_to = models.DateTimeField()
    is_active = models.BooleanField(default=True)
    max_usage_per_user = models.PositiveIntegerField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'reward_promotions'
        ordering = ['required_points', 'code']
        verbose_name = 'Promotion'
        verbose_name_plural = 'Promotions'

    def __str__(self):
        return f"{self.code} - {self.required_points} points"

    @property
    def is_reward_promotion(self):
        return bool(self.required_points)

    def is_valid_at(self, moment=None):
        moment = moment or timezone.now()
        return self.is_active and self.valid_from <= moment <= self.valid_to

    @classmethod
    def claimable(cls, moment=None):
        """Active reward promotions whose validity window covers ``moment``"""
        moment = moment or timezone.now()
        return cls.objects.filter(
            is_active=True,
            required_points__gt=0,
            valid_from__lte=moment,
            valid_to__gte=moment,
        )
