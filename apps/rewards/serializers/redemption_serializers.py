"""
Redemption request and result serializers.
"""
from rest_framework import serializers


class RedeemPointsSerializer(serializers.Serializer):
    """
    Serializer for custom point spending.
    Used for: POST /api/reward-points/use/
    """
    points = serializers.IntegerField(min_value=1)
    reason = serializers.CharField(max_length=100)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    reference_type = serializers.CharField(max_length=50, required=False, allow_blank=True, default='')
    reference_id = serializers.CharField(max_length=100, required=False, allow_null=True, default=None)


class RedeemPromotionSerializer(serializers.Serializer):
    """
    Serializer for claiming a catalog promotion.
    Used for: POST /api/reward-points/use-promotion/
    """
    promotion_id = serializers.IntegerField(min_value=1)
    reference_id = serializers.CharField(max_length=100, required=False, allow_null=True, default=None)


class CheckBalanceQuerySerializer(serializers.Serializer):
    required_points = serializers.IntegerField(min_value=1)


class RedemptionResultSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    message = serializers.CharField()
    remaining_points = serializers.IntegerField(allow_null=True)
    transaction_id = serializers.IntegerField(allow_null=True)
    error_code = serializers.CharField(allow_null=True)
    shortfall = serializers.IntegerField()
    replayed = serializers.BooleanField()


class BalanceCheckSerializer(serializers.Serializer):
    has_enough = serializers.BooleanField()
    required_points = serializers.IntegerField()
    available_points = serializers.IntegerField()
    remaining_points = serializers.IntegerField()
