"""
Serializers for credits requested by admins and other platform services.
"""
from rest_framework import serializers
from ..services import RewardIntegrationService


class AdminGrantSerializer(serializers.Serializer):
    """
    Serializer for manual point grants.
    Used for: POST /api/reward-points/admin/add/
    """
    user_id = serializers.IntegerField(min_value=1)
    points = serializers.IntegerField(min_value=1)
    reason = serializers.CharField(max_length=100)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    reference_id = serializers.CharField(max_length=100, required=False, allow_null=True, default=None)


class AwardActionSerializer(serializers.Serializer):
    """
    Serializer for platform reward actions.
    Used for: POST /api/reward-points/internal/award/
    """
    user_id = serializers.IntegerField(min_value=1)
    action = serializers.ChoiceField(choices=sorted(RewardIntegrationService.ACTION_REWARDS))
    reference_id = serializers.CharField(max_length=100, required=False, allow_null=True, default=None)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
