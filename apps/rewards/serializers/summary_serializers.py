"""
Point summary serializers.
"""
from rest_framework import serializers
from ..models import UserPointSummary


class UserPointSummarySerializer(serializers.ModelSerializer):
    """
    Serializer for a user's cached balance.
    Used for: GET /api/reward-points/me/summary/
    """
    level_name = serializers.CharField(read_only=True)

    class Meta:
        model = UserPointSummary
        fields = [
            'total_points', 'available_points', 'used_points', 'expired_points',
            'total_transactions', 'level', 'level_name', 'last_earned_at',
            'last_used_at', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class LevelInfoSerializer(serializers.Serializer):
    """Serializer for tier progress"""
    level = serializers.IntegerField()
    level_name = serializers.CharField()
    level_color = serializers.CharField()
    total_points = serializers.IntegerField()
    next_level_points = serializers.IntegerField(allow_null=True)
    points_to_next_level = serializers.IntegerField()
    progress_percent = serializers.FloatField()


class PointsOverviewSerializer(serializers.Serializer):
    summary = UserPointSummarySerializer()
    level = LevelInfoSerializer()
    expiring_soon = serializers.IntegerField()
