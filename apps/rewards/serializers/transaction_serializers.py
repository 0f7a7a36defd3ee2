"""
Point transaction serializers for list and detail display.
"""
from rest_framework import serializers
from ..models import PointTransaction


class PointTransactionListSerializer(serializers.ModelSerializer):
    """
    Serializer for transaction history - minimal fields for list display.
    Used for: GET /api/reward-points/me/transactions/
    """
    kind_display = serializers.CharField(source='get_kind_display', read_only=True)

    class Meta:
        model = PointTransaction
        fields = ['id', 'kind', 'kind_display', 'points', 'reason', 'balance_after', 'created_at', 'expires_at']
        read_only_fields = fields


class PointTransactionSerializer(serializers.ModelSerializer):
    """Serializer for a single ledger entry with its audit references"""
    kind_display = serializers.CharField(source='get_kind_display', read_only=True)

    class Meta:
        model = PointTransaction
        fields = [
            'id', 'user', 'kind', 'kind_display', 'points', 'reason', 'description',
            'reference_type', 'reference_id', 'promotion', 'balance_after',
            'created_at', 'expires_at'
        ]
        read_only_fields = fields
