from rest_framework import serializers
from ..models import Promotion


class PromotionSerializer(serializers.ModelSerializer):
    """Serializer for redemption catalog entries"""
    promotion_type_display = serializers.CharField(source='get_promotion_type_display', read_only=True)

    class Meta:
        model = Promotion
        fields = [
            'id', 'code', 'description', 'required_points', 'promotion_type',
            'promotion_type_display', 'discount_percent', 'max_discount_amount',
            'valid_from', 'valid_to', 'max_usage_per_user'
        ]
        read_only_fields = fields
