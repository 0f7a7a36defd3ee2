from django.contrib import admin
from .models import PointLot, PointTransaction, Promotion, UserPointSummary


class ReadOnlyAdmin(admin.ModelAdmin):
    """Rows maintained by the ledger services only"""

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(PointTransaction)
class PointTransactionAdmin(ReadOnlyAdmin):
    list_display = ['user', 'kind', 'points', 'balance_after', 'reason', 'reference_type', 'reference_id', 'created_at']
    list_filter = ['kind', 'created_at']
    search_fields = ['user__username', 'user__email', 'reason', 'reference_id']
    date_hierarchy = 'created_at'


@admin.register(UserPointSummary)
class UserPointSummaryAdmin(ReadOnlyAdmin):
    list_display = ['user', 'available_points', 'total_points', 'used_points', 'expired_points', 'level', 'updated_at']
    list_filter = ['level']
    search_fields = ['user__username', 'user__email']


@admin.register(PointLot)
class PointLotAdmin(ReadOnlyAdmin):
    list_display = ['user', 'points_amount', 'remaining_points', 'earned_at', 'expires_at', 'is_expired', 'is_fully_redeemed']
    list_filter = ['is_expired', 'is_fully_redeemed', 'expires_at']
    search_fields = ['user__username']


@admin.register(Promotion)
class PromotionAdmin(admin.ModelAdmin):
    list_display = ['code', 'required_points', 'promotion_type', 'valid_from', 'valid_to', 'max_usage_per_user', 'is_active']
    list_filter = ['promotion_type', 'is_active', 'valid_from', 'valid_to']
    search_fields = ['code', 'description']
    list_editable = ['is_active']
