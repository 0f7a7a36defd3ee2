"""
Reward points integration views (internal API endpoints for other apps).
"""
from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAdminUser

from apps.common.utils import error_response, success_response
from ..services import RewardIntegrationService, RewardPointsService
from ..serializers import AwardActionSerializer, PointTransactionListSerializer


@api_view(['POST'])
@permission_classes([IsAdminUser])
def internal_award_points(request):
    """
    Award the fixed points for a platform action to ``user_id``.

    Only staff service accounts may call this. Deliveries of the same event
    (same action and reference_id) credit once.
    """
    serializer = AwardActionSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response(message='Invalid award data', errors=serializer.errors)

    data = serializer.validated_data
    User = get_user_model()
    try:
        user = User.objects.get(pk=data['user_id'])
    except User.DoesNotExist:
        return error_response(message='User not found', status_code=status.HTTP_404_NOT_FOUND)

    try:
        transaction = RewardIntegrationService.award(
            user, data['action'], reference_id=data['reference_id'], description=data['description']
        )
    except ValueError as e:
        return error_response(message=str(e))

    summary = RewardPointsService.get_summary(user)
    return success_response(
        data={
            'transaction': PointTransactionListSerializer(transaction).data,
            'available_points': summary.available_points,
            'level': summary.level,
        },
        message=f"Awarded {transaction.points} points",
    )
