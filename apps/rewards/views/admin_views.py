"""
Privileged point grants.
"""
from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAdminUser

from apps.common.utils import error_response, success_response
from ..services import RewardPointsService
from ..serializers import AdminGrantSerializer, PointTransactionSerializer


@api_view(['POST'])
@permission_classes([IsAdminUser])
def admin_add_points(request):
    """Grant non-expiring points to a user"""
    serializer = AdminGrantSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response(message='Invalid grant data', errors=serializer.errors)

    data = serializer.validated_data
    User = get_user_model()
    try:
        user = User.objects.get(pk=data['user_id'])
    except User.DoesNotExist:
        return error_response(message='User not found', status_code=status.HTTP_404_NOT_FOUND)

    transaction = RewardPointsService.admin_grant(
        user,
        data['points'],
        data['reason'],
        description=data['description'],
        granted_by=request.user,
        reference_id=data['reference_id'],
    )
    return success_response(
        data=PointTransactionSerializer(transaction).data,
        message=f"Granted {data['points']} points",
        status_code=status.HTTP_201_CREATED,
    )
