"""
Reward points account query views.
"""
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated

from apps.common.utils import error_response, page_payload, success_response
from ..models import TransactionKind
from ..services import RewardPointsService
from ..serializers import LevelInfoSerializer, PointsOverviewSerializer, PointTransactionListSerializer


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_points_summary(request):
    """Get user's balance, tier progress and points expiring soon"""
    overview = RewardPointsService.get_points_overview(request.user)
    serializer = PointsOverviewSerializer(overview)
    return success_response(data=serializer.data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_points_transactions(request):
    """Get user's points transaction history, newest first"""
    try:
        page = int(request.GET.get('page', 1))
        page_size = int(request.GET.get('page_size', 20))
    except ValueError:
        return error_response(message='page and page_size must be integers')

    kind = request.GET.get('kind')
    if kind and kind not in TransactionKind.values:
        return error_response(message=f'Unknown transaction kind: {kind}')

    result = RewardPointsService.list_transactions(request.user, page=page, page_size=page_size, kind=kind)
    serializer = PointTransactionListSerializer(result.items, many=True)
    return success_response(data=page_payload(serializer.data, result.page, result.page_size, result.total))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_points_level(request):
    level = RewardPointsService.get_level(request.user)
    return success_response(data=LevelInfoSerializer(level).data)
