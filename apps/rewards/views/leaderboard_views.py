from dataclasses import asdict

from django.conf import settings
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated

from apps.common.utils import error_response, success_response
from ..services import RewardPointsService
from ..serializers import LeaderboardEntrySerializer


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_leaderboard(request):
    """Top users by lifetime points"""
    try:
        limit = int(request.GET.get('limit', 10))
    except ValueError:
        return error_response(message='limit must be an integer')

    limit = max(1, min(limit, settings.REWARDS_LEADERBOARD_SNAPSHOT_SIZE))
    entries = RewardPointsService.get_leaderboard(limit)
    serializer = LeaderboardEntrySerializer([asdict(entry) for entry in entries], many=True)
    return success_response(data=serializer.data)
