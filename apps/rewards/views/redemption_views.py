"""
Reward points redemption views.
"""
from dataclasses import asdict

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated

from apps.common.utils import error_response, success_response
from ..services import RewardPointsService
from ..serializers import (
    BalanceCheckSerializer, CheckBalanceQuerySerializer, PromotionSerializer,
    RedeemPointsSerializer, RedeemPromotionSerializer, RedemptionResultSerializer
)

# Typed redemption failures and the status they are reported with
FAILURE_STATUS = {
    'INSUFFICIENT_BALANCE': status.HTTP_400_BAD_REQUEST,
    'INVALID_AMOUNT': status.HTTP_400_BAD_REQUEST,
    'PROMOTION_UNAVAILABLE': status.HTTP_400_BAD_REQUEST,
}


def _redemption_response(result):
    data = RedemptionResultSerializer(asdict(result)).data
    if result.success:
        return success_response(data=data, message=result.message)
    return error_response(
        message=result.message,
        errors={'error_code': result.error_code},
        status_code=FAILURE_STATUS.get(result.error_code, status.HTTP_400_BAD_REQUEST),
        data=data,
    )


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def check_balance(request):
    """Advisory check whether the user can spend ``required_points``"""
    serializer = CheckBalanceQuerySerializer(data=request.GET)
    if not serializer.is_valid():
        return error_response(message='Invalid parameters', errors=serializer.errors)

    check = RewardPointsService.check_balance(request.user, serializer.validated_data['required_points'])
    return success_response(data=BalanceCheckSerializer(asdict(check)).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def use_points(request):
    """Spend points; repeating a request with the same reference_id returns the original result"""
    serializer = RedeemPointsSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response(message='Invalid redemption data', errors=serializer.errors)

    result = RewardPointsService.redeem(request.user, **serializer.validated_data)
    return _redemption_response(result)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def use_promotion(request):
    serializer = RedeemPromotionSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response(message='Invalid promotion data', errors=serializer.errors)

    result = RewardPointsService.redeem_promotion(
        request.user,
        serializer.validated_data['promotion_id'],
        reference_id=serializer.validated_data['reference_id'],
    )
    return _redemption_response(result)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_promotions(request):
    """List promotions that can currently be claimed with points"""
    promotions = RewardPointsService.available_promotions()
    return success_response(data=PromotionSerializer(promotions, many=True).data)
