"""
Tests for redemption: balance checks, replays and promotions.
"""
from datetime import timedelta

import pytest
from django.utils import timezone

from apps.rewards.exceptions import InvalidAmount
from apps.rewards.models import PointLot, PointTransaction, TransactionKind
from apps.rewards.services import (
    BalanceProjector, RedemptionCoordinator, RedemptionRequest, RewardPointsService
)
from tests.factories import ExpiredPromotionFactory, PromotionFactory


@pytest.mark.django_db
class TestRedeem:

    def test_redeem_within_balance(self, test_user):
        RewardPointsService.earn(test_user, 600, 'Booking completed')

        result = RewardPointsService.redeem(test_user, 200, 'Discount')
        summary = BalanceProjector.get_summary(test_user)

        assert result.success
        assert result.remaining_points == 400
        assert result.transaction_id is not None
        assert not result.replayed
        assert summary.available_points == 400
        assert summary.used_points == 200
        assert summary.total_points == 600
        assert summary.last_used_at is not None

    def test_over_redemption_writes_nothing(self, test_user):
        RewardPointsService.earn(test_user, 100, 'Booking completed')
        before = BalanceProjector.get_summary(test_user).balance_fields()

        result = RewardPointsService.redeem(test_user, 150, 'Discount')

        assert not result.success
        assert result.error_code == 'INSUFFICIENT_BALANCE'
        assert result.shortfall == 50
        assert result.remaining_points == 100
        assert not PointTransaction.objects.filter(user=test_user, kind=TransactionKind.REDEEMED).exists()
        assert BalanceProjector.get_summary(test_user).balance_fields() == before

    @pytest.mark.parametrize('points', [0, -10, 2.5])
    def test_invalid_amount_is_a_typed_failure(self, test_user, points):
        result = RewardPointsService.redeem(test_user, points, 'Discount')

        assert not result.success
        assert result.error_code == 'INVALID_AMOUNT'
        assert result.remaining_points is None
        assert not PointTransaction.objects.filter(user=test_user).exists()

    def test_same_reference_redeems_once(self, test_user):
        RewardPointsService.earn(test_user, 500, 'Booking completed')

        first = RewardPointsService.redeem(test_user, 200, 'Discount', reference_type='booking', reference_id='b-42')
        second = RewardPointsService.redeem(test_user, 200, 'Discount', reference_type='booking', reference_id='b-42')

        assert first == second
        assert second.replayed
        assert PointTransaction.objects.filter(user=test_user, kind=TransactionKind.REDEEMED).count() == 1
        assert BalanceProjector.get_summary(test_user).available_points == 300

    def test_replay_returns_original_remaining_points(self, test_user):
        RewardPointsService.earn(test_user, 500, 'Booking completed')
        first = RewardPointsService.redeem(test_user, 200, 'Discount', reference_id='r-1')
        RewardPointsService.redeem(test_user, 100, 'Discount', reference_id='r-2')

        replay = RewardPointsService.redeem(test_user, 200, 'Discount', reference_id='r-1')

        assert replay.remaining_points == first.remaining_points == 300

    def test_redemption_consumes_oldest_lot_first(self, test_user):
        older = RewardPointsService.earn(test_user, 100, 'First')
        newer = RewardPointsService.earn(test_user, 100, 'Second')

        RewardPointsService.redeem(test_user, 150, 'Discount')

        assert PointLot.objects.get(transaction=older).remaining_points == 0
        assert PointLot.objects.get(transaction=older).is_fully_redeemed
        assert PointLot.objects.get(transaction=newer).remaining_points == 50

    def test_redeem_request_object(self, test_user):
        RewardPointsService.earn(test_user, 100, 'Booking completed')

        result = RedemptionCoordinator.redeem(RedemptionRequest(user=test_user, points=100, reason='All in'))

        assert result.success
        assert result.remaining_points == 0


@pytest.mark.django_db
class TestCheckBalance:

    def test_enough(self, test_user):
        RewardPointsService.earn(test_user, 300, 'Booking completed')

        check = RewardPointsService.check_balance(test_user, 200)

        assert check.has_enough
        assert check.available_points == 300
        assert check.remaining_points == 100

    def test_not_enough_reserves_nothing(self, test_user):
        RewardPointsService.earn(test_user, 100, 'Booking completed')

        check = RewardPointsService.check_balance(test_user, 200)

        assert not check.has_enough
        assert check.remaining_points == 100
        assert BalanceProjector.get_summary(test_user).available_points == 100

    def test_invalid_amount(self, test_user):
        with pytest.raises(InvalidAmount):
            RewardPointsService.check_balance(test_user, 0)


@pytest.mark.django_db
class TestPromotions:

    def test_redeem_promotion(self, test_user):
        promotion = PromotionFactory(required_points=500)
        RewardPointsService.earn(test_user, 800, 'Booking completed')

        result = RewardPointsService.redeem_promotion(test_user, promotion.id)

        assert result.success
        assert result.remaining_points == 300
        txn = PointTransaction.objects.get(pk=result.transaction_id)
        assert txn.promotion == promotion
        assert txn.points == -500

    def test_expired_promotion_is_unavailable(self, test_user):
        promotion = ExpiredPromotionFactory()
        RewardPointsService.earn(test_user, 800, 'Booking completed')

        result = RewardPointsService.redeem_promotion(test_user, promotion.id)

        assert not result.success
        assert result.error_code == 'PROMOTION_UNAVAILABLE'
        assert result.remaining_points == 800

    def test_inactive_or_unknown_promotion(self, test_user):
        inactive = PromotionFactory(is_active=False)

        assert RewardPointsService.redeem_promotion(test_user, inactive.id).error_code == 'PROMOTION_UNAVAILABLE'
        assert RewardPointsService.redeem_promotion(test_user, 999999).error_code == 'PROMOTION_UNAVAILABLE'

    def test_usage_limit_per_user(self, test_user):
        promotion = PromotionFactory(required_points=100, max_usage_per_user=1)
        RewardPointsService.earn(test_user, 500, 'Booking completed')

        first = RewardPointsService.redeem_promotion(test_user, promotion.id)
        second = RewardPointsService.redeem_promotion(test_user, promotion.id)

        assert first.success
        assert not second.success
        assert second.error_code == 'PROMOTION_UNAVAILABLE'
        assert BalanceProjector.get_summary(test_user).available_points == 400

    def test_promotion_replay_by_reference_is_not_a_second_use(self, test_user):
        promotion = PromotionFactory(required_points=100, max_usage_per_user=1)
        RewardPointsService.earn(test_user, 500, 'Booking completed')

        first = RewardPointsService.redeem_promotion(test_user, promotion.id, reference_id='claim-1')
        again = RewardPointsService.redeem_promotion(test_user, promotion.id, reference_id='claim-1')

        assert again.success
        assert again.replayed
        assert again == first

    def test_promotion_requires_balance(self, test_user):
        promotion = PromotionFactory(required_points=500)
        RewardPointsService.earn(test_user, 100, 'Booking completed')

        result = RewardPointsService.redeem_promotion(test_user, promotion.id)

        assert result.error_code == 'INSUFFICIENT_BALANCE'
        assert result.shortfall == 400

    def test_available_promotions(self):
        current = PromotionFactory()
        ExpiredPromotionFactory()
        PromotionFactory(required_points=None)
        PromotionFactory(valid_from=timezone.now() + timedelta(days=1))

        assert list(RewardPointsService.available_promotions()) == [current]
