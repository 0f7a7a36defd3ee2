"""
Tests for the reward points HTTP endpoints.
"""
from datetime import timedelta

import pytest
from django.urls import reverse
from django.utils import timezone
from rest_framework import status

from apps.rewards.models import PointTransaction, TransactionKind
from apps.rewards.services import BalanceProjector, RewardPointsService
from tests.factories import PromotionFactory, UserFactory


@pytest.mark.django_db
class TestAccountViews:

    def test_requires_authentication(self, api_client):
        response = api_client.get(reverse('rewards:summary'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data['msg'] == 'Authentication required'

    def test_summary(self, auth_client, test_user):
        RewardPointsService.earn(test_user, 600, 'Booking completed', expires_at=timezone.now() + timedelta(days=3))

        response = auth_client.get(reverse('rewards:summary'))

        assert response.status_code == status.HTTP_200_OK
        data = response.data['data']
        assert data['summary']['available_points'] == 600
        assert data['summary']['level_name'] == 'Silver'
        assert data['level']['next_level_points'] == 2000
        assert data['expiring_soon'] == 600

    def test_transactions_paginated(self, auth_client, test_user):
        for points in (10, 20, 30):
            RewardPointsService.earn(test_user, points, 'Earned')

        response = auth_client.get(reverse('rewards:transactions'), {'page': 1, 'page_size': 2})

        assert response.status_code == status.HTTP_200_OK
        data = response.data['data']
        assert [item['points'] for item in data['list']] == [30, 20]
        assert data['list'][0]['kind_display'] == 'Points Earned'
        assert data['page']['total'] == 3
        assert data['page']['hasNext'] is True

    def test_transactions_reject_unknown_kind(self, auth_client):
        response = auth_client.get(reverse('rewards:transactions'), {'kind': 'STOLEN'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_level(self, auth_client, test_user):
        RewardPointsService.earn(test_user, 2500, 'Earned')

        response = auth_client.get(reverse('rewards:level'))

        assert response.data['data']['level'] == 3
        assert response.data['data']['level_name'] == 'Gold'
        assert response.data['data']['points_to_next_level'] == 2500


@pytest.mark.django_db
class TestRedemptionViews:

    def test_check_balance(self, auth_client, test_user):
        RewardPointsService.earn(test_user, 300, 'Earned')

        response = auth_client.get(reverse('rewards:check_balance'), {'required_points': 200})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['data'] == {
            'has_enough': True,
            'required_points': 200,
            'available_points': 300,
            'remaining_points': 100,
        }

    def test_check_balance_requires_points(self, auth_client):
        response = auth_client.get(reverse('rewards:check_balance'))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'required_points' in response.data['errors']

    def test_use_points(self, auth_client, test_user):
        RewardPointsService.earn(test_user, 500, 'Earned')

        response = auth_client.post(reverse('rewards:use'), {
            'points': 200,
            'reason': 'Service discount',
            'reference_type': 'booking',
            'reference_id': 'b-1',
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['data']['success'] is True
        assert response.data['data']['remaining_points'] == 300

    def test_use_points_replay(self, auth_client, test_user):
        RewardPointsService.earn(test_user, 500, 'Earned')
        payload = {'points': 200, 'reason': 'Service discount', 'reference_id': 'b-1'}

        first = auth_client.post(reverse('rewards:use'), payload, format='json')
        second = auth_client.post(reverse('rewards:use'), payload, format='json')

        assert second.data['data']['transaction_id'] == first.data['data']['transaction_id']
        assert second.data['data']['replayed'] is True
        assert PointTransaction.objects.filter(user=test_user, kind=TransactionKind.REDEEMED).count() == 1

    def test_use_points_insufficient(self, auth_client, test_user):
        RewardPointsService.earn(test_user, 100, 'Earned')

        response = auth_client.post(reverse('rewards:use'), {'points': 150, 'reason': 'Too much'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['errors']['error_code'] == 'INSUFFICIENT_BALANCE'
        assert response.data['data']['shortfall'] == 50
        assert response.data['data']['remaining_points'] == 100

    def test_use_points_validates_input(self, auth_client):
        response = auth_client.post(reverse('rewards:use'), {'points': 0, 'reason': 'Zero'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'points' in response.data['errors']

    def test_promotions_and_use_promotion(self, auth_client, test_user):
        promotion = PromotionFactory(required_points=400)
        RewardPointsService.earn(test_user, 500, 'Earned')

        listing = auth_client.get(reverse('rewards:promotions'))
        assert [item['code'] for item in listing.data['data']] == [promotion.code]

        response = auth_client.post(reverse('rewards:use_promotion'), {'promotion_id': promotion.id}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['data']['remaining_points'] == 100

    def test_use_unknown_promotion(self, auth_client):
        response = auth_client.post(reverse('rewards:use_promotion'), {'promotion_id': 12345}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['errors']['error_code'] == 'PROMOTION_UNAVAILABLE'


@pytest.mark.django_db
class TestLeaderboardView:

    def test_leaderboard(self, auth_client, test_user):
        RewardPointsService.earn(test_user, 700, 'Earned')
        RewardPointsService.earn(UserFactory(), 300, 'Earned')

        response = auth_client.get(reverse('rewards:leaderboard'), {'limit': 1})

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data['data']) == 1
        assert response.data['data'][0]['user_id'] == test_user.pk
        assert response.data['data'][0]['level_color'] == '#C0C0C0'


@pytest.mark.django_db
class TestAdminView:

    def test_staff_can_grant(self, api_client, staff_user, test_user):
        api_client.force_authenticate(user=staff_user)

        response = api_client.post(reverse('rewards:admin_add'), {
            'user_id': test_user.pk,
            'points': 250,
            'reason': 'Service recovery',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['data']['kind'] == TransactionKind.ADMIN_GRANT
        assert response.data['data']['expires_at'] is None
        assert BalanceProjector.get_summary(test_user).available_points == 250

    def test_regular_user_cannot_grant(self, auth_client, test_user):
        response = auth_client.post(reverse('rewards:admin_add'), {
            'user_id': test_user.pk,
            'points': 250,
            'reason': 'Self service',
        }, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert BalanceProjector.get_summary(test_user).available_points == 0

    def test_grant_to_unknown_user(self, api_client, staff_user):
        api_client.force_authenticate(user=staff_user)

        response = api_client.post(reverse('rewards:admin_add'), {
            'user_id': 999999,
            'points': 10,
            'reason': 'Nobody',
        }, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestIntegrationView:

    @pytest.fixture
    def service_client(self, api_client, staff_user):
        api_client.force_authenticate(user=staff_user)
        return api_client

    def test_award_action(self, service_client, test_user):
        response = service_client.post(reverse('rewards:internal_award'), {
            'user_id': test_user.pk,
            'action': 'BOOKING_COMPLETED',
            'reference_id': 'booking-9',
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['data']['available_points'] == 50
        assert BalanceProjector.get_summary(test_user).available_points == 50

    def test_regular_user_cannot_award_themselves(self, auth_client, test_user):
        for index in range(3):
            response = auth_client.post(reverse('rewards:internal_award'), {
                'user_id': test_user.pk,
                'action': 'REFERRAL',
                'reference_id': f'referral-{index}',
            }, format='json')

            assert response.status_code == status.HTTP_403_FORBIDDEN

        summary = BalanceProjector.get_summary(test_user)
        assert summary.total_points == 0
        assert not PointTransaction.objects.filter(user=test_user).exists()

    def test_award_requires_reference_for_repeatable_actions(self, service_client, test_user):
        response = service_client.post(reverse('rewards:internal_award'), {
            'user_id': test_user.pk,
            'action': 'BOOKING_COMPLETED',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_award_to_unknown_user(self, service_client):
        response = service_client.post(reverse('rewards:internal_award'), {
            'user_id': 999999,
            'action': 'FIRST_BOOKING',
        }, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_unknown_action(self, service_client, test_user):
        response = service_client.post(reverse('rewards:internal_award'), {
            'user_id': test_user.pk,
            'action': 'HACKED',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'action' in response.data['errors']
